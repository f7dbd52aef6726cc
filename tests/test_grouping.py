"""Tests for target grouping and ordering."""

import pytest

from nxview.models import CollapsibleState, NxProject, TargetRecord, TargetViewItem
from nxview.views import build_target, group_targets, label_sort_key


@pytest.fixture
def nx_project() -> NxProject:
    return NxProject(project="app", root="apps/app")


def make_targets(nx_project: NxProject, declared: dict[str, dict]) -> list[TargetViewItem]:
    return [
        build_target(nx_project, name, TargetRecord.model_validate(record))
        for name, record in declared.items()
    ]


class TestLabelSortKey:
    """Tests for locale-aware label ordering."""

    def test_case_insensitive(self) -> None:
        """Test case does not dominate alphabetical order."""
        labels = ["build", "Apple", "cat"]
        assert sorted(labels, key=label_sort_key) == ["Apple", "build", "cat"]

    def test_lower_case_first_on_tie(self) -> None:
        """Test lower case sorts before upper case for otherwise equal labels."""
        assert sorted(["A", "a"], key=label_sort_key) == ["a", "A"]

    def test_accents_are_secondary(self) -> None:
        """Test accented letters sort next to their base letter."""
        labels = ["eclair", "zebra", "éclair", "ecru"]
        assert sorted(labels, key=label_sort_key) == ["eclair", "éclair", "ecru", "zebra"]

    def test_punctuation_and_symbols_first(self) -> None:
        """Test punctuation and symbols sort before digits and letters."""
        labels = ["build1", "build:prod", "{x}foo", "bar", "serve_x", "serve-static", "$deploy", "a"]
        assert sorted(labels, key=label_sort_key) == [
            "{x}foo",
            "$deploy",
            "a",
            "bar",
            "build:prod",
            "build1",
            "serve_x",
            "serve-static",
        ]

    def test_digits_before_letters(self) -> None:
        """Test digits sort before letters and compare character by character."""
        assert sorted(["e2e", "build", "10", "2"], key=label_sort_key) == ["10", "2", "build", "e2e"]

    def test_group_marker_sorts_first(self) -> None:
        """Test labels still carrying a brace marker precede plain labels."""
        labels = ["lint", "{fmt}check", "format"]
        assert sorted(labels, key=label_sort_key) == ["{fmt}check", "format", "lint"]


class TestGroupTargets:
    """Tests for group_targets."""

    def test_groups_before_ungrouped(self, nx_project: NxProject) -> None:
        """Test every group precedes every ungrouped target regardless of label."""
        targets = make_targets(
            nx_project,
            {
                "a-build": {},
                "zz-lint": {"group": "zz"},
                "b-test": {},
                "yy-e2e": {"group": "yy"},
            },
        )
        result = group_targets(nx_project, targets)
        assert [i.context_value for i in result] == ["group", "group", "target", "target"]
        assert [i.label for i in result] == ["yy", "zz", "a-build", "b-test"]

    def test_group_ids_and_hint(self, nx_project: NxProject) -> None:
        """Test group ids use the project name and lowered group name."""
        targets = make_targets(nx_project, {"lint": {"group": "Checks"}})
        (group,) = group_targets(nx_project, targets)
        assert group.id == "app:group:checks"
        assert group.label == "checks"
        assert group.collapsible == CollapsibleState.COLLAPSED
        assert group.nx_project == nx_project

    def test_case_fold_merge(self, nx_project: NxProject) -> None:
        """Test groups differing only in case merge into one sorted group."""
        targets = make_targets(
            nx_project,
            {
                "stylelint": {"group": "lint"},
                "eslint": {"group": "Lint"},
                "build": {},
            },
        )
        result = group_targets(nx_project, targets)
        groups = [i for i in result if i.context_value == "group"]
        assert len(groups) == 1
        assert groups[0].id.endswith(":group:lint")
        assert [t.label for t in groups[0].target_view_items] == ["eslint", "stylelint"]

    def test_members_sorted_within_group(self, nx_project: NxProject) -> None:
        """Test group members are sorted but not mixed with other siblings."""
        targets = make_targets(
            nx_project,
            {
                "test": {"group": "checks"},
                "a-ungrouped": {},
                "lint": {"group": "checks"},
            },
        )
        result = group_targets(nx_project, targets)
        assert [i.label for i in result] == ["checks", "a-ungrouped"]
        assert [t.label for t in result[0].target_view_items] == ["lint", "test"]

    def test_grouped_targets_only_inside_groups(self, nx_project: NxProject) -> None:
        """Test grouped targets are not repeated at the top level."""
        targets = make_targets(nx_project, {"lint": {"group": "checks"}, "build": {}})
        result = group_targets(nx_project, targets)
        assert "app:lint" not in [i.id for i in result]

    def test_ungrouped_sorted(self, nx_project: NxProject) -> None:
        """Test ungrouped targets are sorted alphabetically."""
        targets = make_targets(nx_project, {"serve": {}, "build": {}, "Deploy": {}})
        result = group_targets(nx_project, targets)
        assert [i.label for i in result] == ["build", "Deploy", "serve"]

    def test_rewritten_labels_in_groups(self, nx_project: NxProject) -> None:
        """Test same labels in different groups stay in their own group."""
        targets = make_targets(
            nx_project,
            {"{lint}all": {"group": "lint"}, "{format}all": {"group": "format"}},
        )
        result = group_targets(nx_project, targets)
        assert [i.label for i in result] == ["format", "lint"]
        assert [t.id for t in result[0].target_view_items] == ["app:{format}all"]
        assert [t.id for t in result[1].target_view_items] == ["app:{lint}all"]

    def test_empty(self, nx_project: NxProject) -> None:
        """Test no targets gives no items."""
        assert group_targets(nx_project, []) == []

    def test_does_not_mutate_input(self, nx_project: NxProject) -> None:
        """Test the input list keeps its order."""
        targets = make_targets(nx_project, {"b": {}, "a": {}})
        group_targets(nx_project, targets)
        assert [t.label for t in targets] == ["b", "a"]
