"""Grouping and ordering of a project's target layer."""

from functools import lru_cache

from pyuca import Collator

from nxview.models import (
    CollapsibleState,
    NxProject,
    TargetGroupViewItem,
    TargetViewItem,
    TargetViewTreeItem,
)


@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def label_sort_key(label: str) -> tuple:
    """Sort key following the Unicode root collation.

    Punctuation and symbols sort before digits, digits before letters;
    accents and case only break ties, lower case first.
    """
    return (_collator().sort_key(label), label)


def _tree_item_sort_key(item: TargetViewTreeItem) -> tuple[int, tuple]:
    # Groups always come before ungrouped targets
    rank = 0 if item.context_value == "group" else 1
    return (rank, label_sort_key(item.label))


def group_targets(
    nx_project: NxProject,
    targets: list[TargetViewItem],
) -> list[TargetViewTreeItem]:
    """Arrange a project's targets into group nodes followed by ungrouped targets.

    Group keys are matched case-insensitively and collected in order of first
    appearance. Groups are sorted by label ahead of the ungrouped targets,
    which are sorted by label too; each group's members are sorted on their
    own and never mixed with other siblings.
    """
    group_names: dict[str, None] = {}
    for target in targets:
        if target.group:
            group_names.setdefault(target.group.lower(), None)

    result: list[TargetViewTreeItem] = []
    for group_name in group_names:
        members = [t for t in targets if t.group and t.group.lower() == group_name]
        result.append(
            TargetGroupViewItem(
                id=f"{nx_project.project}:group:{group_name}",
                label=group_name,
                nx_project=nx_project,
                target_view_items=sorted(members, key=lambda t: label_sort_key(t.label)),
                collapsible=CollapsibleState.COLLAPSED,
            )
        )

    result.extend(t for t in targets if not t.group)
    result.sort(key=_tree_item_sort_key)
    return result
