"""Tests for nxview TUI application."""

import pytest
from click.testing import CliRunner
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine
from textual.widgets import Tree

from nxview.cli import cli
from nxview.config import NxViewConfig
from nxview.models import (
    CollapsibleState,
    NxProject,
    NxTarget,
    ProjectViewItem,
    TargetGroupViewItem,
    TargetViewItem,
)
from nxview.state import CollapsibleStateStore
from nxview.tui import NxViewApp
from nxview.tui.render import describe_item, render_label
from nxview.views import create_list_view_strategy
from nxview.workspace import StaticWorkspaceProvider


@pytest.fixture
def store() -> CollapsibleStateStore:
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store = CollapsibleStateStore(engine)
    store.init_db()
    yield store
    engine.dispose()


@pytest.fixture
def app(provider: StaticWorkspaceProvider, store: CollapsibleStateStore) -> NxViewApp:
    strategy = create_list_view_strategy(provider, workspace_path="/ws")
    return NxViewApp(strategy, store=store)


def node_labels(node) -> list[str]:
    return [str(child.label) for child in node.children]


class TestDashboardCommand:
    """Tests for the dashboard command."""

    def test_dashboard_command_exists(self) -> None:
        """Test that dashboard command is registered."""
        runner = CliRunner()
        result = runner.invoke(cli, ["dashboard", "--help"])
        assert result.exit_code == 0
        assert "interactive TUI dashboard" in result.output

    def test_dashboard_help_shows_shortcuts(self) -> None:
        """Test that help shows keyboard shortcuts."""
        runner = CliRunner()
        result = runner.invoke(cli, ["dashboard", "--help"])
        assert "Keyboard shortcuts" in result.output
        assert "Quit" in result.output
        assert "Collapse all" in result.output


class TestTUIModule:
    """Tests for TUI module attributes."""

    def test_app_class_attributes(self) -> None:
        """Test NxViewApp has required attributes."""
        assert hasattr(NxViewApp, "TITLE")
        assert hasattr(NxViewApp, "BINDINGS")
        assert hasattr(NxViewApp, "CSS")

    def test_app_bindings(self) -> None:
        """Test NxViewApp has expected key bindings."""
        binding_keys = [b.key for b in NxViewApp.BINDINGS]
        assert "q" in binding_keys  # Quit
        assert "r" in binding_keys  # Refresh
        assert "c" in binding_keys  # Collapse all


class TestRender:
    """Tests for the rendering adapter."""

    def test_render_label(self) -> None:
        """Test labels are prefixed with the item's icon."""
        item = ProjectViewItem(
            id="app", label="app", nx_project=NxProject(project="app"), resource="/ws"
        )
        assert render_label(item) == "📦 app"

    def test_describe_configuration(self) -> None:
        """Test configuration details are listed."""
        item = TargetViewItem(
            id="app:build:production",
            label="production",
            nx_project=NxProject(project="app", root="apps/app"),
            nx_target=NxTarget(name="build", configuration="production"),
        )
        text = describe_item(item)
        assert "- **Kind:** target" in text
        assert "- **Target:** build" in text
        assert "- **Configuration:** production" in text
        assert "- **Root:** `apps/app`" in text

    def test_describe_group(self) -> None:
        """Test groups report their member count."""
        item = TargetGroupViewItem(
            id="app:group:checks",
            label="checks",
            nx_project=NxProject(project="app"),
            collapsible=CollapsibleState.COLLAPSED,
        )
        text = describe_item(item)
        assert text.startswith("# 🗂️ checks")
        assert "- **Targets:** 0" in text
        assert "- **Root:** `.`" in text


class TestNxViewApp:
    """Tests for the dashboard tree."""

    @pytest.mark.asyncio
    async def test_projects_loaded(self, app: NxViewApp) -> None:
        """Test the root lists every project, leaves without an expand arrow."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            tree = app.query_one("#project-tree", Tree)
            assert node_labels(tree.root) == ["📦 app", "📦 lib", "📦 inferred"]
            lib = tree.root.children[1]
            assert not lib.allow_expand

    @pytest.mark.asyncio
    async def test_expand_project(self, app: NxViewApp, store: CollapsibleStateStore) -> None:
        """Test expanding a project shows groups first and remembers the state."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            tree = app.query_one("#project-tree", Tree)
            project = tree.root.children[0]
            project.expand()
            await pilot.pause()
            await pilot.pause()

            assert node_labels(project) == ["🗂️ checks", "🗂️ fmt", "⚙️ build"]
            assert store.get("app") == CollapsibleState.EXPANDED

            project.collapse()
            await pilot.pause()
            assert store.get("app") == CollapsibleState.COLLAPSED

    @pytest.mark.asyncio
    async def test_restores_expanded_state(self, app: NxViewApp, store: CollapsibleStateStore) -> None:
        """Test remembered expanded nodes are populated on load."""
        store.set("app", CollapsibleState.EXPANDED)
        store.set("app:group:checks", CollapsibleState.EXPANDED)
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()
            await pilot.pause()
            tree = app.query_one("#project-tree", Tree)
            project = tree.root.children[0]
            assert project.is_expanded
            checks = project.children[0]
            assert node_labels(checks) == ["⚙️ lint", "⚙️ test"]

    @pytest.mark.asyncio
    async def test_refresh(self, app: NxViewApp, provider: StaticWorkspaceProvider) -> None:
        """Test refresh rebuilds the tree from the current snapshot."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            provider.update({"solo": {"root": "solo", "targets": {}}})
            await pilot.press("r")
            await pilot.pause()
            tree = app.query_one("#project-tree", Tree)
            assert node_labels(tree.root) == ["📦 solo"]


class TestSelectionMemory:
    """Tests for remembering the selected item between sessions."""

    @pytest.mark.asyncio
    async def test_selection_saved_without_overrides(
        self, provider: StaticWorkspaceProvider, store: CollapsibleStateStore
    ) -> None:
        """Test selecting a node persists only the view state."""
        config = NxViewConfig.load()
        config.snapshot_file = "other.json"
        config.server_url = "http://elsewhere:8000"
        app = NxViewApp(create_list_view_strategy(provider), store=store, config=config)

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            tree = app.query_one("#project-tree", Tree)
            tree.move_cursor(tree.root.children[1])
            await pilot.pause()
            await pilot.press("enter")
            await pilot.pause()

        saved = NxViewConfig.load()
        assert saved.last_selected == "lib"
        assert saved.snapshot_file == "workspace.json"
        assert saved.server_url is None

    @pytest.mark.asyncio
    async def test_selection_restored(
        self, provider: StaticWorkspaceProvider, store: CollapsibleStateStore
    ) -> None:
        """Test the cursor returns to the previously selected node."""
        NxViewConfig.remember_selection("inferred")
        app = NxViewApp(create_list_view_strategy(provider), store=store, config=NxViewConfig.load())

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()
            tree = app.query_one("#project-tree", Tree)
            assert tree.cursor_node is not None
            assert tree.cursor_node.data.id == "inferred"
