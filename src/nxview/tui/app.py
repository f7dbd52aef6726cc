"""nxview dashboard: the workspace project tree in the terminal."""

from typing import Optional

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Markdown, Tree
from textual.widgets.tree import TreeNode

from nxview.config import NxViewConfig
from nxview.models import BaseViewItem, CollapsibleState, ViewItem
from nxview.state import CollapsibleStateStore
from nxview.tui.render import describe_item, render_label
from nxview.views import ProjectViewStrategy
from nxview.workspace import WorkspaceError


def _is_attached(node: TreeNode) -> bool:
    """Whether a node is still part of its tree (refreshes drop whole subtrees)."""
    while node.parent is not None:
        if node not in node.parent.children:
            return False
        node = node.parent
    return node is node.tree.root


class NxViewApp(App):
    """Browse projects, target groups, targets and configurations."""

    TITLE = "nxview"
    SUB_TITLE = "Nx Projects"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("c", "collapse_all", "Collapse All"),
    ]

    CSS = """
    #main-layout {
        height: 1fr;
    }

    #project-tree {
        width: 1fr;
        height: 1fr;
        padding: 0 1;
    }

    #detail-scroll {
        width: 2fr;
        height: 1fr;
        border-left: solid $primary;
    }

    #item-detail {
        padding: 1;
    }
    """

    def __init__(
        self,
        strategy: ProjectViewStrategy,
        store: Optional[CollapsibleStateStore] = None,
        config: Optional[NxViewConfig] = None,
    ) -> None:
        super().__init__()
        self.strategy = strategy
        self.store = store
        self._config = config
        self._last_selected = config.last_selected if config is not None else None
        self._restore_id = self._last_selected
        if config is not None:
            self.theme = config.theme

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            yield Tree("📂 Projects", id="project-tree")
            with VerticalScroll(id="detail-scroll"):
                yield Markdown("Select an item in the tree.", id="item-detail")
        yield Footer()

    async def on_mount(self) -> None:
        await self.load_projects()

    def _state_for(self, item: BaseViewItem) -> CollapsibleState:
        if self.store is None:
            return item.collapsible
        return self.store.resolve(item)

    async def load_projects(self) -> None:
        """Rebuild the tree from the root."""
        tree = self.query_one("#project-tree", Tree)
        tree.clear()
        tree.root.expand()
        try:
            items = await self.strategy.get_children()
        except WorkspaceError as e:
            self.notify(str(e), severity="error")
            return
        await self.add_items(tree.root, items)

    async def add_items(self, parent: TreeNode, items: Optional[list[ViewItem]]) -> None:
        """Add view items under a node, restoring persisted expanded state."""
        for item in items or []:
            state = self._state_for(item)
            if state == CollapsibleState.NONE:
                leaf = parent.add_leaf(render_label(item), data=item)
                self._maybe_restore_selection(leaf)
                continue
            node = parent.add(render_label(item), data=item)
            self._maybe_restore_selection(node)
            if state == CollapsibleState.EXPANDED:
                # Populated by the NodeExpanded handler
                node.expand()

    def _maybe_restore_selection(self, node: TreeNode) -> None:
        """Move the cursor to the node selected in the previous session."""
        if self._restore_id is None or node.data.id != self._restore_id:
            return
        self._restore_id = None
        tree = self.query_one("#project-tree", Tree)
        # Line numbers are assigned when the tree is next rendered
        tree.call_after_refresh(tree.move_cursor, node)
        self.query_one("#item-detail", Markdown).update(describe_item(node.data))

    async def populate_node(self, node: TreeNode) -> None:
        """Replace a node's children with a fresh expansion of its item."""
        item = node.data
        if item is None:
            return
        try:
            children = await self.strategy.get_children(item)
        except WorkspaceError as e:
            self.notify(str(e), severity="error")
            return
        if not _is_attached(node):
            return
        node.remove_children()
        await self.add_items(node, children)

    @on(Tree.NodeExpanded, "#project-tree")
    async def on_project_tree_expanded(self, event: Tree.NodeExpanded) -> None:
        node = event.node
        if node.data is None:
            return
        if self.store is not None:
            self.store.set(node.data.id, CollapsibleState.EXPANDED)
        await self.populate_node(node)

    @on(Tree.NodeCollapsed, "#project-tree")
    def on_project_tree_collapsed(self, event: Tree.NodeCollapsed) -> None:
        node = event.node
        if node.data is not None and self.store is not None:
            self.store.set(node.data.id, CollapsibleState.COLLAPSED)

    @on(Tree.NodeSelected, "#project-tree")
    def on_project_tree_selected(self, event: Tree.NodeSelected) -> None:
        """Show details for the selected item."""
        item = event.node.data
        if item is None:
            return
        self.query_one("#item-detail", Markdown).update(describe_item(item))
        if self._config is not None and item.id != self._last_selected:
            self._last_selected = item.id
            NxViewConfig.remember_selection(item.id)

    async def action_refresh(self) -> None:
        """Reload the workspace and rebuild the tree."""
        provider = getattr(self.strategy, "provider", None)
        reset = getattr(provider, "reset", None)
        if reset is not None:
            reset()
        await self.load_projects()
        self.notify("Workspace reloaded")

    def action_collapse_all(self) -> None:
        tree = self.query_one("#project-tree", Tree)
        tree.root.collapse_all()
        tree.root.expand()
