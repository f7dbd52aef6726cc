"""Click CLI for nxview."""

import asyncio
import json
import logging
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Optional, TypeVar

import click
import httpx
from trogon import tui

from nxview.config import NxViewConfig
from nxview.models import CollapsibleState, ProjectViewItem, ViewItem
from nxview.state import CollapsibleStateStore
from nxview.tui.render import render_label
from nxview.views import ListViewStrategy, create_list_view_strategy
from nxview.workspace import WorkspaceError

T = TypeVar("T")


def get_config() -> NxViewConfig:
    """Config for the current invocation, including command-line overrides."""
    ctx = click.get_current_context()
    obj = ctx.find_object(NxViewConfig)
    return obj if obj is not None else NxViewConfig.load()


def run_with_strategy(
    config: NxViewConfig,
    func: Callable[[ListViewStrategy], Awaitable[T]],
) -> T:
    """Run ``func`` against a strategy for the configured workspace.

    Workspace failures are reported on stderr and exit with status 1.
    """

    async def runner() -> T:
        provider = config.create_provider()
        try:
            strategy = create_list_view_strategy(
                provider, workspace_path=config.resolved_workspace_path
            )
            return await func(strategy)
        finally:
            aclose = getattr(provider, "aclose", None)
            if aclose is not None:
                await aclose()

    try:
        return asyncio.run(runner())
    except WorkspaceError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except httpx.HTTPError as e:
        click.echo(f"Error: unable to reach nxview server: {e}", err=True)
        raise SystemExit(1)


async def collect_tree(
    strategy: ListViewStrategy,
    parent: Optional[ViewItem] = None,
    depth: Optional[int] = None,
    level: int = 0,
) -> list[dict[str, Any]]:
    """Expand the tree below ``parent`` into nested dicts.

    ``depth`` limits how many levels are shown; None expands everything.
    """
    children = await strategy.get_children(parent)
    nodes: list[dict[str, Any]] = []
    for item in children or []:
        node: dict[str, Any] = {
            "id": item.id,
            "label": item.label,
            "context_value": item.context_value,
            "collapsible": item.collapsible.value,
            "text": render_label(item),
        }
        if item.collapsible != CollapsibleState.NONE and (depth is None or level + 1 < depth):
            node["children"] = await collect_tree(strategy, item, depth, level + 1)
        nodes.append(node)
    return nodes


def echo_nodes(nodes: list[dict[str, Any]], indent: int = 0) -> None:
    for node in nodes:
        click.echo("  " * indent + node["text"])
        echo_nodes(node.get("children", []), indent + 1)


def _strip_text(nodes: list[dict[str, Any]]) -> list[dict[str, Any]]:
    stripped = []
    for node in nodes:
        node = {k: v for k, v in node.items() if k != "text"}
        if "children" in node:
            node["children"] = _strip_text(node["children"])
        stripped.append(node)
    return stripped


@tui()
@click.group()
@click.version_option(version="0.1.0", prog_name="nxview")
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False),
    help="Workspace directory (defaults to the configured one)",
)
@click.option("--snapshot", "-s", help="Workspace snapshot file, YAML or JSON")
@click.option("--server", help="Fetch snapshots from an nxview server at this URL")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    workspace: Optional[str],
    snapshot: Optional[str],
    server: Optional[str],
    verbose: bool,
) -> None:
    """nxview - Browse an Nx workspace as a project tree.

    Projects expand into target groups and targets, and targets expand into
    their configurations.

    Quick start:
        nxview tree               Print the whole project tree
        nxview targets app        Show the grouped targets of one project
        nxview dashboard          Launch the interactive TUI dashboard
        nxview serve              Start the nxview API server
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = NxViewConfig.load()
    if workspace:
        config.workspace_path = workspace
    if snapshot:
        config.snapshot_file = snapshot
    if server:
        config.server_url = server
    ctx.obj = config


@cli.command()
@click.option("--depth", "-d", type=click.IntRange(min=1), help="Number of levels to show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tree(depth: Optional[int], as_json: bool) -> None:
    """Print the project tree.

    Groups are listed before ungrouped targets; both are sorted by label.
    Projects keep the order of the workspace snapshot.
    """
    nodes = run_with_strategy(get_config(), lambda s: collect_tree(s, depth=depth))

    if as_json:
        click.echo(json.dumps(_strip_text(nodes), indent=2))
        return
    if not nodes:
        click.echo("No projects found.")
        return
    echo_nodes(nodes)


@cli.command("projects")
def projects_list() -> None:
    """List the projects of the workspace."""
    items = run_with_strategy(get_config(), lambda s: s.get_children())

    if not items:
        click.echo("No projects found.")
        return

    click.echo("\n📦 Projects:")
    click.echo("=" * 50)
    for item in items:
        root = item.nx_project.root or "."
        suffix = "" if item.collapsible != CollapsibleState.NONE else " (no targets)"
        click.echo(f"  {item.label:<30} {root}{suffix}")
    click.echo(f"\nTotal: {len(items)} projects")


@cli.command()
@click.argument("project_name")
def targets(project_name: str) -> None:
    """Show the grouped targets of a project.

    PROJECT_NAME: Name of the project as listed by `nxview projects`
    """

    async def load(strategy: ListViewStrategy) -> Optional[list[dict[str, Any]]]:
        roots = await strategy.get_children() or []
        project = next(
            (i for i in roots if isinstance(i, ProjectViewItem) and i.id == project_name),
            None,
        )
        if project is None:
            return None
        return await collect_tree(strategy, project)

    nodes = run_with_strategy(get_config(), load)
    if nodes is None:
        click.echo(f"Error: Project '{project_name}' not found.", err=True)
        raise SystemExit(1)
    if not nodes:
        click.echo(f"Project '{project_name}' has no targets.")
        return

    click.echo(f"\n=== {project_name} ===\n")
    echo_nodes(nodes)


@cli.command()
def dashboard() -> None:
    """Launch the interactive TUI dashboard.

    Expanded and collapsed nodes are remembered between sessions.

    Keyboard shortcuts:
        q - Quit
        r - Refresh
        c - Collapse all
    """
    from nxview.tui import NxViewApp

    config = get_config()
    store = CollapsibleStateStore.from_url(config.state_db_url)
    store.init_db()
    strategy = create_list_view_strategy(
        config.create_provider(), workspace_path=config.resolved_workspace_path
    )
    app = NxViewApp(strategy, store=store, config=config)
    app.run()


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, help="Port to bind to")
def serve(host: str, port: int) -> None:
    """Start the nxview API server."""
    import uvicorn

    from nxview.api import main as api_main

    config = get_config()
    api_main.config = config
    api_main.store = CollapsibleStateStore.from_url(config.state_db_url)
    api_main.provider = None

    click.echo(f"Starting nxview API server at http://{host}:{port}")
    click.echo("Press Ctrl+C to stop")
    uvicorn.run(api_main.app, host=host, port=port)


# =============================================================================
# Config Commands - Manage persisted settings
# =============================================================================


SETTABLE_FIELDS = sorted(NxViewConfig.known_fields() - {"view_state"})


@cli.group("config")
def config_group() -> None:
    """Show or change persisted settings."""
    pass


@config_group.command("show")
def config_show() -> None:
    """Show the persisted configuration."""
    config = NxViewConfig.load()
    click.echo(f"# {NxViewConfig.get_config_path()}")
    click.echo(json.dumps(asdict(config), indent=2))


@config_group.command("set")
@click.argument("key", type=click.Choice(SETTABLE_FIELDS))
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Set a configuration value.

    Use "none" to clear the server URL.
    """
    config = NxViewConfig.load()
    if key == "server_url" and value.lower() in ("", "none"):
        config.server_url = None
    else:
        setattr(config, key, value)
    config.save()
    click.echo(click.style(f"✓ {key} = {getattr(config, key)}", fg="green"))


@config_group.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
def config_reset(yes: bool) -> None:
    """Reset configuration to defaults."""
    if not yes:
        click.confirm("Reset configuration to defaults?", abort=True)
    config = NxViewConfig.load()
    config.reset()
    config.save()
    click.echo(click.style("✓ Configuration reset", fg="green"))


# =============================================================================
# State Commands - Manage remembered expand/collapse state
# =============================================================================


@cli.group("state")
def state_group() -> None:
    """Inspect or clear remembered expand/collapse state."""
    pass


@state_group.command("list")
def state_list() -> None:
    """List remembered node states."""
    store = CollapsibleStateStore.from_url(get_config().state_db_url)
    store.init_db()
    states = store.all()
    if not states:
        click.echo("No remembered state.")
        return
    for item_id, state in states.items():
        click.echo(f"  {state.value:<10} {item_id}")


@state_group.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
def state_clear(yes: bool) -> None:
    """Forget all remembered node states."""
    if not yes:
        click.confirm("Forget all expand/collapse state?", abort=True)
    store = CollapsibleStateStore.from_url(get_config().state_db_url)
    store.init_db()
    count = store.clear()
    click.echo(click.style(f"✓ Cleared {count} entries", fg="green"))


if __name__ == "__main__":
    cli()
