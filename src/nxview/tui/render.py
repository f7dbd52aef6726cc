"""Rendering adapter: how a view item looks as a tree node."""

from nxview.models import BaseViewItem

# Icon per context value
ICONS = {
    "folder": "📁",
    "project": "📦",
    "target": "⚙️",
    "group": "🗂️",
}


def item_icon(item: BaseViewItem) -> str:
    return ICONS.get(getattr(item, "context_value", ""), "•")


def render_label(item: BaseViewItem) -> str:
    """Display text for a view item, icon first."""
    return f"{item_icon(item)} {item.label}"


def describe_item(item: BaseViewItem) -> str:
    """Markdown summary of a view item for the detail panel."""
    lines = [f"# {render_label(item)}", "", f"- **Kind:** {item.context_value}", f"- **Id:** `{item.id}`"]

    nx_project = getattr(item, "nx_project", None)
    if nx_project is not None:
        lines.append(f"- **Project:** {nx_project.project}")
        lines.append(f"- **Root:** `{nx_project.root or '.'}`")

    nx_target = getattr(item, "nx_target", None)
    if nx_target is not None:
        lines.append(f"- **Target:** {nx_target.name}")
        if nx_target.configuration:
            lines.append(f"- **Configuration:** {nx_target.configuration}")

    group = getattr(item, "group", None)
    if group:
        lines.append(f"- **Group:** {group}")

    members = getattr(item, "target_view_items", None)
    if members is not None:
        lines.append(f"- **Targets:** {len(members)}")

    resource = getattr(item, "resource", None)
    if resource:
        lines.append(f"- **Path:** `{resource}`")

    return "\n".join(lines)
