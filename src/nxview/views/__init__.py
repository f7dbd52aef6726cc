"""Project view construction for nxview."""

from .factory import (
    build_configurations,
    build_project,
    build_target,
    lookup_project,
    resolve_group,
    target_label,
)
from .grouping import group_targets, label_sort_key
from .strategy import ListViewStrategy, ProjectViewStrategy, create_list_view_strategy

__all__ = [
    "ListViewStrategy",
    "ProjectViewStrategy",
    "build_configurations",
    "build_project",
    "build_target",
    "create_list_view_strategy",
    "group_targets",
    "label_sort_key",
    "lookup_project",
    "resolve_group",
    "target_label",
]
