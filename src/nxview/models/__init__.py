"""Data models for nxview."""

from .schemas import (
    BaseViewItem,
    CollapsibleState,
    FolderViewItem,
    NxProject,
    NxTarget,
    ProjectRecord,
    ProjectViewItem,
    TargetGroupViewItem,
    TargetMetadata,
    TargetRecord,
    TargetsKind,
    TargetViewItem,
    TargetViewTreeItem,
    TreeItemState,
    ViewItem,
    WorkspaceSnapshot,
    utcnow,
    view_item_adapter,
    view_item_list_adapter,
)

__all__ = [
    "BaseViewItem",
    "CollapsibleState",
    "FolderViewItem",
    "NxProject",
    "NxTarget",
    "ProjectRecord",
    "ProjectViewItem",
    "TargetGroupViewItem",
    "TargetMetadata",
    "TargetRecord",
    "TargetsKind",
    "TargetViewItem",
    "TargetViewTreeItem",
    "TreeItemState",
    "ViewItem",
    "WorkspaceSnapshot",
    "utcnow",
    "view_item_adapter",
    "view_item_list_adapter",
]
