"""Workspace snapshot providers for nxview."""

from .base import (
    StaticWorkspaceProvider,
    WorkspaceError,
    WorkspaceLoadError,
    WorkspaceProvider,
    find_project_by_path,
    find_project_by_root,
    parse_snapshot,
)
from .http import HttpWorkspaceProvider
from .snapshot import FileWorkspaceProvider

__all__ = [
    "FileWorkspaceProvider",
    "HttpWorkspaceProvider",
    "StaticWorkspaceProvider",
    "WorkspaceError",
    "WorkspaceLoadError",
    "WorkspaceProvider",
    "find_project_by_path",
    "find_project_by_root",
    "parse_snapshot",
]
