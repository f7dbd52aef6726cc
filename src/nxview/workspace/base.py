"""Workspace snapshot providers: contract, errors and in-memory provider."""

from pathlib import PurePosixPath
from typing import Any, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from nxview.models import ProjectRecord


_projects_adapter: TypeAdapter = TypeAdapter(dict[str, ProjectRecord])


class WorkspaceError(Exception):
    """Raised when a workspace snapshot cannot be obtained."""


class WorkspaceLoadError(WorkspaceError):
    """Raised when a snapshot source exists but cannot be read or validated."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Unable to load workspace from {source}: {reason}")


class WorkspaceProvider(Protocol):
    """Anything that can hand out the current project records."""

    async def get_projects(self) -> dict[str, ProjectRecord]:
        ...


def parse_snapshot(data: Any, source: str = "<snapshot>") -> dict[str, ProjectRecord]:
    """Validate raw snapshot data into project records.

    Accepts either a bare ``{name: project}`` mapping or a document with a
    top-level ``projects`` mapping. Key order is preserved.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise WorkspaceLoadError(source, "expected a mapping of projects")
    if isinstance(data.get("projects"), dict):
        data = data["projects"]
    try:
        return _projects_adapter.validate_python(data)
    except ValidationError as e:
        raise WorkspaceLoadError(source, str(e)) from e


class StaticWorkspaceProvider:
    """Serves a snapshot held in memory."""

    def __init__(self, projects: Optional[dict[str, Any]] = None) -> None:
        self._projects: dict[str, ProjectRecord] = {}
        self.update(projects or {})

    def update(self, projects: dict[str, Any]) -> None:
        """Replace the snapshot."""
        self._projects = parse_snapshot(projects, source="<memory>")

    def reset(self) -> None:
        """No-op: the snapshot is held in memory, so there is no cache to drop."""

    async def get_projects(self) -> dict[str, ProjectRecord]:
        return dict(self._projects)


def _normalize_root(root: Optional[str]) -> PurePosixPath:
    if not root or root == ".":
        return PurePosixPath(".")
    return PurePosixPath(root.replace("\\", "/").strip("/"))


def find_project_by_root(
    projects: dict[str, ProjectRecord],
    root: str,
) -> Optional[tuple[str, ProjectRecord]]:
    """Find the project whose root is exactly ``root``."""
    wanted = _normalize_root(root)
    for name, record in projects.items():
        if record.root is not None and _normalize_root(record.root) == wanted:
            return name, record
    return None


def find_project_by_path(
    projects: dict[str, ProjectRecord],
    workspace_path: str,
    path: str,
) -> Optional[tuple[str, ProjectRecord]]:
    """Find the project that owns ``path``; the deepest matching root wins.

    ``path`` may be absolute (inside ``workspace_path``) or relative to the
    workspace. A project rooted at the workspace itself matches everything
    inside it; paths that climb out with ``..`` match nothing.
    """
    candidate = PurePosixPath(path.replace("\\", "/"))
    if candidate.is_absolute():
        try:
            candidate = candidate.relative_to(PurePosixPath(workspace_path.replace("\\", "/")))
        except ValueError:
            return None
    if ".." in candidate.parts:
        return None

    best: Optional[tuple[str, ProjectRecord]] = None
    best_depth = -1
    for name, record in projects.items():
        if record.root is None:
            continue
        root = _normalize_root(record.root)
        if root == PurePosixPath("."):
            depth = 0
        elif candidate == root or root in candidate.parents:
            depth = len(root.parts)
        else:
            continue
        if depth > best_depth:
            best, best_depth = (name, record), depth
    return best
