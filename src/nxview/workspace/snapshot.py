"""File-backed workspace provider.

Reads a workspace snapshot document, YAML or JSON, shaped like:

```yaml
projects:
  app:
    root: apps/app
    targets:
      build:
        configurations:
          production: {}
      lint:
        metadata:
          group: checks
  lib:
    root: libs/lib        # no targets key: targets are inferred lazily
```

A bare ``{name: project}`` mapping is accepted too.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from nxview.models import ProjectRecord
from nxview.workspace.base import WorkspaceLoadError, parse_snapshot

LOG = logging.getLogger(__name__)


class FileWorkspaceProvider:
    """Serves the snapshot stored in a file, re-reading it only when it changes."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._cached: Optional[dict[str, ProjectRecord]] = None
        self._cached_mtime: Optional[float] = None

    def reset(self) -> None:
        """Forget the cached snapshot so the next call re-reads the file."""
        self._cached = None
        self._cached_mtime = None

    def load(self) -> dict[str, ProjectRecord]:
        """Read and validate the snapshot file."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise WorkspaceLoadError(str(self.path), e.strerror or str(e)) from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise WorkspaceLoadError(str(self.path), f"invalid YAML/JSON: {e}") from e

        projects = parse_snapshot(data, source=str(self.path))
        LOG.debug("Loaded %d projects from %s", len(projects), self.path)
        return projects

    async def get_projects(self) -> dict[str, ProjectRecord]:
        try:
            mtime = self.path.stat().st_mtime
        except OSError as e:
            raise WorkspaceLoadError(str(self.path), e.strerror or str(e)) from e

        if self._cached is None or mtime != self._cached_mtime:
            self._cached = self.load()
            self._cached_mtime = mtime
        return dict(self._cached)
