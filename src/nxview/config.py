"""nxview configuration management.

Handles persistent settings stored in ~/.nxview/config.json (or the file named
by the NXVIEW_CONFIG environment variable).
"""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from nxview.workspace import FileWorkspaceProvider, HttpWorkspaceProvider, WorkspaceProvider


# Default configuration values
DEFAULT_THEME = "textual-dark"
DEFAULT_SNAPSHOT_FILE = "workspace.json"
DEFAULT_STATE_DB_URL = "sqlite:///nxview.db"
CONFIG_ENV_VAR = "NXVIEW_CONFIG"


@dataclass
class ViewState:
    """Persistent view state for the dashboard."""

    # Id of the last selected view item
    last_selected: Optional[str] = None


@dataclass
class NxViewConfig:
    """nxview application configuration."""

    # Workspace source
    workspace_path: str = "."
    snapshot_file: str = DEFAULT_SNAPSHOT_FILE  # Relative to workspace_path unless absolute
    server_url: Optional[str] = None  # When set, snapshots come from an nxview server

    # Expand/collapse persistence
    state_db_url: str = DEFAULT_STATE_DB_URL

    # Appearance
    theme: str = DEFAULT_THEME

    # View state - stores last dashboard state for restoration
    view_state: Optional[ViewState] = None

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the config file."""
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override)
        return Path.home() / ".nxview" / "config.json"

    @classmethod
    def known_fields(cls) -> set[str]:
        return {f.name for f in cls.__dataclass_fields__.values()}

    @classmethod
    def load(cls) -> "NxViewConfig":
        """Load configuration from file, or return defaults if not found."""
        config_path = cls.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                # Only use known fields to avoid issues with old config versions
                filtered_data = {k: v for k, v in data.items() if k in cls.known_fields()}

                if isinstance(filtered_data.get("view_state"), dict):
                    view_state_fields = {f.name for f in ViewState.__dataclass_fields__.values()}
                    filtered_data["view_state"] = ViewState(
                        **{k: v for k, v in filtered_data["view_state"].items() if k in view_state_fields}
                    )

                return cls(**filtered_data)
            except (json.JSONDecodeError, TypeError, ValueError, AttributeError):
                # Invalid config, return defaults
                pass

        return cls()

    def save(self) -> None:
        """Save configuration to file."""
        config_path = self.get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)

    def reset(self) -> None:
        """Reset configuration to defaults."""
        defaults = NxViewConfig()
        for name in self.known_fields():
            setattr(self, name, getattr(defaults, name))

    def save_view_state(self, last_selected: Optional[str] = None) -> None:
        """Save the current view state for restoration on next launch."""
        self.view_state = ViewState(last_selected=last_selected)
        self.save()

    @classmethod
    def remember_selection(cls, last_selected: Optional[str]) -> None:
        """Persist the selected item without persisting command-line overrides."""
        cls.load().save_view_state(last_selected=last_selected)

    @property
    def last_selected(self) -> Optional[str]:
        return self.view_state.last_selected if self.view_state else None

    @property
    def snapshot_path(self) -> Path:
        path = Path(self.snapshot_file)
        if path.is_absolute():
            return path
        return Path(self.workspace_path) / path

    @property
    def resolved_workspace_path(self) -> str:
        return str(Path(self.workspace_path).resolve())

    def create_provider(self) -> WorkspaceProvider:
        """Provider for the configured snapshot source."""
        if self.server_url:
            return HttpWorkspaceProvider(self.server_url)
        return FileWorkspaceProvider(self.snapshot_path)
