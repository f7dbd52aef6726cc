"""Shared fixtures for nxview tests."""

import json
from pathlib import Path

import pytest

from nxview.workspace import StaticWorkspaceProvider


SAMPLE_PROJECTS = {
    "app": {
        "root": "apps/app",
        "targets": {
            "build": {
                "executor": "@nx/webpack:webpack",
                "configurations": {"production": {}, "development": {}},
            },
            "lint": {"group": "checks"},
            "test": {"group": "checks"},
            "{fmt}format": {"metadata": {"group": "fmt"}},
        },
    },
    "lib": {"root": "libs/lib", "targets": {}},
    "inferred": {"root": "libs/inferred"},
}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config file at a temporary location."""
    config_path = tmp_path / "config" / "config.json"
    monkeypatch.setenv("NXVIEW_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def sample_projects() -> dict:
    return json.loads(json.dumps(SAMPLE_PROJECTS))


@pytest.fixture
def provider(sample_projects: dict) -> StaticWorkspaceProvider:
    return StaticWorkspaceProvider(sample_projects)


@pytest.fixture
def snapshot_file(tmp_path: Path, sample_projects: dict) -> Path:
    """Workspace snapshot written as JSON."""
    path = tmp_path / "workspace.json"
    path.write_text(json.dumps({"projects": sample_projects}), encoding="utf-8")
    return path
