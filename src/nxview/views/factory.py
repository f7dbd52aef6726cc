"""Builders turning workspace records into view items.

Every function here is total over its input: missing optional fields map to
neutral defaults, and records that disappeared from the snapshot map to
``None`` ("no children") rather than an error.
"""

import logging
from pathlib import Path
from typing import Optional

from nxview.models import (
    CollapsibleState,
    NxProject,
    NxTarget,
    ProjectRecord,
    ProjectViewItem,
    TargetRecord,
    TargetsKind,
    TargetViewItem,
)

LOG = logging.getLogger(__name__)


def build_project(
    project_name: str,
    record: ProjectRecord,
    collapsible: CollapsibleState = CollapsibleState.COLLAPSED,
    *,
    workspace_path: str = "",
    logger: Optional[logging.Logger] = None,
) -> ProjectViewItem:
    """Build the view item for one project.

    Args:
        project_name: Key of the project in the snapshot
        record: The project's record
        collapsible: Hint used when the project has children
        workspace_path: Directory the project root is relative to
        logger: Sink for data-quality warnings

    Returns:
        ProjectViewItem keyed by ``project_name``
    """
    logger = logger or LOG
    has_children = record.resolved_targets_kind != TargetsKind.DECLARED_EMPTY

    nx_project = NxProject(project=record.name or project_name, root=record.root or "")
    if record.root is None:
        logger.warning(
            "Project %s has no root. This could be because of an error "
            "loading the workspace configuration.",
            nx_project.project,
        )

    return ProjectViewItem(
        id=project_name,
        label=project_name,
        nx_project=nx_project,
        resource=str(Path(workspace_path) / nx_project.root),
        collapsible=collapsible if has_children else CollapsibleState.NONE,
    )


def resolve_group(
    nx_project: NxProject,
    target_name: str,
    record: TargetRecord,
    logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """Return the target's group, or None when it is ungrouped.

    The nested ``metadata.group`` wins over the legacy top-level ``group``.
    """
    nested = record.nested_group
    legacy = record.group or None
    if nested and legacy and nested.lower() != legacy.lower():
        (logger or LOG).warning(
            "Target %s:%s declares group %r in metadata and legacy group %r; using %r.",
            nx_project.project,
            target_name,
            nested,
            legacy,
            nested,
        )
    return nested or legacy


def target_label(target_name: str, group: Optional[str]) -> str:
    """Strip the first ``{group}`` marker from a grouped target's name."""
    if not group:
        return target_name
    return target_name.replace(f"{{{group}}}", "", 1)


def build_target(
    nx_project: NxProject,
    target_name: str,
    record: TargetRecord,
    *,
    logger: Optional[logging.Logger] = None,
) -> TargetViewItem:
    """Build the view item for one target of a project."""
    group = resolve_group(nx_project, target_name, record, logger)
    has_configs = bool(record.configurations)
    return TargetViewItem(
        id=f"{nx_project.project}:{target_name}",
        label=target_label(target_name, group),
        nx_project=nx_project,
        nx_target=NxTarget(name=target_name),
        group=group,
        collapsible=CollapsibleState.COLLAPSED if has_configs else CollapsibleState.NONE,
    )


def lookup_project(
    projects: dict[str, ProjectRecord],
    nx_project: NxProject,
    project_key: Optional[str] = None,
) -> Optional[ProjectRecord]:
    """Find a project's current record.

    Tries the project name as a snapshot key, then ``project_key``, then the
    record whose name override equals the project name.
    """
    record = projects.get(nx_project.project)
    if record is None and project_key is not None:
        record = projects.get(project_key)
    if record is None:
        record = next(
            (r for r in projects.values() if r.name == nx_project.project),
            None,
        )
    return record


def build_configurations(
    nx_project: NxProject,
    nx_target: NxTarget,
    projects: dict[str, ProjectRecord],
) -> Optional[list[TargetViewItem]]:
    """Build one leaf per configuration declared by a target.

    Returns None when the project, the target or its configurations are no
    longer part of the snapshot.
    """
    project = lookup_project(projects, nx_project)
    if project is None or not project.targets:
        return None

    target = project.targets.get(nx_target.name)
    if target is None or target.configurations is None:
        return None

    return [
        TargetViewItem(
            id=f"{nx_project.project}:{nx_target.name}:{configuration}",
            label=configuration,
            nx_project=nx_project,
            nx_target=NxTarget(name=nx_target.name, configuration=configuration),
            collapsible=CollapsibleState.NONE,
        )
        for configuration in target.configuration_names
    ]
