"""List view strategy: the entry point hosts use to expand the project tree."""

import logging
from typing import Optional, Protocol

from nxview.models import (
    CollapsibleState,
    ProjectViewItem,
    TargetGroupViewItem,
    TargetViewItem,
    TargetViewTreeItem,
    ViewItem,
)
from nxview.views.factory import (
    build_configurations,
    build_project,
    build_target,
    lookup_project,
)
from nxview.views.grouping import group_targets
from nxview.workspace import WorkspaceProvider


class ProjectViewStrategy(Protocol):
    async def get_children(self, element: Optional[ViewItem] = None) -> Optional[list[ViewItem]]:
        ...


class ListViewStrategy:
    """Flat list of projects, each expanding into grouped targets.

    Every call fetches a fresh snapshot from the provider and builds a new,
    independent set of view items, so interleaved calls never share state.
    Records that vanished between a node's creation and its expansion yield
    None instead of an error. Provider failures propagate unchanged.
    """

    def __init__(
        self,
        provider: WorkspaceProvider,
        workspace_path: str = "",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.workspace_path = workspace_path
        self.logger = logger

    async def get_children(self, element: Optional[ViewItem] = None) -> Optional[list[ViewItem]]:
        if element is None:
            return await self.create_projects()
        if isinstance(element, ProjectViewItem):
            return await self.create_targets_from_project(element)
        if isinstance(element, TargetGroupViewItem):
            return list(element.target_view_items)
        if isinstance(element, TargetViewItem):
            return await self.create_configurations_from_target(element)
        return None

    async def create_projects(
        self,
        collapsible: CollapsibleState = CollapsibleState.COLLAPSED,
    ) -> list[ViewItem]:
        projects = await self.provider.get_projects()
        return [
            build_project(
                name,
                record,
                collapsible,
                workspace_path=self.workspace_path,
                logger=self.logger,
            )
            for name, record in projects.items()
        ]

    async def create_targets_from_project(
        self, parent: ProjectViewItem
    ) -> Optional[list[TargetViewTreeItem]]:
        nx_project = parent.nx_project
        projects = await self.provider.get_projects()
        record = lookup_project(projects, nx_project, parent.id)
        if record is None or record.targets is None:
            return None

        target_items = [
            build_target(nx_project, name, target, logger=self.logger)
            for name, target in record.targets.items()
        ]
        return group_targets(nx_project, target_items)

    async def create_configurations_from_target(
        self, parent: TargetViewItem
    ) -> Optional[list[TargetViewItem]]:
        projects = await self.provider.get_projects()
        return build_configurations(parent.nx_project, parent.nx_target, projects)


def create_list_view_strategy(
    provider: WorkspaceProvider,
    workspace_path: str = "",
    logger: Optional[logging.Logger] = None,
) -> ListViewStrategy:
    """Create the strategy backing the project list view."""
    return ListViewStrategy(provider, workspace_path=workspace_path, logger=logger)
