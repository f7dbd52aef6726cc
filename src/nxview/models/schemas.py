"""Schemas for nxview workspace records, view items and persisted tree state."""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


class CollapsibleState(str, Enum):
    """Tri-state collapse hint carried by every view item."""

    NONE = "none"  # Leaf, nothing to expand
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


class TargetsKind(str, Enum):
    """How a project's target collection was declared."""

    DECLARED_EMPTY = "declared_empty"  # Explicitly no targets
    COMPUTED_LAZILY = "computed_lazily"  # Inferred by the build system on demand
    POPULATED = "populated"


# =============================================================================
# Workspace records (provider input)
# =============================================================================


class TargetMetadata(BaseModel):
    """Vendor-extension block nested under a target's ``metadata`` key."""

    model_config = ConfigDict(extra="allow")

    group: Optional[str] = None


class TargetRecord(BaseModel):
    """A target as declared in the workspace snapshot.

    Grouping metadata can live in two places: the legacy top-level ``group``
    string or the nested ``metadata.group`` field. Anything else a target
    declares (executor, options, ...) is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    configurations: Optional[dict[str, Any]] = None
    group: Optional[str] = None
    metadata: Optional[TargetMetadata] = None

    @property
    def nested_group(self) -> Optional[str]:
        if self.metadata is None:
            return None
        return self.metadata.group or None

    @property
    def configuration_names(self) -> list[str]:
        return list(self.configurations or {})


class ProjectRecord(BaseModel):
    """A project as declared in the workspace snapshot."""

    model_config = ConfigDict(extra="allow")

    root: Optional[str] = None
    name: Optional[str] = None  # Overrides the snapshot key when set
    targets: Optional[dict[str, TargetRecord]] = None
    targets_kind: Optional[TargetsKind] = None

    @property
    def resolved_targets_kind(self) -> TargetsKind:
        """Explicit targets kind, or one derived from the declared targets.

        A record without a ``targets`` key leaves target discovery to the
        build system, so it is treated as computed lazily.
        """
        if self.targets_kind is not None:
            return self.targets_kind
        if self.targets is None:
            return TargetsKind.COMPUTED_LAZILY
        if not self.targets:
            return TargetsKind.DECLARED_EMPTY
        return TargetsKind.POPULATED


class WorkspaceSnapshot(BaseModel):
    """Result of the ``nx/workspace`` request."""

    workspace_path: str = ""
    projects: dict[str, ProjectRecord] = PydanticField(default_factory=dict)


# =============================================================================
# View items (core output)
# =============================================================================


class NxProject(BaseModel):
    project: str
    root: str = ""


class NxTarget(BaseModel):
    name: str
    configuration: Optional[str] = None


class BaseViewItem(BaseModel):
    """Fields shared by every node in the project view."""

    id: str
    label: str
    collapsible: CollapsibleState = CollapsibleState.NONE


class FolderViewItem(BaseViewItem):
    context_value: Literal["folder"] = "folder"
    path: str
    resource: str


class ProjectViewItem(BaseViewItem):
    context_value: Literal["project"] = "project"
    nx_project: NxProject
    resource: str


class TargetViewItem(BaseViewItem):
    context_value: Literal["target"] = "target"
    nx_project: NxProject
    nx_target: NxTarget
    group: Optional[str] = None  # None means ungrouped


class TargetGroupViewItem(BaseViewItem):
    context_value: Literal["group"] = "group"
    nx_project: NxProject
    target_view_items: list[TargetViewItem] = PydanticField(default_factory=list)


TargetViewTreeItem = Union[TargetViewItem, TargetGroupViewItem]

ViewItem = Annotated[
    Union[FolderViewItem, ProjectViewItem, TargetViewItem, TargetGroupViewItem],
    PydanticField(discriminator="context_value"),
]

view_item_adapter: TypeAdapter = TypeAdapter(ViewItem)
view_item_list_adapter: TypeAdapter = TypeAdapter(list[ViewItem])


# =============================================================================
# Persisted tree state
# =============================================================================


class TreeItemState(SQLModel, table=True):
    """User-driven expand/collapse state for one view item id."""

    __tablename__ = "tree_item_state"

    item_id: str = Field(primary_key=True)
    state: CollapsibleState = Field(default=CollapsibleState.COLLAPSED)
    updated_at: datetime = Field(default_factory=utcnow)
