"""FastAPI application serving nxview workspace requests and tree expansion."""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from nxview.config import NxViewConfig
from nxview.messages import (
    NxProjectByPathRequest,
    NxProjectByRootRequest,
    NxProjectsByPathsRequest,
    NxWorkspacePathRequest,
    NxWorkspaceRefreshNotification,
    NxWorkspaceRequest,
    ProjectByPathParams,
    ProjectByRootParams,
    ProjectsByPathsParams,
    WorkspaceParams,
)
from nxview.models import CollapsibleState, ProjectRecord, ViewItem, WorkspaceSnapshot
from nxview.state import CollapsibleStateStore
from nxview.views import create_list_view_strategy
from nxview.workspace import (
    WorkspaceError,
    WorkspaceProvider,
    find_project_by_path,
    find_project_by_root,
)

config = NxViewConfig.load()
store = CollapsibleStateStore.from_url(config.state_db_url)
provider: Optional[WorkspaceProvider] = None


def get_store() -> CollapsibleStateStore:
    """Get the collapsible state store."""
    return store


def get_provider() -> WorkspaceProvider:
    """Get the workspace provider, creating it from config on first use."""
    global provider
    if provider is None:
        provider = config.create_provider()
    return provider


def get_workspace_path() -> str:
    return config.resolved_workspace_path


def init_db() -> None:
    """Initialize database tables."""
    get_store().init_db()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    init_db()
    yield


app = FastAPI(
    title="nxview API",
    description="Workspace snapshots and lazily expanded project trees",
    version="0.1.0",
    lifespan=lifespan,
)


class ChildrenRequest(BaseModel):
    parent: Optional[ViewItem] = None


class ItemState(BaseModel):
    item_id: str
    state: Optional[CollapsibleState] = None


class ItemStateUpdate(BaseModel):
    state: CollapsibleState


async def load_projects() -> dict[str, ProjectRecord]:
    """Fetch the current snapshot, mapping provider and upstream failures to 503."""
    try:
        return await get_provider().get_projects()
    except (WorkspaceError, httpx.HTTPError) as e:
        raise HTTPException(status_code=503, detail=str(e))


def _reset_provider() -> None:
    reset = getattr(get_provider(), "reset", None)
    if reset is not None:
        reset()


def _named(name: str, record: ProjectRecord) -> ProjectRecord:
    return record.model_copy(update={"name": record.name or name})


@app.get("/")
def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": "nxview API",
        "version": "0.1.0",
        "description": "Workspace snapshots and lazily expanded project trees",
        "docs_url": "/docs",
    }


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post(NxWorkspaceRequest.path, response_model=WorkspaceSnapshot, response_model_exclude_none=True)
async def workspace(params: Optional[WorkspaceParams] = None) -> WorkspaceSnapshot:
    """Return the current workspace snapshot."""
    if params is not None and params.reset:
        _reset_provider()
    projects = await load_projects()
    return WorkspaceSnapshot(workspace_path=get_workspace_path(), projects=projects)


@app.post(NxWorkspacePathRequest.path)
def workspace_path() -> str:
    """Return the absolute workspace path."""
    return get_workspace_path()


@app.post(
    NxProjectByPathRequest.path,
    response_model=Optional[ProjectRecord],
    response_model_exclude_none=True,
)
async def project_by_path(params: ProjectByPathParams) -> Optional[ProjectRecord]:
    """Return the project owning a file or directory, or null."""
    projects = await load_projects()
    match = find_project_by_path(projects, get_workspace_path(), params.project_path)
    return _named(*match) if match else None


@app.post(
    NxProjectsByPathsRequest.path,
    response_model=dict[str, Optional[ProjectRecord]],
    response_model_exclude_none=True,
)
async def projects_by_paths(params: ProjectsByPathsParams) -> dict[str, Optional[ProjectRecord]]:
    """Return the owning project for each path."""
    projects = await load_projects()
    result: dict[str, Optional[ProjectRecord]] = {}
    for path in params.paths:
        match = find_project_by_path(projects, get_workspace_path(), path)
        result[path] = _named(*match) if match else None
    return result


@app.post(
    NxProjectByRootRequest.path,
    response_model=Optional[ProjectRecord],
    response_model_exclude_none=True,
)
async def project_by_root(params: ProjectByRootParams) -> Optional[ProjectRecord]:
    """Return the project rooted at a directory, or null."""
    projects = await load_projects()
    match = find_project_by_root(projects, params.project_root)
    return _named(*match) if match else None


@app.post(NxWorkspaceRefreshNotification.path)
def refresh_workspace() -> dict:
    """Drop any cached snapshot so the next request reloads it."""
    _reset_provider()
    return {"status": "ok"}


@app.post("/tree/children", response_model=Optional[list[ViewItem]])
async def tree_children(request: ChildrenRequest) -> Optional[list[ViewItem]]:
    """Children of a view item, or of the root when no parent is given."""
    strategy = create_list_view_strategy(get_provider(), workspace_path=get_workspace_path())
    try:
        return await strategy.get_children(request.parent)
    except (WorkspaceError, httpx.HTTPError) as e:
        raise HTTPException(status_code=503, detail=str(e))


@app.get("/tree/state/{item_id:path}", response_model=ItemState)
def get_item_state(item_id: str) -> ItemState:
    """Persisted expand/collapse state of a view item."""
    return ItemState(item_id=item_id, state=get_store().get(item_id))


@app.put("/tree/state/{item_id:path}", response_model=ItemState)
def set_item_state(item_id: str, body: ItemStateUpdate) -> ItemState:
    """Persist the expand/collapse state of a view item."""
    try:
        get_store().set(item_id, body.state)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ItemState(item_id=item_id, state=body.state)
