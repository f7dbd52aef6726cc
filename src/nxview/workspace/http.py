"""HTTP workspace provider talking to an nxview API server."""

import logging
from typing import Any, Optional

import httpx

from nxview.messages import (
    NxProjectByPathRequest,
    NxProjectByRootRequest,
    NxWorkspacePathRequest,
    NxWorkspaceRefreshNotification,
    NxWorkspaceRequest,
    NotificationType,
    RequestType,
)
from nxview.models import ProjectRecord
from nxview.workspace.base import parse_snapshot

LOG = logging.getLogger(__name__)


class HttpWorkspaceProvider:
    """Fetches snapshots from a remote nxview server.

    Each ``get_projects`` call is one round trip. Failures surface as
    ``httpx.HTTPError`` without retries.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the provider.

        Args:
            base_url: Root URL of the nxview server, e.g. ``http://127.0.0.1:8000``
            timeout: Request timeout in seconds
            client: Optional preconfigured client (closed by the caller)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._reset_pending = False

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"User-Agent": "nxview"},
                timeout=self.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpWorkspaceProvider":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def request(self, message: RequestType, params: Optional[dict[str, Any]] = None) -> Any:
        """Send a catalog request and return its decoded JSON result."""
        response = await self.client.post(message.path, json=params or {})
        response.raise_for_status()
        return response.json()

    async def notify(self, message: NotificationType, payload: Any = None) -> None:
        """Send a catalog notification."""
        response = await self.client.post(message.path, json=payload)
        response.raise_for_status()

    def reset(self) -> None:
        """Ask the server to rebuild its snapshot on the next fetch."""
        self._reset_pending = True

    async def refresh(self) -> None:
        await self.notify(NxWorkspaceRefreshNotification)

    async def get_projects(self) -> dict[str, ProjectRecord]:
        data = await self.request(NxWorkspaceRequest, {"reset": self._reset_pending})
        self._reset_pending = False
        projects = parse_snapshot(data, source=self.base_url)
        LOG.debug("Fetched %d projects from %s", len(projects), self.base_url)
        return projects

    async def workspace_path(self) -> str:
        return await self.request(NxWorkspacePathRequest)

    async def project_by_path(self, project_path: str) -> Optional[ProjectRecord]:
        data = await self.request(NxProjectByPathRequest, {"projectPath": project_path})
        return ProjectRecord.model_validate(data) if data else None

    async def project_by_root(self, project_root: str) -> Optional[ProjectRecord]:
        data = await self.request(NxProjectByRootRequest, {"projectRoot": project_root})
        return ProjectRecord.model_validate(data) if data else None
