"""Request and notification catalog shared by the nxview server and its clients.

Each request is described by its method name, the shape of its params and the
shape of its result; errors are opaque. Notifications carry a method name and
a payload only. Over HTTP every message is a ``POST`` to ``/<method>``.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from nxview.models import ProjectRecord, TargetRecord, WorkspaceSnapshot


@dataclass(frozen=True)
class RequestType:
    """A request with params and a result."""

    method: str
    params: Optional[type] = None
    result: Any = None

    @property
    def path(self) -> str:
        return f"/{self.method}"


@dataclass(frozen=True)
class NotificationType:
    """A fire-and-forget notification."""

    method: str
    params: Optional[type] = None

    @property
    def path(self) -> str:
        return f"/{self.method}"


class _Params(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class WorkspaceParams(_Params):
    reset: bool = False


class ProjectByPathParams(_Params):
    project_path: str = Field(alias="projectPath")


class ProjectsByPathsParams(_Params):
    paths: list[str] = Field(default_factory=list)


class ProjectByRootParams(_Params):
    project_root: str = Field(alias="projectRoot")


class GeneratorsParams(_Params):
    include_hidden: bool = Field(default=False, alias="includeHidden")
    include_ng_add: bool = Field(default=False, alias="includeNgAdd")


class GeneratorOptionsParams(_Params):
    collection: str
    name: str
    path: str


class GeneratorContextParams(_Params):
    path: Optional[str] = None
    generator: Optional[dict[str, Any]] = None


class CreateProjectGraphParams(_Params):
    show_affected: bool = Field(default=False, alias="showAffected")


class TargetsForConfigFileParams(_Params):
    project_name: str = Field(alias="projectName")
    config_file_path: str = Field(alias="configFilePath")


# Notifications
NxChangeWorkspace = NotificationType("nx/changeWorkspace", str)
NxWorkspaceRefreshNotification = NotificationType("nx/refreshWorkspace")

# Workspace requests
NxResetRequest = RequestType("nx/reset")
NxWorkspaceRequest = RequestType("nx/workspace", WorkspaceParams, WorkspaceSnapshot)
NxWorkspacePathRequest = RequestType("nx/workspacePath", None, str)
NxProjectByPathRequest = RequestType("nx/projectByPath", ProjectByPathParams, Optional[ProjectRecord])
NxProjectsByPathsRequest = RequestType(
    "nx/projectsByPaths", ProjectsByPathsParams, dict[str, Optional[ProjectRecord]]
)
NxProjectByRootRequest = RequestType("nx/projectByRoot", ProjectByRootParams, Optional[ProjectRecord])
NxVersionRequest = RequestType("nx/version", None, dict[str, Any])
NxHasAffectedProjectsRequest = RequestType("nx/hasAffectedProjects", None, bool)
NxSourceMapFilesToProjectMapRequest = RequestType("nx/sourceMapFilesToProjectMap", None, dict[str, str])
NxTargetsForConfigFileRequest = RequestType(
    "nx/targetsForConfigFile", TargetsForConfigFileParams, dict[str, TargetRecord]
)

# Generator requests
NxGeneratorsRequest = RequestType("nx/generators", GeneratorsParams, list[dict[str, Any]])
NxGeneratorOptionsRequest = RequestType("nx/generatorOptions", GeneratorOptionsParams, list[dict[str, Any]])
NxGeneratorContextFromPathRequest = RequestType(
    "nx/generatorContextFromPath", GeneratorContextParams, Optional[dict[str, Any]]
)
NxGeneratorContextV2Request = RequestType("nx/generatorContextV2", GeneratorContextParams, dict[str, Any])
NxTransformedGeneratorSchemaRequest = RequestType(
    "nx/transformedGeneratorSchema", dict, dict[str, Any]
)
NxStartupMessageRequest = RequestType("nx/startupMessage", dict, Optional[dict[str, Any]])

# Project graph requests
NxProjectGraphOutputRequest = RequestType("nx/projectGraphOutput", None, dict[str, str])
NxCreateProjectGraphRequest = RequestType("nx/createProjectGraph", CreateProjectGraphParams, Optional[str])
NxProjectFolderTreeRequest = RequestType("nx/projectFolderTree", None, dict[str, Any])


CATALOG: dict[str, RequestType | NotificationType] = {
    message.method: message
    for message in (
        NxChangeWorkspace,
        NxWorkspaceRefreshNotification,
        NxResetRequest,
        NxWorkspaceRequest,
        NxWorkspacePathRequest,
        NxProjectByPathRequest,
        NxProjectsByPathsRequest,
        NxProjectByRootRequest,
        NxVersionRequest,
        NxHasAffectedProjectsRequest,
        NxSourceMapFilesToProjectMapRequest,
        NxTargetsForConfigFileRequest,
        NxGeneratorsRequest,
        NxGeneratorOptionsRequest,
        NxGeneratorContextFromPathRequest,
        NxGeneratorContextV2Request,
        NxTransformedGeneratorSchemaRequest,
        NxStartupMessageRequest,
        NxProjectGraphOutputRequest,
        NxCreateProjectGraphRequest,
        NxProjectFolderTreeRequest,
    )
}


def get_message(method: str) -> RequestType | NotificationType:
    """Look up a catalog entry by method name."""
    try:
        return CATALOG[method]
    except KeyError:
        raise ValueError(f"Unknown message: {method}") from None
