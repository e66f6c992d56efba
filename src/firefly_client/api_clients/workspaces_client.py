"""Workspaces API client.

Workspaces are the IaC stacks Firefly discovers from CI pipelines and
runner executions. The API offers search, label updates, deletion and run
history, but no single-workspace endpoint.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from pydantic import Field

from ..exceptions import NotFoundError
from .flexible import FireflyModel, FlexibleStringList
from .paths import quote_path_segment

if TYPE_CHECKING:
    from .base_client import FireflyAPIClient

logger = logging.getLogger(__name__)

WORKSPACES_PATH = "/v2/workspaces"
SCAN_PAGE_SIZE = 100


class Workspace(FireflyModel):
    """Workspace as returned by workspace search."""

    omit_empty_fields = frozenset({"labels"})

    id: str = ""
    account_id: str = ""
    workspace_id: str = ""
    workspace_name: str = ""
    repo: str = ""
    repo_url: str = ""
    vcs_type: str = ""
    runner_type: str = ""
    last_run_status: str = ""
    last_apply_time: str = ""
    last_plan_time: str = ""
    last_run_time: str = ""
    iac_type: str = ""
    iac_type_version: str = ""
    labels: FlexibleStringList = Field(default_factory=list)
    runs_count: int = 0
    is_workflow_managed: bool = False
    created_at: str = ""
    updated_at: str = ""


class WorkspaceFilters(FireflyModel):
    workspace_name: Optional[List[str]] = None
    repositories: Optional[List[str]] = None
    ci_tool: Optional[List[str]] = None
    labels: Optional[List[str]] = None
    status: Optional[List[str]] = None
    is_managed_workflow: Optional[bool] = None
    vcs_type: Optional[List[str]] = None


class ListWorkspacesRequest(FireflyModel):
    """Search criteria for workspaces."""

    omit_empty_fields = frozenset({"search_value", "projection"})

    filters: Optional[WorkspaceFilters] = None
    search_value: str = ""
    projection: List[str] = Field(default_factory=list)


class WorkspaceRun(FireflyModel):
    """A single plan/apply run of a workspace."""

    id: str = ""
    workspace_id: str = ""
    workspace_name: str = ""
    run_id: str = ""
    run_name: str = ""
    status: str = ""
    created_at: str = ""
    updated_at: str = ""


class WorkspaceRunFilters(FireflyModel):
    run_id: Optional[List[str]] = None
    run_name: Optional[List[str]] = None
    status: Optional[List[str]] = None
    branch: Optional[List[str]] = None
    commit_id: Optional[List[str]] = None
    ci_tool: Optional[List[str]] = None
    vcs_type: Optional[List[str]] = None
    repository: Optional[List[str]] = None


class ListWorkspaceRunsRequest(FireflyModel):
    """Search criteria for the runs of one workspace."""

    omit_empty_fields = frozenset({"search_value", "projection"})

    filters: Optional[WorkspaceRunFilters] = None
    search_value: str = ""
    projection: List[str] = Field(default_factory=list)


class UpdateWorkspaceLabelsRequest(FireflyModel):
    labels: List[str]


class UpdateWorkspaceLabelsResponse(FireflyModel):
    id: str = ""
    workspace_name: str = ""
    labels: FlexibleStringList = Field(default_factory=list)
    updated_at: str = ""


class DeleteWorkspaceData(FireflyModel):
    message: str = ""


class DeleteWorkspaceResponse(FireflyModel):
    status: int = 0
    data: DeleteWorkspaceData = Field(default_factory=DeleteWorkspaceData)


class WorkspacesService:
    """Client for the ``/v2/workspaces`` endpoints."""

    def __init__(self, client: "FireflyAPIClient"):
        self._client = client

    def list(
        self,
        request: Optional[ListWorkspacesRequest] = None,
        page: int = 0,
        page_size: int = SCAN_PAGE_SIZE,
    ) -> List[Workspace]:
        """Search workspaces.

        Args:
            request: Filters, free-text search and projection
            page: Zero-based page number
            page_size: Maximum number of workspaces per page

        Returns:
            Workspaces on the requested page
        """
        return self._client.request(
            "POST",
            f"{WORKSPACES_PATH}/search",
            params={"page": page, "pageSize": page_size},
            body=request or ListWorkspacesRequest(),
            response_model=List[Workspace],
        )

    def get(self, workspace_id: str) -> Workspace:
        """Get a workspace by id.

        Only the first page of search results is scanned; the search API
        has no id filter.

        Raises:
            NotFoundError: If the workspace is not on the first page
        """
        for workspace in self.list(page=0, page_size=SCAN_PAGE_SIZE):
            if workspace_id in (workspace.id, workspace.workspace_id):
                return workspace
        logger.debug(f"Workspace {workspace_id} not on the first {SCAN_PAGE_SIZE} results")
        raise NotFoundError("Workspace", workspace_id)

    def delete(self, workspace_id: str) -> DeleteWorkspaceResponse:
        """Delete a workspace."""
        return self._client.request(
            "DELETE",
            f"{WORKSPACES_PATH}/{quote_path_segment(workspace_id)}",
            response_model=DeleteWorkspaceResponse,
        )

    def update_labels(
        self, workspace_id: str, labels: List[str]
    ) -> UpdateWorkspaceLabelsResponse:
        """Replace a workspace's labels."""
        return self._client.request(
            "PUT",
            f"{WORKSPACES_PATH}/{quote_path_segment(workspace_id)}/labels",
            body=UpdateWorkspaceLabelsRequest(labels=labels),
            response_model=UpdateWorkspaceLabelsResponse,
        )

    def list_runs(
        self,
        workspace_id: str,
        request: Optional[ListWorkspaceRunsRequest] = None,
        page: int = 0,
        page_size: int = SCAN_PAGE_SIZE,
    ) -> List[WorkspaceRun]:
        """Search the runs of a workspace."""
        return self._client.request(
            "POST",
            f"{WORKSPACES_PATH}/{quote_path_segment(workspace_id)}/runs/search",
            params={"page": page, "pageSize": page_size},
            body=request or ListWorkspaceRunsRequest(),
            response_model=List[WorkspaceRun],
        )
