"""Runner workspaces API client.

Runner workspaces bind a VCS repository to a Firefly-managed runner that
plans and applies Terraform or OpenTofu code.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import Field

from .flexible import FireflyModel, FlexibleStringList
from .models import Variable
from .paths import quote_path_segment

if TYPE_CHECKING:
    from .base_client import FireflyAPIClient

logger = logging.getLogger(__name__)

RUNNERS_WORKSPACES_PATH = "/v2/runners/workspaces"


class ApplyRule(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"


class IacProvisioner(FireflyModel):
    """IaC tool used by a workspace (terraform or opentofu) and its version."""

    type: str
    version: str = ""


class ExecutionConfig(FireflyModel):
    """When and how runs are triggered."""

    triggers: List[str] = Field(default_factory=list)
    apply_rule: ApplyRule = ApplyRule.MANUAL
    terraform_version: str = ""


class CreateRunnersWorkspaceRequest(FireflyModel):
    """Request body for creating a runner workspace."""

    omit_empty_fields = frozenset({"description", "labels", "consumed_variable_sets"})

    runner_type: str
    iac_type: str
    workspace_name: str
    description: str = ""
    labels: List[str] = Field(default_factory=list)
    vcs_id: str
    repo: str
    default_branch: str
    vcs_type: str
    work_dir: str = ""
    variables: List[Variable] = Field(default_factory=list)
    consumed_variable_sets: List[str] = Field(default_factory=list)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    project: Optional[str] = None
    terraform_variables: Optional[Dict[str, Any]] = None
    terraform_sensitive_variables: Optional[Dict[str, Any]] = None
    providers_credentials: Optional[Dict[str, Any]] = None
    runner_environment: Optional[Dict[str, Any]] = None


class UpdateRunnersWorkspaceRequest(FireflyModel):
    """Request body for updating a runner workspace. Unset fields are not sent."""

    name: Optional[str] = None
    description: Optional[str] = None
    labels: Optional[List[str]] = None
    vcs_integration_id: Optional[str] = None
    repository: Optional[str] = None
    default_branch: Optional[str] = None
    working_directory: Optional[str] = None
    cron_execution_pattern: Optional[str] = None
    iac_provisioner: Optional[IacProvisioner] = None
    variables: Optional[List[Variable]] = None
    consumed_variable_sets: Optional[List[str]] = None


class RunnersWorkspace(FireflyModel):
    """Runner workspace as returned by the API."""

    omit_empty_fields = frozenset({"labels", "project_id"})

    id: str = ""
    name: str = ""
    description: str = ""
    account_id: str = ""
    repository: str = ""
    working_directory: str = ""
    vcs_integration_id: str = ""
    vcs: str = ""
    default_branch: str = ""
    cron_execution_pattern: str = ""
    iac_provisioner: Optional[IacProvisioner] = None
    labels: FlexibleStringList = Field(default_factory=list)
    project_id: str = ""


class RunTaskRequest(FireflyModel):
    task_type: str


class TaskResponse(FireflyModel):
    """Task queued on a workspace."""

    task_id: str
    status: str = ""


class RunnersWorkspacesService:
    """Client for the ``/v2/runners/workspaces`` endpoints."""

    def __init__(self, client: "FireflyAPIClient"):
        self._client = client

    def create(self, workspace: CreateRunnersWorkspaceRequest) -> RunnersWorkspace:
        """Create a runner workspace."""
        return self._client.request(
            "POST",
            RUNNERS_WORKSPACES_PATH,
            body=workspace,
            expected_status=201,
            response_model=RunnersWorkspace,
        )

    def get(self, workspace_id: str) -> RunnersWorkspace:
        """Get a runner workspace by id.

        Raises:
            NotFoundError: If the workspace does not exist
        """
        return self._client.request(
            "GET",
            f"{RUNNERS_WORKSPACES_PATH}/{quote_path_segment(workspace_id)}",
            response_model=RunnersWorkspace,
            not_found_id=workspace_id,
            resource="Runners workspace",
        )

    def update(
        self, workspace_id: str, workspace: UpdateRunnersWorkspaceRequest
    ) -> RunnersWorkspace:
        """Update a runner workspace."""
        return self._client.request(
            "PUT",
            f"{RUNNERS_WORKSPACES_PATH}/{quote_path_segment(workspace_id)}",
            body=workspace,
            response_model=RunnersWorkspace,
        )

    def delete(self, workspace_id: str) -> None:
        """Delete a runner workspace."""
        self._client.request(
            "DELETE",
            f"{RUNNERS_WORKSPACES_PATH}/{quote_path_segment(workspace_id)}",
            expected_status=(200, 204),
        )

    def run_destroy_task(self, workspace_id: str) -> TaskResponse:
        """Queue a task that destroys every resource managed by the workspace.

        Returns:
            TaskResponse with the queued task id and its initial status
        """
        logger.info(f"Queueing destroy task for workspace {workspace_id}")
        return self._client.request(
            "POST",
            f"{RUNNERS_WORKSPACES_PATH}/{quote_path_segment(workspace_id)}/tasks/destroy",
            body=RunTaskRequest(task_type="destroy"),
            response_model=TaskResponse,
        )
