"""API clients for the Firefly cloud-governance API.

``FireflyAPIClient`` owns authentication and the HTTP pipeline; each
resource family is reached through one of its service attributes.
"""

from .backup_and_dr_client import (
    BackupAndDRService,
    PolicyCreateRequest,
    PolicyListResponse,
    PolicyResponse,
    PolicyStatus,
    PolicyUpdateRequest,
    ScheduleConfig,
    ScopeConfig,
    VCSConfig,
    convert_create_to_update,
)
from .base_client import DEFAULT_USER_AGENT, FireflyAPIClient
from .credential_manager import AccessToken, CredentialManager
from .flexible import FireflyModel, FlexibleStringList
from .governance_policies_client import (
    GovernancePoliciesResponse,
    GovernancePoliciesService,
    GovernancePolicy,
    GovernancePolicyListRequest,
    GovernancePolicyRequest,
    severity_to_int,
    severity_to_string,
)
from .guardrails_client import (
    CreateGuardrailResponse,
    GuardrailCriteria,
    GuardrailRule,
    GuardrailScope,
    GuardrailsService,
    GuardrailType,
    ListGuardrailsRequest,
    guardrail_severity_to_int,
    guardrail_severity_to_string,
)
from .models import Variable, VariableDestination, VariableSensitivity
from .projects_client import (
    CreateProjectRequest,
    Member,
    Project,
    ProjectListResponse,
    ProjectsService,
    UpdateProjectRequest,
)
from .runners_workspaces_client import (
    CreateRunnersWorkspaceRequest,
    RunnersWorkspace,
    RunnersWorkspacesService,
    TaskResponse,
    UpdateRunnersWorkspaceRequest,
)
from .variable_sets_client import (
    CreateVariableSetRequest,
    UpdateVariableSetRequest,
    VariableSet,
    VariableSetsService,
)
from .workspaces_client import (
    ListWorkspaceRunsRequest,
    ListWorkspacesRequest,
    Workspace,
    WorkspaceRun,
    WorkspacesService,
)

__all__ = [
    # Core
    "FireflyAPIClient",
    "DEFAULT_USER_AGENT",
    "AccessToken",
    "CredentialManager",
    "FireflyModel",
    "FlexibleStringList",
    # Shared models
    "Variable",
    "VariableSensitivity",
    "VariableDestination",
    # Projects
    "ProjectsService",
    "Project",
    "CreateProjectRequest",
    "UpdateProjectRequest",
    "ProjectListResponse",
    "Member",
    # Variable sets
    "VariableSetsService",
    "VariableSet",
    "CreateVariableSetRequest",
    "UpdateVariableSetRequest",
    # Runners workspaces
    "RunnersWorkspacesService",
    "RunnersWorkspace",
    "CreateRunnersWorkspaceRequest",
    "UpdateRunnersWorkspaceRequest",
    "TaskResponse",
    # Workspaces
    "WorkspacesService",
    "Workspace",
    "WorkspaceRun",
    "ListWorkspacesRequest",
    "ListWorkspaceRunsRequest",
    # Guardrails
    "GuardrailsService",
    "GuardrailRule",
    "GuardrailType",
    "GuardrailScope",
    "GuardrailCriteria",
    "ListGuardrailsRequest",
    "CreateGuardrailResponse",
    "guardrail_severity_to_int",
    "guardrail_severity_to_string",
    # Governance policies
    "GovernancePoliciesService",
    "GovernancePolicy",
    "GovernancePolicyRequest",
    "GovernancePolicyListRequest",
    "GovernancePoliciesResponse",
    "severity_to_int",
    "severity_to_string",
    # Backup and DR
    "BackupAndDRService",
    "PolicyCreateRequest",
    "PolicyUpdateRequest",
    "PolicyResponse",
    "PolicyListResponse",
    "PolicyStatus",
    "ScheduleConfig",
    "ScopeConfig",
    "VCSConfig",
    "convert_create_to_update",
]
