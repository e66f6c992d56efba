"""Backup and disaster-recovery policies API client.

Unlike the rest of the Firefly API, this family uses snake_case field
names on the wire.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Union

from pydantic import ConfigDict, Field

from .flexible import FireflyModel
from .paths import quote_path_segment

if TYPE_CHECKING:
    from .base_client import FireflyAPIClient

logger = logging.getLogger(__name__)

BACKUP_POLICIES_PATH = "/v2/backup-and-dr/policies"


class PolicyStatus(str, Enum):
    """States a backup policy can be switched between."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


class BackupModel(FireflyModel):
    """Base for backup-and-DR shapes, which are snake_case on the wire."""

    model_config = ConfigDict(alias_generator=None)


class ScheduleConfig(BackupModel):
    """When backups run.

    ``frequency`` selects which of the other fields apply, for example
    ``days_of_week`` for weekly schedules or ``cron_expression`` for
    custom ones.
    """

    omit_empty_fields = frozenset(
        {
            "hour",
            "minute",
            "days_of_week",
            "monthly_schedule_type",
            "day_of_month",
            "weekday_ordinal",
            "weekday_name",
            "cron_expression",
        }
    )

    frequency: str
    hour: Optional[int] = None
    minute: Optional[int] = None
    days_of_week: List[str] = Field(default_factory=list)
    monthly_schedule_type: str = ""
    day_of_month: Optional[int] = None
    weekday_ordinal: str = ""
    weekday_name: str = ""
    cron_expression: str = ""


class ScopeConfig(BackupModel):
    """Selects the resources a policy backs up."""

    type: str
    value: List[str] = Field(default_factory=list)


class VCSConfig(BackupModel):
    """Repository that receives the generated restore code."""

    project_id: Optional[str] = None
    vcs_integration_id: Optional[str] = None
    repo_id: Optional[str] = None


class PolicyCreateRequest(BackupModel):
    """Request body for creating a backup policy."""

    omit_empty_fields = frozenset(
        {"description", "scope", "notification_id", "restore_instructions"}
    )

    policy_name: str
    integration_id: str
    region: str
    provider_type: str
    schedule: ScheduleConfig
    description: str = ""
    scope: List[ScopeConfig] = Field(default_factory=list)
    notification_id: str = Field("", alias="notificationId")
    vcs: Optional[VCSConfig] = None
    restore_instructions: str = ""
    backup_on_save: Optional[bool] = None


class PolicyUpdateRequest(BackupModel):
    """Request body for updating a backup policy. Unset fields are not sent."""

    policy_name: Optional[str] = None
    integration_id: Optional[str] = None
    region: Optional[str] = None
    provider_type: Optional[str] = None
    schedule: Optional[ScheduleConfig] = None
    description: Optional[str] = None
    scope: Optional[List[ScopeConfig]] = None
    notification_id: Optional[str] = Field(None, alias="notificationId")
    vcs: Optional[VCSConfig] = None
    restore_instructions: Optional[str] = None


class PolicyResponse(BackupModel):
    """Backup policy as returned by the API."""

    policy_id: str = ""
    account_id: str = ""
    policy_name: str = ""
    integration_id: str = ""
    region: str = ""
    provider_type: str = ""
    schedule: Optional[ScheduleConfig] = None
    description: str = ""
    scope: List[ScopeConfig] = Field(default_factory=list)
    notification_id: str = Field("", alias="notificationId")
    vcs: Optional[VCSConfig] = None
    restore_instructions: str = ""
    backup_on_save: bool = False
    status: str = ""
    snapshots_count: int = 0
    last_backup_snapshot_id: str = ""
    last_backup_time: str = ""
    last_backup_status: str = ""
    next_backup_time: str = ""
    created_at: str = ""
    updated_at: str = ""


class Pagination(BackupModel):
    page: int = 0
    page_size: int = 0
    total: int = 0
    has_next: bool = False
    has_prev: bool = False


class FacetValue(BackupModel):
    value: str = ""
    count: int = 0


class Facet(BackupModel):
    field: str = ""
    size: int = 0
    pagination: Pagination = Field(default_factory=Pagination)
    values: List[FacetValue] = Field(default_factory=list)


class PolicyListResponse(BackupModel):
    data: List[PolicyResponse] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    facets: List[Facet] = Field(default_factory=list)


class PolicyStatusRequest(BackupModel):
    status: str


def convert_create_to_update(create: PolicyCreateRequest) -> PolicyUpdateRequest:
    """Build an update request carrying every field of a create request.

    Empty optional fields of the create request are left unset so they are
    not sent. ``backup_on_save`` cannot be changed by an update.
    """
    return PolicyUpdateRequest(
        policy_name=create.policy_name,
        integration_id=create.integration_id,
        region=create.region,
        provider_type=create.provider_type,
        schedule=create.schedule,
        restore_instructions=create.restore_instructions,
        description=create.description or None,
        notification_id=create.notification_id or None,
        scope=create.scope or None,
        vcs=create.vcs,
    )


class BackupAndDRService:
    """Client for the ``/v2/backup-and-dr/policies`` endpoints."""

    def __init__(self, client: "FireflyAPIClient"):
        self._client = client

    def create(self, policy: PolicyCreateRequest) -> PolicyResponse:
        """Create a backup policy."""
        return self._client.request(
            "POST",
            BACKUP_POLICIES_PATH,
            body=policy,
            expected_status=(200, 201),
            response_model=PolicyResponse,
        )

    def get(self, policy_id: str) -> PolicyResponse:
        """Get a backup policy by id.

        Raises:
            NotFoundError: If the policy does not exist
        """
        return self._client.request(
            "GET",
            f"{BACKUP_POLICIES_PATH}/{quote_path_segment(policy_id)}",
            response_model=PolicyResponse,
            not_found_id=policy_id,
            resource="Backup policy",
        )

    def update(self, policy_id: str, policy: PolicyUpdateRequest) -> PolicyResponse:
        """Update a backup policy."""
        return self._client.request(
            "PUT",
            f"{BACKUP_POLICIES_PATH}/{quote_path_segment(policy_id)}",
            body=policy,
            response_model=PolicyResponse,
        )

    def delete(self, policy_id: str) -> None:
        """Delete a backup policy."""
        self._client.request(
            "DELETE",
            f"{BACKUP_POLICIES_PATH}/{quote_path_segment(policy_id)}",
            expected_status=(200, 204),
        )

    def list(
        self,
        status: Optional[str] = None,
        integration_id: Optional[str] = None,
        region: Optional[str] = None,
        provider_type: Optional[str] = None,
    ) -> PolicyListResponse:
        """List backup policies, optionally filtered.

        Args:
            status: Only policies in this state (Active or Inactive)
            integration_id: Only policies of this cloud integration
            region: Only policies in this region
            provider_type: Only policies of this cloud provider

        Returns:
            PolicyListResponse with policies, pagination and facets
        """
        params = {
            "status": status,
            "integration_id": integration_id,
            "region": region,
            "provider_type": provider_type,
        }
        return self._client.request(
            "GET", BACKUP_POLICIES_PATH, params=params, response_model=PolicyListResponse
        )

    def set_status(self, policy_id: str, status: Union[PolicyStatus, str]) -> None:
        """Switch a backup policy between Active and Inactive.

        Whether the transition is allowed is decided by the server; a
        rejected transition raises ``ApiRequestError``.
        """
        value = status.value if isinstance(status, PolicyStatus) else str(status)
        logger.info(f"Setting backup policy {policy_id} status to {value}")
        self._client.request(
            "PATCH",
            f"{BACKUP_POLICIES_PATH}/{quote_path_segment(policy_id)}/status",
            body=PolicyStatusRequest(status=value),
            expected_status=(200, 204),
        )
