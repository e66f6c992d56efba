"""Governance policies API client.

Governance policies (insights) are Rego rules that Firefly evaluates
against cloud assets. The API has no single-policy GET; lookups go
through the list endpoint with an id filter.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from pydantic import AliasChoices, Field

from ..exceptions import NotFoundError
from .flexible import FireflyModel, FlexibleStringList
from .paths import quote_path_segment

if TYPE_CHECKING:
    from .base_client import FireflyAPIClient

logger = logging.getLogger(__name__)

GOVERNANCE_INSIGHTS_PATH = "/v2/governance/insights"
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 50

SEVERITY_LEVELS = {
    "trace": 1,
    "info": 2,
    "low": 3,
    "medium": 4,
    "high": 5,
    "critical": 6,
}
DEFAULT_SEVERITY = "low"


def severity_to_string(severity: int) -> str:
    """Convert a numeric severity to its name; unknown values map to "low"."""
    for name, value in SEVERITY_LEVELS.items():
        if value == severity:
            return name
    return DEFAULT_SEVERITY


def severity_to_int(severity: str) -> int:
    """Convert a severity name to its numeric value; unknown names map to 3."""
    return SEVERITY_LEVELS.get(severity, SEVERITY_LEVELS[DEFAULT_SEVERITY])


class GovernancePolicy(FireflyModel):
    """Governance policy as returned by the API.

    ``code`` holds the base64-encoded Rego source.
    """

    omit_empty_fields = frozenset(
        {"id", "description", "labels", "category", "frameworks"}
    )

    id: str = ""
    name: str = ""
    description: str = ""
    code: str = ""
    type: List[str] = Field(default_factory=list)
    provider_ids: List[str] = Field(default_factory=list)
    labels: FlexibleStringList = Field(default_factory=list)
    severity: int = 0
    category: str = ""
    frameworks: List[str] = Field(default_factory=list)


class GovernancePolicyRequest(FireflyModel):
    """Request body for creating or updating a governance policy."""

    omit_empty_fields = frozenset({"description", "labels", "category", "frameworks"})

    name: str
    description: str = ""
    code: str
    type: List[str]
    provider_ids: List[str]
    labels: List[str] = Field(default_factory=list)
    severity: int = SEVERITY_LEVELS[DEFAULT_SEVERITY]
    category: str = ""
    frameworks: List[str] = Field(default_factory=list)


class GovernancePolicyListRequest(FireflyModel):
    """Filters accepted by the governance policy list endpoint."""

    query: Optional[str] = None
    labels: Optional[List[str]] = None
    frameworks: Optional[List[str]] = None
    category: Optional[str] = None
    is_default: Optional[bool] = None
    only_subscribed: Optional[bool] = None
    only_production: Optional[bool] = None
    only_matching_assets: Optional[bool] = None
    only_enabled: Optional[bool] = None
    only_available_providers: Optional[bool] = None
    show_exclusion: Optional[bool] = None
    type: Optional[List[str]] = None
    providers: Optional[List[str]] = None
    integrations: Optional[List[str]] = None
    severity: Optional[List[int]] = None
    id: Optional[List[str]] = None
    page: int = DEFAULT_PAGE
    page_size: int = Field(DEFAULT_PAGE_SIZE, alias="page_size")
    sorting: Optional[List[str]] = None


class GovernancePoliciesResponse(FireflyModel):
    """One page of governance policies.

    Older API versions return the entries under ``data``, newer ones
    under ``hits``.
    """

    hits: List[GovernancePolicy] = Field(
        default_factory=list,
        validation_alias=AliasChoices("hits", "data"),
        serialization_alias="hits",
    )
    total: int = 0
    page: int = 0
    page_size: int = Field(0, alias="page_size")


class GovernancePoliciesService:
    """Client for the ``/v2/governance/insights`` endpoints."""

    def __init__(self, client: "FireflyAPIClient"):
        self._client = client

    def list(
        self, request: Optional[GovernancePolicyListRequest] = None
    ) -> GovernancePoliciesResponse:
        """List governance policies matching the given filters.

        Args:
            request: Filters and paging; defaults to page 1 of 50

        Returns:
            GovernancePoliciesResponse with one page of policies
        """
        return self._client.request(
            "POST",
            GOVERNANCE_INSIGHTS_PATH,
            body=request or GovernancePolicyListRequest(),
            response_model=GovernancePoliciesResponse,
        )

    def get(self, policy_id: str) -> GovernancePolicy:
        """Get a governance policy by id.

        Raises:
            NotFoundError: If no policy with this id exists
        """
        page = self.list(GovernancePolicyListRequest(id=[policy_id], page_size=1))
        for policy in page.hits:
            if policy.id == policy_id:
                return policy
        raise NotFoundError("Governance policy", policy_id)

    def create(self, policy: GovernancePolicyRequest) -> GovernancePolicy:
        """Create a governance policy."""
        return self._client.request(
            "POST",
            f"{GOVERNANCE_INSIGHTS_PATH}/create",
            body=policy,
            expected_status=(200, 201),
            response_model=GovernancePolicy,
        )

    def update(
        self, policy_id: str, policy: GovernancePolicyRequest, refetch: bool = True
    ) -> GovernancePolicy:
        """Update a governance policy.

        The update endpoint may answer with an empty id or with stale
        frameworks. With ``refetch`` the policy is read back through
        ``get`` and that state is returned instead.

        Raises:
            NotFoundError: If ``refetch`` is set and the policy cannot be
                read back
        """
        updated = self._client.request(
            "PUT",
            f"{GOVERNANCE_INSIGHTS_PATH}/{quote_path_segment(policy_id)}",
            body=policy,
            response_model=GovernancePolicy,
        )
        if not refetch:
            return updated
        logger.debug(f"Re-reading governance policy {policy_id} after update")
        return self.get(policy_id)

    def delete(self, policy_id: str) -> None:
        """Delete a governance policy."""
        self._client.request(
            "DELETE",
            f"{GOVERNANCE_INSIGHTS_PATH}/{quote_path_segment(policy_id)}",
            expected_status=(200, 204),
        )
