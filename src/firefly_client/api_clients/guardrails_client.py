"""Guardrails API client.

Guardrails are rules evaluated against IaC plans: cost thresholds,
policy violations, resource actions and tag enforcement.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from pydantic import Field

from ..exceptions import NotFoundError
from .flexible import FireflyModel, decode_string_or_object
from .paths import quote_path_segment

if TYPE_CHECKING:
    from .base_client import FireflyAPIClient

logger = logging.getLogger(__name__)

GUARDRAILS_PATH = "/v2/guardrails"
SCAN_PAGE_SIZE = 100

GUARDRAIL_SEVERITIES = {"Flexible": 1, "Strict": 2, "Warning": 3}
UNKNOWN_SEVERITY = "Unknown"


def guardrail_severity_to_string(severity: int) -> str:
    """Name of a numeric guardrail severity, or "Unknown"."""
    for name, value in GUARDRAIL_SEVERITIES.items():
        if value == severity:
            return name
    return UNKNOWN_SEVERITY


def guardrail_severity_to_int(severity: str) -> int:
    """Numeric value of a guardrail severity name; unknown names map to 0."""
    return GUARDRAIL_SEVERITIES.get(severity, 0)


class GuardrailType(str, Enum):
    COST = "cost"
    POLICY = "policy"
    RESOURCE = "resource"
    TAG = "tag"


class IncludeExcludeWildcard(FireflyModel):
    """Include/exclude patterns; ``*`` matches everything."""

    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None


class GuardrailScope(FireflyModel):
    workspaces: Optional[IncludeExcludeWildcard] = None
    repositories: Optional[IncludeExcludeWildcard] = None
    branches: Optional[IncludeExcludeWildcard] = None
    labels: Optional[IncludeExcludeWildcard] = None


class CostCriteria(FireflyModel):
    threshold_amount: Optional[float] = None
    threshold_percentage: Optional[float] = None


class PolicyCriteria(FireflyModel):
    severity: Optional[str] = None
    policies: Optional[IncludeExcludeWildcard] = None


class ResourceCriteria(FireflyModel):
    actions: Optional[List[str]] = None
    regions: Optional[IncludeExcludeWildcard] = None
    asset_types: Optional[IncludeExcludeWildcard] = None
    specific_resources: Optional[List[str]] = None


class TagCriteria(FireflyModel):
    tag_enforcement_mode: Optional[str] = None
    required_tags: Optional[List[str]] = None
    required_values: Optional[Dict[str, List[str]]] = None


class GuardrailCriteria(FireflyModel):
    """Criteria block; only the entry matching the rule type is set."""

    cost: Optional[CostCriteria] = None
    policy: Optional[PolicyCriteria] = None
    resource: Optional[ResourceCriteria] = None
    tag: Optional[TagCriteria] = None


class GuardrailRule(FireflyModel):
    """A guardrail rule, used both as request body and as response."""

    omit_empty_fields = frozenset(
        {"id", "account_id", "created_by", "created_at", "updated_at", "notification_id"}
    )

    id: str = ""
    account_id: str = ""
    created_by: str = ""
    name: str
    type: GuardrailType
    scope: Optional[GuardrailScope] = None
    criteria: Optional[GuardrailCriteria] = None
    is_enabled: bool = True
    created_at: str = ""
    updated_at: str = ""
    notification_id: str = ""
    severity: int = 0


class GuardrailFilters(FireflyModel):
    created_by: Optional[List[str]] = None
    type: Optional[List[str]] = None
    labels: Optional[List[str]] = None
    repositories: Optional[List[str]] = None
    workspaces: Optional[List[str]] = None
    branches: Optional[List[str]] = None


class ListGuardrailsRequest(FireflyModel):
    omit_empty_fields = frozenset({"search_value", "projection"})

    filters: Optional[GuardrailFilters] = None
    search_value: str = ""
    projection: List[str] = Field(default_factory=list)


class CreateGuardrailResponse(FireflyModel):
    """Identifiers of a newly created guardrail.

    The API returns either this object or just the rule id as a bare JSON
    string; both decode to this shape.
    """

    rule_id: str = ""
    notification_id: str = ""


class UpdateGuardrailResponse(FireflyModel):
    id: str = ""
    name: str = ""
    enabled: bool = False
    updated_at: str = ""


class DeleteGuardrailResponse(FireflyModel):
    status: int = 0
    message: str = ""


def decode_create_guardrail_response(content: bytes) -> CreateGuardrailResponse:
    return decode_string_or_object(content, CreateGuardrailResponse, "rule_id")


class GuardrailsService:
    """Client for the ``/v2/guardrails`` endpoints."""

    def __init__(self, client: "FireflyAPIClient"):
        self._client = client

    def list(
        self,
        request: Optional[ListGuardrailsRequest] = None,
        page: int = 0,
        page_size: int = SCAN_PAGE_SIZE,
    ) -> List[GuardrailRule]:
        """Search guardrail rules.

        Args:
            request: Filters, free-text search and projection
            page: Zero-based page number
            page_size: Maximum number of rules per page

        Returns:
            Guardrail rules on the requested page
        """
        return self._client.request(
            "POST",
            f"{GUARDRAILS_PATH}/search",
            params={"page": page, "pageSize": page_size},
            body=request or ListGuardrailsRequest(),
            response_model=List[GuardrailRule],
        )

    def create(self, rule: GuardrailRule) -> CreateGuardrailResponse:
        """Create a guardrail rule.

        Returns:
            CreateGuardrailResponse with the new rule id. The notification
            id is empty when the server only returned the rule id.
        """
        return self._client.request(
            "POST",
            GUARDRAILS_PATH,
            body=rule,
            decoder=decode_create_guardrail_response,
        )

    def get(self, rule_id: str) -> GuardrailRule:
        """Get a guardrail rule by id.

        There is no single-rule endpoint; the first page of search results
        is scanned instead.

        Raises:
            NotFoundError: If the rule is not on the first page
        """
        for rule in self.list(page=0, page_size=SCAN_PAGE_SIZE):
            if rule.id == rule_id:
                return rule
        logger.debug(f"Guardrail {rule_id} not on the first {SCAN_PAGE_SIZE} results")
        raise NotFoundError("Guardrail", rule_id)

    def update(self, rule_id: str, rule: GuardrailRule) -> UpdateGuardrailResponse:
        """Update a guardrail rule.

        The response only carries the id, name, enabled flag and update
        time; call ``get`` for the full rule.
        """
        return self._client.request(
            "PATCH",
            f"{GUARDRAILS_PATH}/{quote_path_segment(rule_id)}",
            body=rule,
            response_model=UpdateGuardrailResponse,
        )

    def delete(self, rule_id: str) -> DeleteGuardrailResponse:
        """Delete a guardrail rule."""
        return self._client.request(
            "DELETE",
            f"{GUARDRAILS_PATH}/{quote_path_segment(rule_id)}",
            response_model=DeleteGuardrailResponse,
        )
