"""Variable sets API client for Firefly workflow runners."""

import logging
from typing import TYPE_CHECKING, List, Optional

from pydantic import Field

from .flexible import FireflyModel, FlexibleStringList
from .models import Variable
from .paths import quote_path_segment

if TYPE_CHECKING:
    from .base_client import FireflyAPIClient

logger = logging.getLogger(__name__)

VARIABLE_SETS_PATH = "/v2/runners/variables/variable-sets"


class VariableSet(FireflyModel):
    """Variable set as returned by the API."""

    omit_empty_fields = frozenset({"labels"})

    id: str = ""
    version: int = 0
    name: str = ""
    description: str = ""
    labels: FlexibleStringList = Field(default_factory=list)
    parents: List[str] = Field(default_factory=list)
    variables: List[Variable] = Field(default_factory=list)
    descendants: List[str] = Field(default_factory=list)


class CreateVariableSetRequest(FireflyModel):
    """Request body for creating a variable set."""

    omit_empty_fields = frozenset({"description", "labels", "parents", "variables"})

    name: str
    description: str = ""
    labels: List[str] = Field(default_factory=list)
    parents: List[str] = Field(default_factory=list)
    variables: List[Variable] = Field(default_factory=list)


class UpdateVariableSetRequest(FireflyModel):
    """Request body for replacing a variable set's attributes."""

    name: Optional[str] = None
    description: Optional[str] = None
    labels: Optional[List[str]] = None
    parents: Optional[List[str]] = None
    variables: Optional[List[Variable]] = None


class CreateVariableSetResponse(FireflyModel):
    variable_set_id: str


class UpsertVariablesRequest(FireflyModel):
    variables: List[Variable]


class DeleteVariablesRequest(FireflyModel):
    variable_ids: List[str]


class VariableSetsService:
    """Client for the ``/v2/runners/variables/variable-sets`` endpoints."""

    def __init__(self, client: "FireflyAPIClient"):
        self._client = client

    def create(self, variable_set: CreateVariableSetRequest) -> CreateVariableSetResponse:
        """Create a variable set and return its new id."""
        return self._client.request(
            "POST",
            VARIABLE_SETS_PATH,
            body=variable_set,
            expected_status=201,
            response_model=CreateVariableSetResponse,
        )

    def get(self, variable_set_id: str) -> VariableSet:
        """Get a variable set by id.

        Raises:
            NotFoundError: If the variable set does not exist
        """
        return self._client.request(
            "GET",
            f"{VARIABLE_SETS_PATH}/{quote_path_segment(variable_set_id)}",
            response_model=VariableSet,
            not_found_id=variable_set_id,
            resource="Variable set",
        )

    def update(
        self, variable_set_id: str, variable_set: UpdateVariableSetRequest
    ) -> VariableSet:
        return self._client.request(
            "PUT",
            f"{VARIABLE_SETS_PATH}/{quote_path_segment(variable_set_id)}",
            body=variable_set,
            response_model=VariableSet,
        )

    def delete(self, variable_set_id: str) -> None:
        self._client.request(
            "DELETE",
            f"{VARIABLE_SETS_PATH}/{quote_path_segment(variable_set_id)}",
            expected_status=204,
        )

    def list(
        self, page_size: int = 10, offset: int = 0, search_query: str = ""
    ) -> List[VariableSet]:
        """List variable sets one page at a time."""
        return self._client.request(
            "GET",
            VARIABLE_SETS_PATH,
            params={"pageSize": page_size, "offset": offset, "searchQuery": search_query},
            response_model=List[VariableSet],
        )

    def upsert_variables(
        self, variable_set_id: str, variables: List[Variable]
    ) -> List[Variable]:
        """Create or overwrite variables in a set, keyed by variable name.

        Returns:
            The variables stored in the set after the upsert
        """
        return self._client.request(
            "POST",
            f"{VARIABLE_SETS_PATH}/{quote_path_segment(variable_set_id)}/variables",
            body=UpsertVariablesRequest(variables=variables),
            response_model=List[Variable],
        )

    def delete_variables(self, variable_set_id: str, variable_ids: List[str]) -> None:
        """Remove variables from a set."""
        logger.debug(f"Deleting {len(variable_ids)} variables from set {variable_set_id}")
        self._client.request(
            "DELETE",
            f"{VARIABLE_SETS_PATH}/{quote_path_segment(variable_set_id)}/variables",
            body=DeleteVariablesRequest(variable_ids=variable_ids),
            expected_status=204,
        )
