"""Projects API client for Firefly workflow runners.

Covers project CRUD, paginated listing and project membership.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from pydantic import Field, TypeAdapter, ValidationError

from ..exceptions import DecodingError, NotFoundError
from .flexible import FireflyModel, FlexibleStringList
from .models import Variable
from .paths import quote_path_segment

if TYPE_CHECKING:
    from .base_client import FireflyAPIClient

logger = logging.getLogger(__name__)

PROJECTS_PATH = "/v2/runners/projects"


class Project(FireflyModel):
    """Project as returned by the API."""

    omit_empty_fields = frozenset({"labels"})

    id: str = ""
    account_id: str = ""
    name: str = ""
    description: str = ""
    labels: FlexibleStringList = Field(default_factory=list)
    cron_execution_pattern: str = ""
    variables: List[Variable] = Field(default_factory=list)
    members_count: int = 0
    workspace_count: int = 0
    parent_id: str = ""


class CreateProjectRequest(FireflyModel):
    """Request body for creating a project."""

    omit_empty_fields = frozenset(
        {"description", "labels", "cron_execution_pattern", "variables", "parent_id"}
    )

    name: str
    description: str = ""
    labels: List[str] = Field(default_factory=list)
    cron_execution_pattern: str = ""
    variables: List[Variable] = Field(default_factory=list)
    parent_id: str = ""


class UpdateProjectRequest(FireflyModel):
    """Request body for updating a project. Unset fields are not sent."""

    name: Optional[str] = None
    description: Optional[str] = None
    labels: Optional[List[str]] = None
    cron_execution_pattern: Optional[str] = None
    variables: Optional[List[Variable]] = None


class ProjectListResponse(FireflyModel):
    """One page of projects."""

    data: List[Project] = Field(default_factory=list)
    total_count: int = 0


class Member(FireflyModel):
    """A user's membership in a project."""

    omit_empty_fields = frozenset({"email"})

    user_id: str
    email: str = ""
    role: str = ""


class MembersAcknowledgement(FireflyModel):
    """Acknowledgement returned instead of the member list by some servers."""

    message: str


_MEMBER_LIST = TypeAdapter(List[Member])


class ProjectsService:
    """Client for the ``/v2/runners/projects`` family of endpoints."""

    def __init__(self, client: "FireflyAPIClient"):
        self._client = client

    def create(self, project: CreateProjectRequest) -> Project:
        """Create a project.

        Returns:
            The created project including its server-assigned id
        """
        return self._client.request(
            "POST",
            PROJECTS_PATH,
            body=project,
            expected_status=201,
            response_model=Project,
        )

    def get(self, project_id: str) -> Project:
        """Get a project by id.

        Raises:
            NotFoundError: If the project does not exist
        """
        return self._client.request(
            "GET",
            f"{PROJECTS_PATH}/{quote_path_segment(project_id)}",
            response_model=Project,
            not_found_id=project_id,
            resource="Project",
        )

    def update(self, project_id: str, project: UpdateProjectRequest) -> Project:
        """Update a project's mutable fields."""
        return self._client.request(
            "PATCH",
            f"{PROJECTS_PATH}/{quote_path_segment(project_id)}",
            body=project,
            response_model=Project,
        )

    def delete(self, project_id: str) -> None:
        """Delete a project."""
        self._client.request(
            "DELETE",
            f"{PROJECTS_PATH}/{quote_path_segment(project_id)}",
            expected_status=204,
        )

    def list(
        self, page_size: int = 10, offset: int = 0, search_query: str = ""
    ) -> ProjectListResponse:
        """List projects one page at a time.

        Args:
            page_size: Maximum number of projects to return
            offset: Number of projects to skip
            search_query: Optional name filter

        Returns:
            ProjectListResponse with the page and the total count
        """
        return self._client.request(
            "GET",
            f"{PROJECTS_PATH}/list",
            params={"pageSize": page_size, "offset": offset, "searchQuery": search_query},
            response_model=ProjectListResponse,
        )

    def list_members(self, project_id: str) -> List[Member]:
        """List the members of a project."""
        return self._client.request(
            "GET",
            f"{PROJECTS_PATH}/{quote_path_segment(project_id)}/members",
            response_model=List[Member],
        )

    def add_members(self, project_id: str, members: List[Member]) -> List[Member]:
        """Add users to a project.

        The API answers either with the resulting member list or with a
        bare acknowledgement message; in the latter case the members that
        were sent are returned.
        """

        def decode(content: bytes) -> List[Member]:
            try:
                added = _MEMBER_LIST.validate_json(content)
            except ValidationError as list_error:
                try:
                    MembersAcknowledgement.model_validate_json(content)
                except ValidationError:
                    raise DecodingError(
                        "Failed to decode add-members response",
                        details=str(list_error),
                    ) from list_error
                logger.debug(f"Members added to project {project_id} without a member list")
                return list(members)
            return added or list(members)

        return self._client.request(
            "POST",
            f"{PROJECTS_PATH}/{quote_path_segment(project_id)}/members",
            body=members,
            expected_status=201,
            decoder=decode,
        )

    def remove_members(self, project_id: str, user_ids: List[str]) -> None:
        """Remove users from a project."""
        self._client.request(
            "DELETE",
            f"{PROJECTS_PATH}/{quote_path_segment(project_id)}/members",
            body=list(user_ids),
            expected_status=204,
        )

    def get_member(self, project_id: str, user_id: str) -> Member:
        """Get one member of a project.

        There is no single-member endpoint, so the member list is fetched
        and searched.

        Raises:
            NotFoundError: If the user is not a member of the project
        """
        for member in self.list_members(project_id):
            if member.user_id == user_id:
                return member
        raise NotFoundError("Project member", f"{user_id} in project {project_id}")

    def add_member(self, project_id: str, member: Member) -> Member:
        """Add a single user to a project."""
        added = self.add_members(project_id, [member])
        for candidate in added:
            if candidate.user_id == member.user_id:
                return candidate
        return member

    def remove_member(self, project_id: str, user_id: str) -> None:
        """Remove a single user from a project."""
        self.remove_members(project_id, [user_id])

    def update_member(self, project_id: str, member: Member) -> Member:
        """Change a member's role by removing and re-adding the user."""
        self.remove_member(project_id, member.user_id)
        return self.add_member(project_id, member)
