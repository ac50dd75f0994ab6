"""GitLab REST API (v4) client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from foxdie.clients.base import convert_records, parse_timestamp
from foxdie.pagination import PageCountPagination, PaginationStrategy
from foxdie.types.branches import ProtectedBranch
from foxdie.types.push_requests import PushRequest, PushRequestState

if TYPE_CHECKING:
    from foxdie.detect import ScmDescriptor
    from foxdie.transport import HTTPTransport


def _parse_merge_request(data: dict[str, Any]) -> PushRequest:
    return PushRequest(
        id=int(data["iid"]),
        title=data["title"],
        url=data["web_url"],
        created_at=parse_timestamp(data["created_at"]),
        updated_at=parse_timestamp(data["updated_at"]),
        source_project=int(data["source_project_id"]),
        source_branch=data["source_branch"],
        target_project=int(data["target_project_id"]),
        target_branch=data["target_branch"],
    )


def _parse_protected_branch(data: dict[str, Any]) -> ProtectedBranch:
    return ProtectedBranch.from_name(data["name"])


class GitLabClient:
    """Client for gitlab.com and self-managed GitLab projects."""

    def __init__(
        self,
        transport: "HTTPTransport",
        descriptor: "ScmDescriptor",
        pagination: PaginationStrategy | None = None,
    ) -> None:
        """
        Initialize the GitLab client.

        Args:
            transport: HTTP transport carrying the PRIVATE-TOKEN header
            descriptor: The project to operate on
            pagination: Pagination strategy (default: page count headers)
        """
        self.transport = transport
        self.descriptor = descriptor
        self.pagination = pagination or PageCountPagination()

    @staticmethod
    def default_headers(token: str) -> dict[str, str]:
        return {"PRIVATE-TOKEN": token}

    @property
    def project_url(self) -> str:
        # GitLab addresses a project by its full path as a single segment
        namespace = quote(self.descriptor.project_path, safe="")
        return f"{self.descriptor.base_url}/api/v4/projects/{namespace}"

    def list_push_requests(self, state: PushRequestState) -> list[PushRequest]:
        """
        List merge requests in the given state.

        A project whose listing carries no pagination headers is reported as
        having no merge requests.

        Args:
            state: OPENED or CLOSED

        Returns:
            Merge requests in page order

        Raises:
            ProviderError: If the HEAD request or any page request fails
        """
        pages = self.pagination.pages(
            self.transport,
            f"{self.project_url}/merge_requests",
            params={"state": state.gitlab_value},
        )
        return convert_records(pages, _parse_merge_request, "merge request")

    def close_push_request(self, id: int) -> None:
        """
        Close a merge request.

        Args:
            id: The merge request iid

        Raises:
            ProviderError: If the request fails
        """
        self.transport.request(
            "PUT",
            f"{self.project_url}/merge_requests/{id}",
            params={"state_event": "close"},
        )

    def list_protected_branches(self) -> list[ProtectedBranch]:
        """
        List protected branch rules.

        Names that are not valid globs (GitLab wildcards are globs) are skipped.

        Raises:
            ProviderError: If the request fails
        """
        page = self.transport.get_json(f"{self.project_url}/protected_branches")
        return convert_records([page], _parse_protected_branch, "protected branch")
