"""GitHub REST API (v3) client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from foxdie.clients.base import convert_records, parse_timestamp
from foxdie.pagination import LinkHeaderPagination, PaginationStrategy
from foxdie.types.branches import ProtectedBranch
from foxdie.types.push_requests import PushRequest, PushRequestState

if TYPE_CHECKING:
    from foxdie.detect import ScmDescriptor
    from foxdie.transport import HTTPTransport

ACCEPT = "application/vnd.github.v3+json"
USER_AGENT = "foxdie"


def _parse_pull_request(data: dict[str, Any]) -> PushRequest:
    """
    Parse a pull request record.

    ``head.repo`` is null once a fork has been deleted; such records raise
    TypeError and are dropped by the caller.
    """
    head = data["head"]
    base = data["base"]
    return PushRequest(
        id=int(data["number"]),
        title=data["title"],
        url=data["html_url"],
        created_at=parse_timestamp(data["created_at"]),
        updated_at=parse_timestamp(data["updated_at"]),
        source_project=int(head["repo"]["id"]),
        source_branch=head["ref"],
        target_project=int(base["repo"]["id"]),
        target_branch=base["ref"],
    )


def _parse_protected_branch(data: dict[str, Any]) -> ProtectedBranch:
    return ProtectedBranch.from_name(data["name"])


class GitHubClient:
    """Client for GitHub and GitHub Enterprise repositories."""

    def __init__(
        self,
        transport: "HTTPTransport",
        descriptor: "ScmDescriptor",
        pagination: PaginationStrategy | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            transport: HTTP transport carrying GitHub auth headers
            descriptor: The repository to operate on
            pagination: Pagination strategy (default: Link header)
        """
        self.transport = transport
        self.descriptor = descriptor
        self.pagination = pagination or LinkHeaderPagination()

    @staticmethod
    def default_headers(token: str) -> dict[str, str]:
        return {
            "Accept": ACCEPT,
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
        }

    @property
    def repo_url(self) -> str:
        owner = quote(self.descriptor.owner, safe="")
        repo = quote(self.descriptor.repo, safe="")
        return f"{self.descriptor.base_url}/repos/{owner}/{repo}"

    def list_push_requests(self, state: PushRequestState) -> list[PushRequest]:
        """
        List pull requests in the given state, following every page.

        Args:
            state: OPENED or CLOSED

        Returns:
            Pull requests in page order

        Raises:
            ProviderError: If any page request fails
        """
        pages = self.pagination.pages(
            self.transport,
            f"{self.repo_url}/pulls",
            params={"state": state.github_value},
        )
        return convert_records(pages, _parse_pull_request, "pull request")

    def close_push_request(self, id: int) -> None:
        """
        Close a pull request.

        Args:
            id: The pull request number

        Raises:
            ProviderError: If the request fails
        """
        self.transport.request(
            "PATCH",
            f"{self.repo_url}/pulls/{id}",
            params={"state": "closed"},
            body={"state": "closed"},
        )

    def list_protected_branches(self) -> list[ProtectedBranch]:
        """
        List protected branch rules.

        Names that are not valid globs are skipped.

        Raises:
            ProviderError: If any page request fails
        """
        pages = self.pagination.pages(
            self.transport,
            f"{self.repo_url}/branches",
            params={"protected": "true"},
        )
        return convert_records(pages, _parse_protected_branch, "protected branch")
