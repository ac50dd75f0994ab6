"""
Foxdie provider facade.

Binds a detected repository to the matching provider client for the length
of a run.
"""

from typing import Any

import httpx

from foxdie.clients import GitHubClient, GitLabClient
from foxdie.clients.base import ScmClient
from foxdie.detect import DetectorConfig, ScmDescriptor, ScmKind, detect
from foxdie.transport import HTTPTransport
from foxdie.types.branches import ProtectedBranch
from foxdie.types.push_requests import PushRequest, PushRequestState

_CLIENTS: dict[ScmKind, type[GitHubClient] | type[GitLabClient]] = {
    ScmKind.GITHUB: GitHubClient,
    ScmKind.GITLAB: GitLabClient,
}


class ScmProvider:
    """
    Provider-agnostic access to one repository's push requests and
    protected branches.

    Example:
        ```python
        from foxdie.client import ScmProvider
        from foxdie.types import PushRequestState

        with ScmProvider.from_url("git@github.com:acme/widgets.git", token) as provider:
            for pr in provider.list_push_requests(PushRequestState.OPENED):
                print(pr.id, pr.title)
        ```
    """

    def __init__(
        self,
        descriptor: ScmDescriptor,
        token: str,
        timeout: float = HTTPTransport.DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            descriptor: The resolved repository binding
            token: Personal access token for the provider
            timeout: Request timeout in seconds (default: 30.0)
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.descriptor = descriptor
        client_cls = _CLIENTS[descriptor.kind]
        self._transport = HTTPTransport(
            headers=client_cls.default_headers(token),
            timeout=timeout,
            transport=transport,
        )
        self._client: ScmClient = client_cls(self._transport, descriptor)

    @classmethod
    def from_descriptor(
        cls,
        descriptor: ScmDescriptor,
        token: str,
        transport: httpx.BaseTransport | None = None,
    ) -> "ScmProvider":
        return cls(descriptor, token, transport=transport)

    @classmethod
    def from_url(
        cls,
        url: str,
        token: str,
        config: DetectorConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "ScmProvider":
        """
        Detect the provider for a URL and bind a client to it.

        Raises:
            UnknownProviderError: If the URL cannot be classified
        """
        descriptor = detect(url, token, config=config, transport=transport)
        return cls(descriptor, token, transport=transport)

    @property
    def kind(self) -> ScmKind:
        return self.descriptor.kind

    @property
    def client(self) -> ScmClient:
        """Get the underlying provider client (for advanced use cases)."""
        return self._client

    def list_push_requests(self, state: PushRequestState) -> list[PushRequest]:
        return self._client.list_push_requests(state)

    def close_push_request(self, id: int) -> None:
        self._client.close_push_request(id)

    def list_protected_branches(self) -> list[ProtectedBranch]:
        return self._client.list_protected_branches()

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "ScmProvider":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()
