"""Provider seam shared by the actions."""

from collections.abc import Callable
from typing import Any, Protocol

import httpx

from foxdie.client import ScmProvider
from foxdie.detect import DetectorConfig, ScmDescriptor
from foxdie.types.branches import ProtectedBranch
from foxdie.types.push_requests import PushRequest, PushRequestState


class ProviderLike(Protocol):
    """What the actions need from a provider; ScmProvider and MockScmProvider both fit."""

    descriptor: ScmDescriptor

    def list_push_requests(self, state: PushRequestState) -> list[PushRequest]: ...

    def close_push_request(self, id: int) -> None: ...

    def list_protected_branches(self) -> list[ProtectedBranch]: ...

    def close(self) -> None: ...

    def __enter__(self) -> Any: ...

    def __exit__(self, *args: Any) -> None: ...


def default_provider_factory(
    token: str,
    config: DetectorConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Callable[[str], ScmProvider]:
    """
    Build a factory that detects the provider of a URL and binds to it.

    Raises (from the returned factory):
        UnknownProviderError: If the URL cannot be classified
    """

    def factory(url: str) -> ScmProvider:
        return ScmProvider.from_url(url, token, config=config, transport=transport)

    return factory
