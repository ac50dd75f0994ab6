"""Stale push request cleanup for a single repository URL."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import httpx

from foxdie.actions.base import ProviderLike, default_provider_factory
from foxdie.detect import DetectorConfig
from foxdie.eligibility import select_push_requests_to_close, summarize_push_requests
from foxdie.logging import get_logger
from foxdie.types.push_requests import PushRequest, PushRequestState

logger = get_logger("actions.push_requests")


@dataclass
class PushRequestCleanupOptions:
    """
    Options for :func:`clean_push_requests`.

    Attributes:
        should_delete: Close the push requests; otherwise only report them
        since: Push requests updated on or after this date are kept
        token: Personal access token for the provider
        config: Provider overrides for self-hosted installations
        transport: Optional httpx transport for provider requests
        provider_factory: Builds a provider for the URL
    """

    should_delete: bool
    since: datetime
    token: str
    config: DetectorConfig | None = None
    transport: httpx.BaseTransport | None = None
    provider_factory: Callable[[str], ProviderLike] | None = None

    def open_provider(self, url: str) -> ProviderLike:
        if self.provider_factory is not None:
            return self.provider_factory(url)
        return default_provider_factory(self.token, self.config, self.transport)(url)


def clean_push_requests(url: str, options: PushRequestCleanupOptions) -> list[PushRequest]:
    """
    Close stale, non-fork push requests filed against a repository.

    Args:
        url: Repository URL (HTTPS, SSH or scp-style)
        options: Cleanup options

    Returns:
        The push requests found eligible (closed only with should_delete)

    Raises:
        UnknownProviderError: If the URL cannot be classified
        ProviderError: If listing or closing fails
    """
    with options.open_provider(url) as provider:
        logger.info(f"Checking for push requests created from before {options.since.isoformat()}.")
        open_push_requests = provider.list_push_requests(PushRequestState.OPENED)
        eligible = select_push_requests_to_close(open_push_requests, options.since)
        logger.info(summarize_push_requests(eligible, len(open_push_requests)))

        if not options.should_delete:
            return eligible

        logger.info("Preparing to close push requests...")
        for push_request in eligible:
            provider.close_push_request(push_request.id)
            logger.info(f"Closed #{push_request.id}")
        logger.info("All done closing push requests.")

    return eligible
