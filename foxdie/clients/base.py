"""SCM client capability interface and shared record conversion."""

from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any, Protocol, TypeVar

from foxdie.exceptions import FoxdieError, ProviderError
from foxdie.logging import get_logger
from foxdie.types.branches import ProtectedBranch
from foxdie.types.push_requests import PushRequest, PushRequestState

logger = get_logger("clients")

T = TypeVar("T")


class ScmClient(Protocol):
    def list_push_requests(self, state: PushRequestState) -> list[PushRequest]:
        ...

    def close_push_request(self, id: int) -> None:
        ...

    def list_protected_branches(self) -> list[ProtectedBranch]:
        ...


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as returned by GitHub and GitLab."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def convert_records(
    pages: Iterable[Any],
    convert: Callable[[dict[str, Any]], T],
    kind: str,
) -> list[T]:
    """
    Convert every record of every page, dropping records that do not fit.

    Args:
        pages: Decoded JSON pages, each expected to be a list of objects
        convert: Converts one provider record into a domain object
        kind: Record description used in log messages

    Returns:
        Converted records in page arrival order

    Raises:
        ProviderError: If a page is not a JSON array
    """
    items: list[T] = []
    for page in pages:
        if not isinstance(page, list):
            raise ProviderError(
                "INVALID_RESPONSE", f"Expected a list of {kind} records, got {type(page).__name__}"
            )
        for record in page:
            try:
                items.append(convert(record))
            except (KeyError, TypeError, ValueError, FoxdieError) as e:
                # Partial listings are preferred over failing the whole page
                logger.debug(f"Dropping malformed {kind} record: {e!r}")
    return items
