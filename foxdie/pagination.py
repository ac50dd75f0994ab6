"""
Pagination strategies.

GitHub and GitLab paginate listings differently:

- GitHub points at the following page with an RFC 5988 ``Link`` header and
  the client follows ``rel="next"`` until it disappears.
- GitLab reports the page count up front in ``x-page`` / ``x-total`` /
  ``x-total-pages`` headers, discovered with a ``HEAD`` request, and the
  client then requests each page number in turn.

Each strategy yields decoded JSON pages in arrival order.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from foxdie.logging import get_logger
from foxdie.transport import decode_json

if TYPE_CHECKING:
    from collections.abc import Mapping

    from foxdie.transport import HTTPTransport

logger = get_logger("pagination")

_LINK_ENTRY = re.compile(r"<([^>]*)>([^<]*)")


class PaginationStrategy(Protocol):
    def pages(
        self,
        transport: "HTTPTransport",
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Iterator[Any]:
        ...


@dataclass(frozen=True)
class Link:
    """One entry of a ``Link`` header."""

    uri: str
    rel: str


@dataclass(frozen=True)
class Links:
    """All entries of a ``Link`` header."""

    links: tuple[Link, ...]

    def find(self, rel: str) -> Link | None:
        return next((link for link in self.links if link.rel == rel), None)

    @property
    def next(self) -> Link | None:
        return self.find("next")


def parse_link_header(header: str) -> Links:
    """
    Parse an RFC 5988 ``Link`` header.

    Args:
        header: e.g. '<https://api.github.com/...&page=2>; rel="next", <...>; rel="last"'

    Returns:
        The parsed entries; entries without a ``rel`` parameter are skipped
    """
    links = []
    for match in _LINK_ENTRY.finditer(header):
        uri = match.group(1).strip()
        rel = None
        for param in match.group(2).split(";"):
            key, _, value = param.strip().rstrip(",").partition("=")
            if key.strip().lower() == "rel":
                rel = value.strip().strip('"')
                break
        if rel is None:
            continue
        # A rel may carry several space-separated relation types
        for name in rel.split():
            links.append(Link(uri=uri, rel=name))
    return Links(links=tuple(links))


class LinkHeaderPagination:
    """Follow ``rel="next"`` links until the provider stops sending one."""

    def pages(
        self,
        transport: "HTTPTransport",
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Iterator[Any]:
        response = transport.get(url, params=params)
        yield decode_json(response)

        while True:
            link_header = response.headers.get("link")
            if not link_header:
                return
            next_link = parse_link_header(link_header).next
            if next_link is None:
                return
            # The next URI already carries the original query
            response = transport.get(next_link.uri)
            yield decode_json(response)


@dataclass(frozen=True)
class Pages:
    """GitLab pagination headers."""

    current: int | None
    total_items: int | None
    total_pages: int | None

    @classmethod
    def from_headers(cls, headers: "Mapping[str, str]") -> "Pages":
        return cls(
            current=_int_header(headers, "x-page"),
            total_items=_int_header(headers, "x-total"),
            total_pages=_int_header(headers, "x-total-pages"),
        )

    @property
    def is_known(self) -> bool:
        """True when the current page, item count and page count are all present."""
        return (
            self.current is not None
            and self.total_items is not None
            and self.total_pages is not None
        )


class PageCountPagination:
    """Discover the page count with ``HEAD``, then request every page number."""

    def pages(
        self,
        transport: "HTTPTransport",
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Iterator[Any]:
        head = transport.head(url, params=params)
        pages = Pages.from_headers(head.headers)
        if not pages.is_known:
            logger.debug(f"No usable pagination headers from {url}; treating listing as empty")
            return

        logger.debug(f"{url}: {pages.total_items} items over {pages.total_pages} pages")
        for page in range(pages.current, pages.total_pages + 1):
            page_params = dict(params or {})
            page_params["page"] = str(page)
            yield transport.get_json(url, params=page_params)


def _int_header(headers: "Mapping[str, str]", key: str) -> int | None:
    value = headers.get(key)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
