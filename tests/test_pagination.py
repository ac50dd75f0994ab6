"""
Tests for Link header and page count pagination.

Feature: foxdie
"""

import httpx
from hypothesis import given, settings
from hypothesis import strategies as st

from foxdie.pagination import (
    LinkHeaderPagination,
    PageCountPagination,
    Pages,
    parse_link_header,
)
from foxdie.transport import HTTPTransport

GITHUB_LINK = (
    '<https://api.github.com/repositories/1/pulls?state=open&page=3>; rel="next", '
    '<https://api.github.com/repositories/1/pulls?state=open&page=5>; rel="last", '
    '<https://api.github.com/repositories/1/pulls?state=open&page=1>; rel="first", '
    '<https://api.github.com/repositories/1/pulls?state=open&page=1>; rel="prev"'
)


def make_transport(handler) -> HTTPTransport:
    return HTTPTransport(headers={}, transport=httpx.MockTransport(handler))


def test_parse_link_header_relations() -> None:
    links = parse_link_header(GITHUB_LINK)

    assert links.next.uri.endswith("page=3")
    assert links.find("last").uri.endswith("page=5")
    assert links.find("prev").uri.endswith("page=1")
    assert links.find("self") is None


def test_parse_link_header_without_next() -> None:
    links = parse_link_header('<https://example.com/x?page=1>; rel="first"')

    assert links.next is None
    assert links.find("first") is not None


def test_parse_link_header_edge_cases() -> None:
    assert parse_link_header("").links == ()
    assert parse_link_header("<https://example.com/a>; title=\"x\"").links == ()

    links = parse_link_header("<https://example.com/a>; rel=\"next last\"")
    assert links.next.uri == "https://example.com/a"
    assert links.find("last").uri == "https://example.com/a"

    unquoted = parse_link_header("<https://example.com/b>;rel=next")
    assert unquoted.next.uri == "https://example.com/b"


@given(pages=st.integers(min_value=1, max_value=6))
@settings(max_examples=20)
def test_link_pagination_follows_next_until_absent(pages: int) -> None:
    """
    Following rel="next" yields every page exactly once and in order,
    whatever the number of pages.
    """
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("page", "1"))
        requested.append(str(page))
        headers = {}
        if page < pages:
            headers["Link"] = f'<https://api.example.com/items?state=open&page={page + 1}>; rel="next"'
        return httpx.Response(200, json=[page], headers=headers)

    with make_transport(handler) as transport:
        result = list(
            LinkHeaderPagination().pages(transport, "https://api.example.com/items", {"state": "open"})
        )

    assert result == [[n] for n in range(1, pages + 1)]
    assert requested == [str(n) for n in range(1, pages + 1)]


def test_page_count_pagination_requests_every_page() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "HEAD":
            return httpx.Response(
                200, headers={"x-page": "1", "x-total": "5", "x-total-pages": "3"}
            )
        return httpx.Response(200, json=[request.url.params["page"]])

    with make_transport(handler) as transport:
        result = list(
            PageCountPagination().pages(transport, "https://gitlab.example.com/items", {"state": "opened"})
        )

    assert result == [["1"], ["2"], ["3"]]
    assert [r.method for r in requests] == ["HEAD", "GET", "GET", "GET"]
    assert all(r.url.params["state"] == "opened" for r in requests)


def test_page_count_pagination_starts_at_reported_page() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "HEAD":
            return httpx.Response(
                200, headers={"x-page": "2", "x-total": "40", "x-total-pages": "3"}
            )
        return httpx.Response(200, json=[request.url.params["page"]])

    with make_transport(handler) as transport:
        result = list(PageCountPagination().pages(transport, "https://gitlab.example.com/items"))

    assert result == [["2"], ["3"]]


def test_page_count_pagination_without_headers_is_empty() -> None:
    methods: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(200, headers={"x-page": "1", "x-total": "3"})

    with make_transport(handler) as transport:
        result = list(PageCountPagination().pages(transport, "https://gitlab.example.com/items"))

    assert result == []
    assert methods == ["HEAD"]


def test_pages_from_headers() -> None:
    pages = Pages.from_headers(
        httpx.Headers(
            {
                "X-Page": "2",
                "X-Total": "50",
                "X-Total-Pages": "3",
                "X-Per-Page": "20",
                "X-Prev-Page": "1",
                "X-Next-Page": "",
            }
        )
    )

    assert pages == Pages(current=2, total_items=50, total_pages=3)
    assert pages.is_known


def test_pages_with_non_integer_header_is_unknown() -> None:
    pages = Pages.from_headers({"x-page": "1", "x-total": "many", "x-total-pages": "2"})

    assert not pages.is_known
