"""
HTTP Transport for Foxdie provider clients.

Wraps a single ``httpx.Client`` per provider, carrying that provider's
authentication headers, and turns transport failures and error statuses into
typed exceptions.
"""

import time
from typing import Any

import httpx

from foxdie.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ProviderError,
    RateLimitedError,
    ServerError,
    TransportError,
    ValidationError,
)
from foxdie.logging import log_http_request, log_http_response

# Response headers worth seeing in debug output while following pagination
_PAGINATION_HEADERS = ("link", "x-page", "x-total", "x-total-pages", "x-next-page")


class HTTPTransport:
    """
    HTTP transport layer shared by the GitHub and GitLab clients.

    Handles:
    - Default headers (authentication, accept, user agent)
    - Debug logging of requests and responses with credentials masked
    - Error response parsing into typed exceptions
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        headers: dict[str, str],
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            headers: Headers sent with every request (auth included)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.timeout = timeout
        self._headers = dict(headers)
        self._client = httpx.Client(
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make a request and return the successful response.

        Args:
            method: HTTP method
            url: Absolute URL
            params: Query parameters
            body: JSON request body

        Returns:
            The response, with a status below 400

        Raises:
            TransportError: If no response was received
            ProviderError: If the provider answered with an error status
        """
        log_http_request(method, url, headers=self._headers, params=params)
        started = time.monotonic()
        try:
            response = self._client.request(method, url, params=params, json=body)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        elapsed_ms = (time.monotonic() - started) * 1000
        log_http_response(
            response.status_code,
            str(response.url),
            elapsed_ms=elapsed_ms,
            headers={
                key: value
                for key, value in response.headers.items()
                if key.lower() in _PAGINATION_HEADERS
            },
        )

        if response.status_code >= 400:
            raise self._parse_error_response(response)
        return response

    def get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        return self.request("GET", url, params=params)

    def head(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        return self.request("HEAD", url, params=params)

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET a URL and decode its JSON body."""
        return decode_json(self.get(url, params=params))

    def _parse_error_response(self, response: httpx.Response) -> ProviderError:
        """
        Parse an error response into a typed exception.

        GitHub reports ``{"message": ...}`` and GitLab ``{"message": ...}`` or
        ``{"error": ...}``; anything else falls back to the status line.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate ProviderError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        message = data.get("message") or data.get("error") or f"HTTP {response.status_code}"
        message = f"{response.request.method} {response.url}: {message}"
        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, status_code)
        elif status_code == 403:
            if response.headers.get("x-ratelimit-remaining") == "0":
                return RateLimitedError(
                    "RATE_LIMITED", message, _retry_after(response), status_code
                )
            return AuthorizationError("FORBIDDEN", message, status_code)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, status_code)
        elif status_code == 429:
            return RateLimitedError("RATE_LIMITED", message, _retry_after(response), status_code)
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, status_code)
        else:
            return ValidationError("CLIENT_ERROR", message, status_code)


def decode_json(response: httpx.Response) -> Any:
    """
    Decode a response body as JSON.

    Raises:
        ProviderError: If the body is not JSON
    """
    try:
        return response.json()
    except ValueError as e:
        raise ProviderError(
            "INVALID_RESPONSE", f"{response.url} did not return JSON: {e}", response.status_code
        ) from e


def _retry_after(response: httpx.Response) -> int:
    retry_after_str = response.headers.get("Retry-After", "60")
    try:
        return int(retry_after_str)
    except ValueError:
        return 60
