"""Foxdie exception classes."""


class FoxdieError(Exception):
    """Base exception for all Foxdie errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(FoxdieError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class UnknownProviderError(FoxdieError):
    """Raised when a repository URL cannot be associated with GitHub or GitLab."""

    def __init__(self, url: str) -> None:
        super().__init__("UNKNOWN_PROVIDER", f"Unknown provider for url {url}")
        self.url = url


class PatternError(FoxdieError, ValueError):
    """Raised when a protected-branch name is not a valid glob pattern."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__("INVALID_PATTERN", f"{pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class GitError(FoxdieError):
    """Raised when a git operation fails."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        detail = f"{message}: {stderr.strip()}" if stderr else message
        super().__init__("GIT_ERROR", detail)
        self.stderr = stderr


class ProviderError(FoxdieError):
    """Raised when a request to a provider API fails."""

    def __init__(
        self, code: str, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(code, message)
        self.status_code = status_code


class TransportError(ProviderError):
    """Raised when a request never produced a response (DNS, TLS, timeouts)."""

    def __init__(self, message: str) -> None:
        super().__init__("TRANSPORT_ERROR", message)


class AuthenticationError(ProviderError):
    """Raised when the token is rejected."""

    pass


class AuthorizationError(ProviderError):
    """Raised when access is denied."""

    pass


class NotFoundError(ProviderError):
    """Raised when a resource is not found."""

    pass


class RateLimitedError(ProviderError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        status_code: int | None = 429,
    ) -> None:
        super().__init__(code, message, status_code)
        self.retry_after = retry_after


class ValidationError(ProviderError):
    """Raised on other client errors (4xx)."""

    pass


class ServerError(ProviderError):
    """Raised on server errors (5xx)."""

    pass
