"""
Provider detection.

Associates a repository URL (HTTPS, SSH or scp-style) with the SCM hosting it
and the API base URL to talk to, so the rest of the package can stay
provider-agnostic.

Resolution order:

1. ``github.com`` → GitHub, public API
2. ``gitlab.com`` → GitLab, public API
3. ``DetectorConfig.github_base_url`` → GitHub at that base
4. ``DetectorConfig.gitlab_base_url`` → GitLab at that base
5. Probe ``https://{host}/zen`` (GitHub) then ``https://{host}/api/v4/version``
   (GitLab) and keep the first that answers with a 2xx status.
"""

import os
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

import httpx

from foxdie.exceptions import ConfigurationError, UnknownProviderError
from foxdie.logging import get_logger

logger = get_logger("detect")

GITHUB_HOSTS = frozenset({"github.com", "www.github.com"})
GITLAB_HOSTS = frozenset({"gitlab.com", "www.gitlab.com"})
GITHUB_API_URL = "https://api.github.com"
GITLAB_API_URL = "https://gitlab.com"

GITHUB_ACCEPT = "application/vnd.github.v3+json"
USER_AGENT = "foxdie"
PROBE_TIMEOUT = 10.0


class ScmKind(Enum):
    """Supported source control providers."""

    GITHUB = "github"
    GITLAB = "gitlab"


@dataclass(frozen=True)
class ScmDescriptor:
    """Where a repository lives and how to address its API."""

    kind: ScmKind
    base_url: str
    owner: str
    repo: str

    @property
    def project_path(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class DetectorConfig:
    """
    Operator-supplied overrides for self-hosted installations.

    Attributes:
        github_base_url: API base of a GitHub Enterprise install
            (e.g. "https://ghe.example.com/api/v3")
        gitlab_base_url: Base URL of a self-managed GitLab install
            (e.g. "https://gitlab.example.com")
        legacy_gitlab_override_kind: Classify ``gitlab_base_url`` matches as
            GitHub, as releases before 1.0 did
    """

    github_base_url: str | None = None
    gitlab_base_url: str | None = None
    legacy_gitlab_override_kind: bool = False

    @classmethod
    def from_env(cls) -> "DetectorConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            GITHUB_BASE_URL: API base of a GitHub Enterprise install (optional)
            GITLAB_BASE_URL: Base URL of a self-managed GitLab install (optional)
            FOXDIE_LEGACY_GITLAB_OVERRIDE: "1"/"true" to classify
                GITLAB_BASE_URL matches as GitHub (optional)

        Raises:
            ConfigurationError: If a base URL is not an http(s) URL with a host
        """
        legacy = os.environ.get("FOXDIE_LEGACY_GITLAB_OVERRIDE", "").strip().lower()
        return cls(
            github_base_url=_base_url_from_env("GITHUB_BASE_URL"),
            gitlab_base_url=_base_url_from_env("GITLAB_BASE_URL"),
            legacy_gitlab_override_kind=legacy in {"1", "true", "yes"},
        )


def _base_url_from_env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    parts = urlsplit(value)
    if parts.scheme not in {"http", "https"} or not parts.hostname:
        raise ConfigurationError(f"{name} must be an http(s) URL, got {value!r}")
    return value.rstrip("/")


def detect(
    url: str,
    token: str,
    config: DetectorConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ScmDescriptor:
    """
    Determine which SCM a repository URL belongs to.

    Args:
        url: Repository URL, e.g. "https://github.com/acme/widgets" or
            "git@gitlab.example.com:acme/widgets.git"
        token: Personal access token, used only when probing
        config: Self-hosted overrides (default: no overrides)
        transport: httpx transport used for probing (tests inject a mock)

    Returns:
        The resolved ScmDescriptor

    Raises:
        UnknownProviderError: If the URL cannot be parsed or classified
    """
    config = config or DetectorConfig()
    normalized = normalize_url(url)

    parts = urlsplit(normalized)
    if not parts.scheme or not parts.netloc:
        raise UnknownProviderError(normalized)

    segments = [segment for segment in parts.path.split("/") if segment]
    if len(segments) < 2:
        raise UnknownProviderError(normalized)
    owner, repo = segments[0], segments[1].removesuffix(".git")
    if not repo:
        raise UnknownProviderError(normalized)

    try:
        hostname = parts.hostname
    except ValueError:
        hostname = None
    if not hostname:
        raise UnknownProviderError(normalized)

    kind, base_url = _resolve_provider(hostname, token, config, transport, normalized)
    logger.debug(f"{normalized} resolved to {kind.value} at {base_url}")
    return ScmDescriptor(kind=kind, base_url=base_url.rstrip("/"), owner=owner, repo=repo)


def normalize_url(url: str) -> str:
    """
    Rewrite scp-style SSH addresses into URI form.

    ``git@host:owner/repo`` becomes ``git://host/owner/repo``; anything else
    is returned unchanged.
    """
    if url.startswith("git@"):
        return url.replace(":", "/", 1).replace("git@", "git://", 1)
    return url


def _resolve_provider(
    hostname: str,
    token: str,
    config: DetectorConfig,
    transport: httpx.BaseTransport | None,
    url: str,
) -> tuple[ScmKind, str]:
    if hostname in GITHUB_HOSTS:
        return ScmKind.GITHUB, GITHUB_API_URL
    if hostname in GITLAB_HOSTS:
        return ScmKind.GITLAB, GITLAB_API_URL
    if config.github_base_url:
        return ScmKind.GITHUB, config.github_base_url
    if config.gitlab_base_url:
        if config.legacy_gitlab_override_kind:
            return ScmKind.GITHUB, config.gitlab_base_url
        return ScmKind.GITLAB, config.gitlab_base_url

    candidate = f"https://{hostname}"
    logger.debug(f"Probing {candidate} for a known SCM API")
    with httpx.Client(timeout=PROBE_TIMEOUT, transport=transport) as client:
        if probe_github(client, candidate, token):
            return ScmKind.GITHUB, candidate
        if probe_gitlab(client, candidate, token):
            return ScmKind.GITLAB, candidate
    raise UnknownProviderError(url)


def probe_github(client: httpx.Client, base_url: str, token: str) -> bool:
    """Check for GitHub's ``/zen`` endpoint, which only GitHub serves."""
    return _probe(
        client,
        f"{base_url}/zen",
        {
            "Accept": GITHUB_ACCEPT,
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
        },
    )


def probe_gitlab(client: httpx.Client, base_url: str, token: str) -> bool:
    """Check for GitLab's ``/api/v4/version`` endpoint."""
    return _probe(client, f"{base_url}/api/v4/version", {"PRIVATE-TOKEN": token})


def _probe(client: httpx.Client, url: str, headers: dict[str, str]) -> bool:
    try:
        response = client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.debug(f"Probe {url} failed: {e}")
        return False
    logger.debug(f"Probe {url} answered {response.status_code}")
    return response.is_success
