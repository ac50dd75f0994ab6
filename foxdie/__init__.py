"""Foxdie - clean up stale branches and push requests on GitHub and GitLab."""

from foxdie.client import ScmProvider
from foxdie.detect import DetectorConfig, ScmDescriptor, ScmKind, detect
from foxdie.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    FoxdieError,
    GitError,
    NotFoundError,
    PatternError,
    ProviderError,
    RateLimitedError,
    ServerError,
    TransportError,
    UnknownProviderError,
    ValidationError,
)
from foxdie.git import GitRepository
from foxdie.logging import configure_logging, get_logger
from foxdie.patterns import GlobPattern
from foxdie.transport import HTTPTransport
from foxdie.types import (
    BranchCandidate,
    Commit,
    ProtectedBranch,
    PushRequest,
    PushRequestState,
    Report,
    ReportItem,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Provider access
    "ScmProvider",
    "HTTPTransport",
    # Detection
    "detect",
    "DetectorConfig",
    "ScmDescriptor",
    "ScmKind",
    # Git
    "GitRepository",
    # Types
    "BranchCandidate",
    "Commit",
    "GlobPattern",
    "ProtectedBranch",
    "PushRequest",
    "PushRequestState",
    "Report",
    "ReportItem",
    # Exceptions
    "FoxdieError",
    "ConfigurationError",
    "UnknownProviderError",
    "PatternError",
    "GitError",
    "ProviderError",
    "TransportError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    # Logging
    "configure_logging",
    "get_logger",
]
