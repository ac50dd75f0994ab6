"""Foxdie provider clients."""

from foxdie.clients.base import ScmClient
from foxdie.clients.github import GitHubClient
from foxdie.clients.gitlab import GitLabClient

__all__ = [
    "ScmClient",
    "GitHubClient",
    "GitLabClient",
]
