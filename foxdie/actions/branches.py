"""
Stale remote branch cleanup.

For every remote of a local repository: detect its provider, fetch, decide
which remote-tracking branches are stale and unprotected, log them, and with
``should_delete`` remove them from the remote in a single push.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import httpx

from foxdie.actions.base import ProviderLike, default_provider_factory
from foxdie.detect import DetectorConfig
from foxdie.eligibility import deletion_refspecs, select_branches_to_delete, summarize_branches
from foxdie.exceptions import GitError, UnknownProviderError
from foxdie.git import GitRepository
from foxdie.logging import get_logger, mask_sensitive_data
from foxdie.types.push_requests import PushRequestState

logger = get_logger("actions.branches")


@dataclass
class BranchCleanupOptions:
    """
    Options for :func:`clean_remote_branches`.

    Attributes:
        should_delete: Push the deletions; otherwise only report them
        since: Branches with commits after this date are kept
        token: Personal access token for the providers
        config: Provider overrides for self-hosted installations
        transport: Optional httpx transport for provider requests
        provider_factory: Builds a provider for a remote URL (default: detect
            the provider and bind an ScmProvider)
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


def clean_remote_branches(path: str | Path, options: BranchCleanupOptions) -> None:
    """
    Clean stale branches on every remote of a repository.

    A remote whose provider cannot be detected is skipped with a warning.

    Args:
        path: Directory inside the repository's work tree
        options: Cleanup options

    Raises:
        GitError: If the repository cannot be read, fetched or pushed to
        ProviderError: If a provider request fails
    """
    repo = GitRepository.open(path)
    for remote in repo.remotes():
        clean_branches_on_remote(repo, remote, options)


def clean_branches_on_remote(
    repo: GitRepository, remote: str, options: BranchCleanupOptions
) -> list[str]:
    """
    Clean stale branches on one remote.

    Returns:
        Names of the branches found eligible (deleted only with should_delete)
    """
    url = repo.remote_url(remote)
    try:
        provider = options.open_provider(url)
    except UnknownProviderError as e:
        logger.warning(mask_sensitive_data(e.message))
        return []

    with provider:
        repo.fetch(remote)
        current_ref = repo.upstream_of(repo.current_branch())
        current_sha = repo.commit_for(current_ref).sha

        open_push_requests = provider.list_push_requests(PushRequestState.OPENED)
        protected_branches = provider.list_protected_branches()

    candidates = repo.remote_branches(remote)
    commit_times = {}
    commit_shas = {}
    authors = {}
    for candidate in candidates:
        try:
            commit = repo.commit_for(candidate.ref_name)
        except GitError as e:
            # Unknown commit time keeps the branch
            logger.debug(f"Could not read commit for {candidate.name}: {e.message}")
            commit_times[candidate.ref_name] = None
            continue
        commit_times[candidate.ref_name] = commit.timestamp
        commit_shas[candidate.ref_name] = commit.sha
        authors[candidate.ref_name] = commit.author

    eligible = select_branches_to_delete(
        candidates,
        current_ref=current_ref,
        commit_times=commit_times,
        cutoff=options.since,
        open_push_requests=open_push_requests,
        protected_branches=protected_branches,
        commit_shas=commit_shas,
        current_sha=current_sha,
    )
    logger.info(summarize_branches(eligible, len(candidates), remote, authors))

    if options.should_delete and eligible:
        logger.info(f"Preparing to delete {len(eligible)} branches...")
        repo.push(remote, deletion_refspecs(eligible))
        logger.info("Finished deleting branches.")

    return [branch.name for branch in eligible]
