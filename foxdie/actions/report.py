"""
Branch reports.

Describes every remote-tracking branch of every remote: last commit, author,
age, divergence from the checked-out branch and whether an open push request
uses it. Nothing is modified on the remotes.
"""

import json
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from pathlib import Path

import httpx

from foxdie.actions.base import ProviderLike, default_provider_factory
from foxdie.detect import DetectorConfig
from foxdie.exceptions import GitError, UnknownProviderError
from foxdie.git import GitRepository
from foxdie.logging import get_logger, mask_sensitive_data
from foxdie.types.branches import BranchCandidate
from foxdie.types.push_requests import PushRequestState
from foxdie.types.report import Report, ReportItem

logger = get_logger("actions.report")


def report(
    repo_path: str | Path,
    output_path: str | Path | None = None,
    token: str | None = None,
    config: DetectorConfig | None = None,
    transport: httpx.BaseTransport | None = None,
    provider_factory: Callable[[str], ProviderLike] | None = None,
) -> list[Report]:
    """
    Build a report for each remote of a repository.

    Args:
        repo_path: Directory inside the repository's work tree
        output_path: Where to write the reports as JSON (optional)
        token: Personal access token; without one no push requests are looked up
        config: Provider overrides for self-hosted installations
        transport: Optional httpx transport for provider requests
        provider_factory: Builds a provider for a remote URL

    Returns:
        One report per remote, in remote order

    Raises:
        GitError: If the repository cannot be read or fetched
        ProviderError: If listing push requests fails
    """
    repo = GitRepository.open(repo_path)
    current_branch = repo.current_branch()

    if provider_factory is None and token is not None:
        provider_factory = default_provider_factory(token, config, transport)

    reports = []
    for remote in repo.remotes():
        repo.fetch(remote)
        source_branches = _open_source_branches(repo.remote_url(remote), provider_factory)
        reports.append(report_for_remote(repo, remote, current_branch, source_branches))

    for remote_report in reports:
        print_report(remote_report)
    if output_path is not None:
        write_report(reports, output_path)
    return reports


def report_for_remote(
    repo: GitRepository,
    remote: str,
    current_branch: str,
    source_branches: set[str],
) -> Report:
    branches = repo.remote_branches(remote)
    logger.info(f"Generating report for {len(branches)} branches...")
    items = []
    for branch in branches:
        item = report_for_branch(repo, branch, current_branch, source_branches)
        if item is not None:
            items.append(item)
    return Report(remote_name=remote, remote_url=repo.remote_url(remote), items=items)


def report_for_branch(
    repo: GitRepository,
    branch: BranchCandidate,
    current_branch: str,
    source_branches: set[str],
) -> ReportItem | None:
    """
    Describe one branch, or return None when any of its details are unreadable.
    """
    try:
        commit = repo.commit_for(branch.ref_name)
        ahead, behind = repo.divergence(current_branch, branch.ref_name)
    except GitError as e:
        logger.debug(f"Skipping {branch.name} in report: {e.message}")
        return None

    if commit.author is None or commit.timestamp is None or commit.message is None:
        logger.debug(f"Skipping {branch.name} in report: incomplete commit {commit.sha}")
        return None

    return ReportItem(
        branch=branch.name,
        commit=commit.sha,
        author=commit.author,
        last_updated=datetime.fromtimestamp(commit.timestamp, tz=timezone.utc),
        ahead=ahead,
        behind=behind,
        has_push_request=branch.short_name in source_branches,
        message=commit.message,
    )


def print_report(remote_report: Report) -> None:
    logger.info(
        f"Report for {remote_report.remote_name} "
        f"({mask_sensitive_data(remote_report.remote_url)})\n"
        "================================="
    )
    for item in remote_report.items:
        logger.info(f"{item.author} - {item.branch}")


def write_report(reports: Sequence[Report], path: str | Path) -> None:
    """
    Write reports to a file as a JSON array.

    Raises:
        OSError: If the file cannot be written
    """
    payload = [remote_report.to_dict() for remote_report in reports]
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _open_source_branches(
    url: str, provider_factory: Callable[[str], ProviderLike] | None
) -> set[str]:
    if provider_factory is None:
        return set()
    try:
        provider = provider_factory(url)
    except UnknownProviderError as e:
        logger.warning(mask_sensitive_data(e.message))
        return set()
    with provider:
        push_requests = provider.list_push_requests(PushRequestState.OPENED)
    return {pr.source_branch for pr in push_requests}
