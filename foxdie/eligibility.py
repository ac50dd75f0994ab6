"""
Eligibility rules for deleting branches and closing push requests.

Every function here is pure: the actions fetch remote state first and pass it
in. Missing data never makes a branch eligible.

A remote-tracking branch may be deleted when all of the following hold:

1. it is not the upstream of the branch currently checked out, by name or by
   commit, and not a symbolic alias such as `origin/HEAD`;
2. its last commit is not newer than the cutoff (unknown times count as newer);
3. no open push request uses it as its source branch;
4. its name matches no protected branch pattern.

A push request may be closed when it was filed from the same project it
targets and was last updated strictly before the cutoff.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from foxdie.types.branches import BranchCandidate, ProtectedBranch, remove_remote_prefix
from foxdie.types.push_requests import PushRequest


def has_updated_since(timestamp: int | None, cutoff: datetime) -> bool:
    """
    Check whether a commit time is strictly after the cutoff.

    Args:
        timestamp: Commit time in seconds since the epoch, or None if unknown
        cutoff: Timezone-aware cutoff date

    Returns:
        True if the commit is newer than the cutoff, or its time is unknown
    """
    if timestamp is None:
        return True
    return timestamp > cutoff.timestamp()


def is_protected(branch_name: str, protected_branches: Iterable[ProtectedBranch]) -> bool:
    return any(rule.matches_branch(branch_name) for rule in protected_branches)


def has_open_push_request(branch_name: str, open_push_requests: Iterable[PushRequest]) -> bool:
    return any(pr.source_branch == branch_name for pr in open_push_requests)


def is_current(
    candidate: BranchCandidate,
    current_ref: str | None,
    commit_sha: str | None = None,
    current_sha: str | None = None,
) -> bool:
    """
    Check whether a branch is the checked-out branch's upstream.

    Two refs are the same when their names match or when both point at the
    same commit, so a branch cut from the upstream and never moved is kept.
    """
    if current_ref is not None and current_ref in (candidate.ref_name, candidate.resolved_ref):
        return True
    return commit_sha is not None and commit_sha == current_sha


def is_branch_eligible(
    candidate: BranchCandidate,
    *,
    current_ref: str | None,
    last_commit_time: int | None,
    cutoff: datetime,
    open_push_requests: Sequence[PushRequest],
    protected_branches: Sequence[ProtectedBranch],
    commit_sha: str | None = None,
    current_sha: str | None = None,
) -> bool:
    """
    Decide whether a remote-tracking branch may be deleted.

    Args:
        candidate: The remote-tracking branch
        current_ref: Full ref name of the checked-out branch's upstream
            (e.g. "refs/remotes/origin/main")
        last_commit_time: Epoch seconds of the branch's last commit, or None
        cutoff: Branches updated after this date are kept
        open_push_requests: Open push requests of the remote's project
        protected_branches: Protected branch rules of the remote's project
        commit_sha: Commit the branch points at, if known
        current_sha: Commit the checked-out branch's upstream points at

    Returns:
        True if the branch is safe to delete
    """
    short_name = candidate.short_name
    return (
        not candidate.is_symbolic
        and not is_current(candidate, current_ref, commit_sha, current_sha)
        and not has_updated_since(last_commit_time, cutoff)
        and not has_open_push_request(short_name, open_push_requests)
        and not is_protected(short_name, protected_branches)
    )


def select_branches_to_delete(
    candidates: Iterable[BranchCandidate],
    *,
    current_ref: str | None,
    commit_times: Mapping[str, int | None],
    cutoff: datetime,
    open_push_requests: Sequence[PushRequest],
    protected_branches: Sequence[ProtectedBranch],
    commit_shas: Mapping[str, str] | None = None,
    current_sha: str | None = None,
) -> list[BranchCandidate]:
    """
    Filter candidates down to the branches that may be deleted.

    Args:
        candidates: Remote-tracking branches, in listing order
        current_ref: Full ref name of the checked-out branch's upstream
        commit_times: Last commit time per candidate ``ref_name``; candidates
            absent from the mapping are never selected
        cutoff: Branches updated after this date are kept
        open_push_requests: Open push requests of the remote's project
        protected_branches: Protected branch rules of the remote's project
        commit_shas: Commit per candidate ``ref_name``, for comparing against
            ``current_sha``
        current_sha: Commit the checked-out branch's upstream points at

    Returns:
        Eligible branches, in listing order
    """
    return [
        candidate
        for candidate in candidates
        if is_branch_eligible(
            candidate,
            current_ref=current_ref,
            last_commit_time=commit_times.get(candidate.ref_name),
            cutoff=cutoff,
            open_push_requests=open_push_requests,
            protected_branches=protected_branches,
            commit_sha=(commit_shas or {}).get(candidate.ref_name),
            current_sha=current_sha,
        )
    ]


def deletion_refspecs(branches: Iterable[BranchCandidate]) -> list[str]:
    """Build the ``+:refs/heads/{branch}`` refspecs that delete branches on push."""
    return [f"+:refs/heads/{branch.short_name}" for branch in branches]


def is_push_request_eligible(push_request: PushRequest, cutoff: datetime) -> bool:
    """
    Decide whether a push request may be closed.

    Args:
        push_request: The push request
        cutoff: Requests updated on or after this date are kept

    Returns:
        True if the request is not from a fork and is stale
    """
    return push_request.is_same_project and push_request.updated_at < cutoff


def select_push_requests_to_close(
    push_requests: Iterable[PushRequest], cutoff: datetime
) -> list[PushRequest]:
    return [pr for pr in push_requests if is_push_request_eligible(pr, cutoff)]


def summarize_branches(
    eligible: Sequence[BranchCandidate],
    total: int,
    remote_name: str,
    authors: Mapping[str, str | None] | None = None,
) -> str:
    """
    Describe the branches selected for deletion.

    Args:
        eligible: Selected branches
        total: Number of branches considered
        remote_name: Remote the branches belong to
        authors: Optional last-commit author per ``ref_name``

    Returns:
        A human readable summary with one bullet per branch
    """
    header = f"Found {len(eligible)} eligible branches out of {total} total on {remote_name}"
    if not eligible:
        return f"{header}."
    authors = authors or {}
    lines = []
    for branch in eligible:
        author = authors.get(branch.ref_name)
        lines.append(f"• {branch.name} ({author})" if author else f"• {branch.name}")
    return f"{header}:\n" + "\n".join(lines)


def summarize_push_requests(eligible: Sequence[PushRequest], total: int) -> str:
    """Describe the push requests selected for closing."""
    header = f"Found {len(eligible)} eligible push requests out of {total} total"
    if not eligible:
        return f"{header}."
    lines = [f"• #{pr.id}: {pr.title} ({pr.url})" for pr in eligible]
    return f"{header}:\n" + "\n".join(lines)


__all__ = [
    "deletion_refspecs",
    "has_open_push_request",
    "has_updated_since",
    "is_branch_eligible",
    "is_current",
    "is_protected",
    "is_push_request_eligible",
    "remove_remote_prefix",
    "select_branches_to_delete",
    "select_push_requests_to_close",
    "summarize_branches",
    "summarize_push_requests",
]
