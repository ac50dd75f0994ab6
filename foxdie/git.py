"""
Git repository access for Foxdie.

Wraps the ``git`` command line: listing remotes and remote-tracking branches,
fetching, reading commits and divergence, and pushing deletion refspecs.
Credentials are whatever the user's git configuration provides (SSH agent,
credential helpers); Foxdie never handles them itself.
"""

import os
import subprocess
from pathlib import Path

from foxdie.exceptions import GitError
from foxdie.logging import get_logger, log_git_command, mask_sensitive_data
from foxdie.types.branches import BranchCandidate, Commit

logger = get_logger("git")

REMOTES_PREFIX = "refs/remotes/"


class GitRepository:
    """
    A local git work tree.

    Example:
        ```python
        from foxdie.git import GitRepository

        repo = GitRepository.open(".")
        for remote in repo.remotes():
            repo.fetch(remote)
            for branch in repo.remote_branches(remote):
                print(branch.name, repo.commit_for(branch.ref_name).author)
        ```
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def open(cls, path: str | Path) -> "GitRepository":
        """
        Open the repository at a path.

        Args:
            path: Any directory inside the work tree

        Returns:
            The repository rooted at the work tree's top level

        Raises:
            GitError: If the path is not inside a git work tree
        """
        probe = cls(path)
        top_level = probe._run_text(["rev-parse", "--show-toplevel"]).strip()
        return cls(top_level)

    def remotes(self) -> list[str]:
        """List configured remote names."""
        return [line for line in self._run_text(["remote"]).splitlines() if line]

    def remote_url(self, name: str) -> str:
        return self._run_text(["remote", "get-url", name]).strip()

    def fetch(self, remote: str) -> None:
        """
        Fetch refs from a remote, pruning tracking branches deleted upstream.

        Raises:
            GitError: If the fetch fails
        """
        logger.info(
            f"Fetching remote refs from {remote} "
            f"({mask_sensitive_data(self.remote_url(remote))})"
        )
        self._run(["fetch", "--prune", remote])

    def current_branch(self) -> str:
        """
        Get the full ref name of the checked-out branch.

        Raises:
            GitError: If HEAD is detached
        """
        result = self._run(["symbolic-ref", "-q", "HEAD"], check=False)
        if result.returncode != 0:
            raise GitError("HEAD must be a branch")
        return result.stdout.decode("utf-8").strip()

    def upstream_of(self, ref: str) -> str:
        """
        Get the full ref name of a branch's upstream.

        Args:
            ref: Full ref name of a local branch (e.g. "refs/heads/main")

        Returns:
            The upstream ref (e.g. "refs/remotes/origin/main")

        Raises:
            GitError: If the branch has no upstream
        """
        upstream = self._run_text(["for-each-ref", "--format=%(upstream)", ref]).strip()
        if not upstream:
            raise GitError(f"{ref} has no upstream branch")
        return upstream

    def remote_branches(self, remote: str) -> list[BranchCandidate]:
        """
        List the remote-tracking branches of one remote.

        Symbolic refs (such as ``origin/HEAD``) carry their target in
        ``target_ref``. Ref names that are not valid UTF-8 are skipped.

        Args:
            remote: Remote name

        Returns:
            Branches in ref name order
        """
        output = self._run(
            [
                "for-each-ref",
                "--format=%(refname)%00%(symref)",
                f"{REMOTES_PREFIX}{remote}/",
            ]
        ).stdout

        branches = []
        for line in output.splitlines():
            if not line:
                continue
            raw_ref, _, raw_target = line.partition(b"\0")
            try:
                ref_name = raw_ref.decode("utf-8")
                target_ref = raw_target.decode("utf-8") or None
            except UnicodeDecodeError:
                logger.debug(f"Skipping undecodable ref {raw_ref!r}")
                continue
            branches.append(
                BranchCandidate(
                    name=ref_name.removeprefix(REMOTES_PREFIX),
                    ref_name=ref_name,
                    remote=remote,
                    target_ref=target_ref,
                )
            )
        return branches

    def commit_for(self, ref: str) -> Commit:
        """
        Read the terminal commit of a ref.

        Raises:
            GitError: If the ref does not resolve to a commit
        """
        output = self._run(
            ["log", "-1", "--format=%H%x00%an%x00%ct%x00%B", ref, "--"]
        ).stdout.decode("utf-8", errors="replace")
        sha, author, timestamp, message = (output.split("\0", 3) + ["", "", ""])[:4]
        return Commit(
            sha=sha.strip(),
            author=author or None,
            timestamp=int(timestamp) if timestamp.strip().isdigit() else None,
            message=message.rstrip("\n") or None,
        )

    def divergence(self, left: str, right: str) -> tuple[int, int]:
        """
        Count commits unique to each side of two refs.

        Args:
            left: First ref
            right: Second ref

        Returns:
            (commits only on left, commits only on right)

        Raises:
            GitError: If either ref is invalid or the output is unexpected
        """
        output = self._run_text(
            ["rev-list", "--left-right", "--count", f"{left}...{right}"]
        ).split()
        if len(output) != 2:
            raise GitError(f"Unexpected rev-list output for {left}...{right}")
        return int(output[0]), int(output[1])

    def push(self, remote: str, refspecs: list[str]) -> None:
        """
        Push refspecs to a remote in a single push.

        Raises:
            GitError: If the push fails
        """
        if not refspecs:
            return
        self._run(["push", remote, *refspecs])

    def _run_text(self, args: list[str]) -> str:
        return self._run(args).stdout.decode("utf-8", errors="replace")

    def _run(
        self, args: list[str], check: bool = True
    ) -> subprocess.CompletedProcess[bytes]:
        cmd = ["git", *args]
        log_git_command(cmd)

        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"

        try:
            result = subprocess.run(
                cmd,
                cwd=self.path,
                capture_output=True,
                env=env,
            )
        except OSError as e:
            raise GitError(f"Could not run git in {self.path}", str(e)) from e

        log_git_command(cmd, result.returncode)
        if check and result.returncode != 0:
            raise GitError(
                f"git {args[0]} failed",
                mask_sensitive_data(result.stderr.decode("utf-8", errors="replace")),
            )
        return result
