"""
Pytest fixtures for Foxdie testing.

Provides canned push requests and branches, a MockScmProvider fixture, and a
git sandbox (a work tree plus a bare "origin") for exercising the actions
against real repositories.
"""

import os
import shutil
import subprocess
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from foxdie.testing.mock import MockScmProvider
from foxdie.types.branches import BranchCandidate
from foxdie.types.push_requests import PushRequest

# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_push_request(
    id: int = 1,
    source_branch: str = "feature",
    **kwargs: Any,
) -> PushRequest:
    """
    Create a PushRequest with customizable fields.

    Args:
        id: Push request number
        source_branch: Branch the request was filed from
        **kwargs: Additional fields to override

    Returns:
        A same-project PushRequest last updated on 2020-01-01 unless overridden
    """
    defaults: dict[str, Any] = {
        "title": f"Push request {id}",
        "url": f"https://github.com/acme/widgets/pull/{id}",
        "created_at": datetime(2020, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2020, 1, 1, tzinfo=timezone.utc),
        "source_project": 1,
        "target_project": 1,
        "target_branch": "main",
    }
    defaults.update(kwargs)
    return PushRequest(id=id, source_branch=source_branch, **defaults)


def create_mock_branch(name: str, remote: str = "origin", **kwargs: Any) -> BranchCandidate:
    """Create a BranchCandidate for ``{remote}/{name}``."""
    return BranchCandidate(
        name=f"{remote}/{name}",
        ref_name=f"refs/remotes/{remote}/{name}",
        remote=remote,
        **kwargs,
    )


class GitSandbox:
    """
    A work tree with a bare repository configured as its ``origin``.

    Commit dates are set explicitly so staleness can be tested.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.remote_path = root / "origin.git"
        self.work_path = root / "work"
        self.work_path.mkdir(parents=True)

        self._git(root, "init", "-q", "--bare", str(self.remote_path))
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")
        self.git("config", "user.name", "Test Author")
        self.git("config", "user.email", "author@example.com")
        self.git("config", "commit.gpgsign", "false")
        self.git("remote", "add", "origin", str(self.remote_path))

    def git(self, *args: str, env: dict[str, str] | None = None) -> str:
        return self._git(self.work_path, *args, env=env)

    def commit(self, message: str, when: datetime) -> str:
        """Create an empty commit on the checked-out branch dated ``when``."""
        stamp = f"{int(when.timestamp())} +0000"
        self.git(
            "commit",
            "-q",
            "--allow-empty",
            "-m",
            message,
            env={"GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp},
        )
        return self.git("rev-parse", "HEAD").strip()

    def create_branch(self, name: str, when: datetime, base: str = "main") -> None:
        """Create a branch off ``base`` with one commit dated ``when``."""
        self.git("checkout", "-q", "-b", name, base)
        self.commit(f"Work on {name}", when)
        self.git("checkout", "-q", base)

    def push(self, *branches: str) -> None:
        """Push branches to origin, tracking each one."""
        self.git("push", "-q", "-u", "origin", *branches)

    def remote_heads(self) -> set[str]:
        output = self._git(
            self.remote_path, "for-each-ref", "--format=%(refname:short)", "refs/heads/"
        )
        return {line for line in output.splitlines() if line}

    @staticmethod
    def _git(cwd: Path, *args: str, env: dict[str, str] | None = None) -> str:
        full_env = os.environ.copy()
        if env:
            full_env.update(env)
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
            env=full_env,
        )
        return result.stdout


# ============================================================================
# Provider Fixtures
# ============================================================================


@pytest.fixture
def mock_provider() -> Generator[MockScmProvider, None, None]:
    """
    Provide a MockScmProvider for testing.

    Example:
        ```python
        def test_dry_run(mock_provider):
            mock_provider.configure_push_requests([create_mock_push_request()])
            ...
            assert not mock_provider.was_called("close_push_request")
        ```
    """
    provider = MockScmProvider()
    yield provider
    provider.reset()


@pytest.fixture
def cutoff() -> datetime:
    """Provide the staleness cutoff used across tests: 2021-01-01T00:00:00Z."""
    return datetime(2021, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Git Fixtures
# ============================================================================


@pytest.fixture
def git_sandbox(tmp_path: Path) -> GitSandbox:
    """Provide a GitSandbox; skips the test when git is not installed."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return GitSandbox(tmp_path)
