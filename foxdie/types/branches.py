"""Branch-related data models."""

from dataclasses import dataclass

from foxdie.patterns import GlobPattern


def remove_remote_prefix(branch_name: str, remote_name: str) -> str:
    """
    Turn a tracking branch name into the branch name on the remote.

    Only one leading ``"{remote}/"`` is removed: ``origin/origin/feat``
    becomes ``origin/feat``.
    """
    return branch_name.removeprefix(f"{remote_name}/")


@dataclass(frozen=True)
class ProtectedBranch:
    """A provider rule exempting matching branch names from deletion."""

    pattern: GlobPattern

    @classmethod
    def from_name(cls, name: str) -> "ProtectedBranch":
        """
        Build a rule from the name string a provider reports.

        Raises:
            PatternError: If the name is not a valid glob
        """
        return cls(pattern=GlobPattern(name))

    def matches_branch(self, branch: str) -> bool:
        return self.pattern.matches(branch)


@dataclass(frozen=True)
class BranchCandidate:
    """A remote-tracking branch under consideration for deletion."""

    name: str  # e.g. "origin/feature-x"
    ref_name: str  # e.g. "refs/remotes/origin/feature-x"
    remote: str
    target_ref: str | None = None  # set when ref_name is a symbolic ref

    @property
    def short_name(self) -> str:
        """The branch name on the remote, without the ``{remote}/`` prefix."""
        return remove_remote_prefix(self.name, self.remote)

    @property
    def is_symbolic(self) -> bool:
        return self.target_ref is not None

    @property
    def resolved_ref(self) -> str:
        """The reference this branch ultimately points at."""
        return self.target_ref or self.ref_name


@dataclass(frozen=True)
class Commit:
    """The terminal commit of a branch."""

    sha: str
    author: str | None
    timestamp: int | None  # seconds since the epoch
    message: str | None
