"""Push request (pull request / merge request) data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class PushRequestState(Enum):
    """Listing filter shared by both providers."""

    OPENED = "opened"
    CLOSED = "closed"

    @property
    def github_value(self) -> str:
        return "open" if self is PushRequestState.OPENED else "closed"

    @property
    def gitlab_value(self) -> str:
        return "opened" if self is PushRequestState.OPENED else "closed"


@dataclass(frozen=True)
class PushRequest:
    """A GitHub pull request or GitLab merge request."""

    id: int  # user-facing number: GitHub "number", GitLab "iid"
    title: str
    url: str
    created_at: datetime
    updated_at: datetime
    source_project: int
    source_branch: str
    target_project: int
    target_branch: str

    @property
    def is_same_project(self) -> bool:
        """True when the request was not filed from a fork."""
        return self.source_project == self.target_project
