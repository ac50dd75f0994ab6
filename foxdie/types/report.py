"""Branch report data models."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class ReportItem:
    """One remote-tracking branch in a report."""

    branch: str
    commit: str
    author: str
    last_updated: datetime
    ahead: int  # commits on the current branch not on this branch
    behind: int  # commits on this branch not on the current branch
    has_push_request: bool
    message: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["last_updated"] = self.last_updated.isoformat()
        return data


@dataclass
class Report:
    """Branch report for a single remote."""

    remote_name: str
    remote_url: str
    items: list[ReportItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "remote_name": self.remote_name,
            "remote_url": self.remote_url,
            "items": [item.to_dict() for item in self.items],
        }
