"""Foxdie type definitions.

This module exports all data model types shared by the provider clients,
the eligibility engine and the actions.
"""

from foxdie.types.branches import BranchCandidate, Commit, ProtectedBranch
from foxdie.types.push_requests import PushRequest, PushRequestState
from foxdie.types.report import Report, ReportItem

__all__ = [
    # Branch types
    "BranchCandidate",
    "Commit",
    "ProtectedBranch",
    # Push request types
    "PushRequest",
    "PushRequestState",
    # Report types
    "Report",
    "ReportItem",
]
