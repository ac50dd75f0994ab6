"""Foxdie actions: the workflows behind each command."""

from foxdie.actions.branches import BranchCleanupOptions, clean_remote_branches
from foxdie.actions.push_requests import PushRequestCleanupOptions, clean_push_requests
from foxdie.actions.report import write_report

__all__ = [
    "BranchCleanupOptions",
    "PushRequestCleanupOptions",
    "clean_push_requests",
    "clean_remote_branches",
    "write_report",
]
