"""Foxdie testing utilities.

Provides a mock provider, data factories and a git sandbox for testing code
built on Foxdie.
"""

from foxdie.testing.fixtures import GitSandbox, create_mock_branch, create_mock_push_request
from foxdie.testing.mock import MockCall, MockScmProvider

__all__ = [
    # Mock provider
    "MockScmProvider",
    "MockCall",
    # Helpers
    "GitSandbox",
    "create_mock_branch",
    "create_mock_push_request",
]
