"""
Pytest plugin for Foxdie testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["foxdie.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from foxdie.testing.fixtures import cutoff, git_sandbox, mock_provider

__all__ = [
    "cutoff",
    "git_sandbox",
    "mock_provider",
]
