"""
Pytest plugin for gitshelf testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitshelf.testing.conftest"]

Or import the fixtures directly:

    from gitshelf.testing.fixtures import mock_repository, sample_metadata
"""

# Re-export all fixtures for pytest auto-discovery
from gitshelf.testing.fixtures import (
    empty_repository,
    fake_backend,
    mock_repository,
    sample_content_entry,
    sample_metadata,
    sample_tree_entry,
)

__all__ = [
    "mock_repository",
    "empty_repository",
    "fake_backend",
    "sample_metadata",
    "sample_content_entry",
    "sample_tree_entry",
]
