"""Shared fixtures for the gitshelf test suite."""

from gitshelf.testing.fixtures import (  # noqa: F401
    empty_repository,
    fake_backend,
    mock_repository,
    sample_content_entry,
    sample_metadata,
    sample_tree_entry,
)
