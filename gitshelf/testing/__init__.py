"""gitshelf testing utilities.

Provides an in-memory repository, a fake REST backend and fixtures for
testing applications that use gitshelf.
"""

from gitshelf.testing.backend import FakeGitBackend, git_blob_sha
from gitshelf.testing.fixtures import (
    SAMPLE_FILES,
    create_mock_content_entry,
    create_mock_metadata,
)
from gitshelf.testing.mock import MockCall, MockContentRepository

__all__ = [
    # Doubles
    "MockContentRepository",
    "MockCall",
    "FakeGitBackend",
    # Helper functions
    "git_blob_sha",
    "create_mock_metadata",
    "create_mock_content_entry",
    "SAMPLE_FILES",
]
