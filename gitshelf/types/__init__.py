"""gitshelf type definitions.

This module exports all data model types used by the package.
"""

from gitshelf.types.contents import (
    BinaryFile,
    ContentEntry,
    EntryKind,
    FileListing,
    TreeEntry,
    WriteRequest,
)
from gitshelf.types.repos import RepositoryMetadata, RepositoryPermissions, UserInfo

__all__ = [
    # Repository types
    "RepositoryMetadata",
    "RepositoryPermissions",
    "UserInfo",
    # Content types
    "EntryKind",
    "ContentEntry",
    "TreeEntry",
    "FileListing",
    "BinaryFile",
    "WriteRequest",
]
