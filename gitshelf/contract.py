"""The content repository contract.

Every backend adapter, and every test double, provides these operations.
Hosts hold one instance and talk to it exclusively through this interface.
"""

from typing import Protocol, runtime_checkable

from gitshelf.types.contents import BinaryFile, ContentEntry, FileListing, TreeEntry
from gitshelf.types.repos import RepositoryMetadata


@runtime_checkable
class ContentRepository(Protocol):
    """A remote repository seen as a path-addressed content store.

    Content operations raise ``GitShelfError`` subclasses. Discovery
    operations never raise; they degrade to empty results.
    """

    # Content operations

    async def list_directory(self, path: str) -> list[ContentEntry]:
        """Shallow listing of one directory. Raises NotFoundError if absent."""
        ...

    async def list_all_files(self, path: str = "") -> FileListing:
        """Recursive file listing scoped to a path prefix."""
        ...

    async def read_file(self, path: str) -> str:
        """Fetch a text file decoded as UTF-8."""
        ...

    async def read_file_as_binary(self, path: str) -> BinaryFile:
        """Fetch raw file bytes with a MIME type inferred from the extension."""
        ...

    async def create_file(self, path: str, content: str | bytes, message: str) -> None:
        """Create a new file. Raises ConflictError if the path exists."""
        ...

    async def update_file(
        self, path: str, content: str | bytes, message: str, expected_sha: str
    ) -> None:
        """Replace a file. Raises ConflictError if its sha is not ``expected_sha``."""
        ...

    async def upload_binary_file(
        self,
        path: str,
        data: bytes,
        message: str,
        expected_sha: str | None = None,
    ) -> None:
        """Create or replace a file, looking up the sha when not supplied."""
        ...

    async def delete_file(self, path: str, expected_sha: str, message: str) -> None:
        """Delete a file. Raises ConflictError on sha mismatch, NotFoundError if absent."""
        ...

    async def get_repository_metadata(self) -> RepositoryMetadata:
        ...

    async def get_file_sha(self, path: str) -> str | None:
        """Current sha of a file, or None if there is no file at ``path``."""
        ...

    async def get_repo_tree(self, path: str = "") -> list[TreeEntry]:
        """One level of the repository for tree views, directories first."""
        ...

    # Discovery operations

    async def discover_content_directories(self) -> list[str]:
        ...

    async def discover_image_directories(self) -> list[str]:
        ...

    async def discover_public_site_url(self) -> str | None:
        ...


__all__ = ["ContentRepository"]
