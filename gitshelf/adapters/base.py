"""
Contents-API adapter shared by every backend.

GitHub, Gitea and Gogs expose the same ``/repos/{owner}/{repo}/contents``
and ``/git/trees`` shapes; the differences live in the transport's
``BackendDialect``.
"""

import posixpath
from typing import Any
from urllib.parse import quote

from gitshelf import listing, scanning, site_url
from gitshelf.exceptions import BackendError, ConflictError, NotFoundError, ValidationError
from gitshelf.logging import get_logger
from gitshelf.transport import AsyncHTTPTransport
from gitshelf.types.contents import (
    BinaryFile,
    ContentEntry,
    FileListing,
    TreeEntry,
    WriteRequest,
)
from gitshelf.types.repos import RepositoryMetadata

logger = get_logger()

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "bmp": "image/bmp",
}


def guess_mime_type(name: str) -> str:
    """MIME type from a file extension; the contents API does not send one."""
    _, ext = posixpath.splitext(name)
    return MIME_TYPES.get(ext.lstrip(".").lower(), DEFAULT_MIME_TYPE)


class RestContentRepository:
    """
    ContentRepository over a backend's contents API.

    Every mutation is a compare-and-swap on the file's sha: the backend
    rejects it when the sha no longer matches, and that surfaces as
    ConflictError. Nothing here retries a rejected write.
    """

    DEFAULT_MAX_TREE_PAGES = 50

    def __init__(
        self,
        transport: AsyncHTTPTransport,
        owner: str,
        repo: str,
        max_tree_pages: int = DEFAULT_MAX_TREE_PAGES,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            transport: Transport bound to one backend instance
            owner: Repository owner (user or organization)
            repo: Repository name
            max_tree_pages: Page cap for paginated recursive tree listings
        """
        self._transport = transport
        self.owner = owner
        self.repo = repo
        self.max_tree_pages = max_tree_pages

    @property
    def transport(self) -> AsyncHTTPTransport:
        return self._transport

    @property
    def dialect_name(self) -> str:
        return self._transport.dialect.name

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "RestContentRepository":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.dialect_name}:{self.owner}/{self.repo})"

    # Paths

    def _repo_path(self, suffix: str = "") -> str:
        return f"/repos/{quote(self.owner)}/{quote(self.repo)}{suffix}"

    def _contents_path(self, path: str) -> str:
        path = path.strip("/")
        if not path:
            return self._repo_path("/contents")
        return self._repo_path(f"/contents/{quote(path, safe='/')}")

    # Reads

    async def get_repository_metadata(self) -> RepositoryMetadata:
        data = await self._transport.request("GET", self._repo_path())
        return RepositoryMetadata.from_api(data)

    async def list_directory(self, path: str) -> list[ContentEntry]:
        data = await self._transport.request("GET", self._contents_path(path))
        if not isinstance(data, list):
            raise ValidationError("NOT_A_DIRECTORY", f"'{path}' is not a directory")
        return [ContentEntry.from_api(item) for item in data]

    async def _get_file(self, path: str) -> ContentEntry:
        data = await self._transport.request("GET", self._contents_path(path))
        if not isinstance(data, dict):
            raise ValidationError("NOT_A_FILE", f"'{path}' is a directory")
        return ContentEntry.from_api(data)

    async def _read_bytes(self, entry: ContentEntry) -> bytes:
        if entry.content is not None and entry.encoding == "base64":
            return entry.decoded_bytes()
        if entry.sha:
            # GitHub leaves content out for files over 1MB; the blob API still has it
            blob = await self._transport.request(
                "GET", self._repo_path(f"/git/blobs/{entry.sha}")
            )
            return ContentEntry(
                path=entry.path,
                name=entry.name,
                kind=entry.kind,
                sha=entry.sha,
                content=blob.get("content"),
                encoding=blob.get("encoding"),
            ).decoded_bytes()
        raise BackendError("UNDECODABLE_CONTENT", f"Could not decode content of '{entry.path}'")

    async def read_file(self, path: str) -> str:
        entry = await self._get_file(path)
        data = await self._read_bytes(entry)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BackendError("UNDECODABLE_CONTENT", f"'{path}' is not UTF-8 text") from e

    async def read_file_as_binary(self, path: str) -> BinaryFile:
        entry = await self._get_file(path)
        data = await self._read_bytes(entry)
        return BinaryFile(path=entry.path, data=data, mime_type=guess_mime_type(entry.name))

    async def get_file_sha(self, path: str) -> str | None:
        try:
            entry = await self._get_file(path)
        except NotFoundError:
            return None
        return entry.sha

    async def _fetch_tree(self) -> tuple[list[dict[str, Any]], bool]:
        """Whole tree of the default branch and whether it was cut short."""
        metadata = await self.get_repository_metadata()
        tree_path = self._repo_path(f"/git/trees/{quote(metadata.default_branch, safe='')}")
        dialect = self._transport.dialect

        items: list[dict[str, Any]] = []
        page = 1
        while True:
            data = await self._transport.request(
                "GET", tree_path, params=dialect.tree_params(page)
            )
            page_items = data.get("tree") or []
            items.extend(page_items)
            truncated = bool(data.get("truncated"))
            # Gitea and Gogs mark every page but the last as truncated
            if not (dialect.paginated_tree and truncated and page_items):
                break
            if page >= self.max_tree_pages:
                logger.warning("Stopped tree listing after %d pages", page)
                break
            page += 1

        return items, truncated

    async def list_all_files(self, path: str = "") -> FileListing:
        return await listing.list_all_files(self._fetch_tree, self.list_directory, path)

    async def get_repo_tree(self, path: str = "") -> list[TreeEntry]:
        return await listing.build_repo_tree(self.list_directory, path)

    # Writes

    async def _write(self, method: str, request: WriteRequest) -> None:
        logger.info("%s %s (%s)", method, request.path, request.message)
        await self._transport.request(
            method, self._contents_path(request.path), body=request.to_body()
        )

    async def create_file(self, path: str, content: str | bytes, message: str) -> None:
        try:
            existing = await self.get_file_sha(path)
        except ValidationError as e:
            raise ConflictError("ALREADY_EXISTS", f"'{path}' is an existing directory") from e
        if existing is not None:
            raise ConflictError(
                "ALREADY_EXISTS",
                f"A file named '{posixpath.basename(path)}' already exists in this directory",
            )
        await self._write(
            self._transport.dialect.create_method,
            WriteRequest(path=path, content=content, message=message),
        )

    async def update_file(
        self, path: str, content: str | bytes, message: str, expected_sha: str
    ) -> None:
        await self._write(
            self._transport.dialect.update_method,
            WriteRequest(path=path, content=content, message=message, expected_sha=expected_sha),
        )

    async def upload_binary_file(
        self,
        path: str,
        data: bytes,
        message: str,
        expected_sha: str | None = None,
    ) -> None:
        sha = expected_sha or await self.get_file_sha(path)
        dialect = self._transport.dialect
        method = dialect.update_method if sha else dialect.create_method
        await self._write(
            method,
            WriteRequest(path=path, content=data, message=message, expected_sha=sha),
        )

    async def delete_file(self, path: str, expected_sha: str, message: str) -> None:
        logger.info("DELETE %s (%s)", path, message)
        await self._transport.request(
            "DELETE",
            self._contents_path(path),
            body={"message": message, "sha": expected_sha},
        )

    # Discovery

    async def discover_content_directories(self) -> list[str]:
        return await scanning.discover_content_directories(self.list_directory)

    async def discover_image_directories(self) -> list[str]:
        return await scanning.discover_image_directories(self.list_directory)

    async def discover_public_site_url(self) -> str | None:
        return await site_url.find_production_url(self.read_file)
