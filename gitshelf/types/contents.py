"""Content-related data models."""

import base64
import binascii
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Matched against the whole string only
_DATA_URL = re.compile(r"data:[\w.+/-]*(?:;[\w=.-]+)*;base64,((?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?)")


class EntryKind(str, Enum):
    """Whether an entry is a file or a directory. Nothing is both."""

    FILE = "file"
    DIR = "dir"

    @classmethod
    def from_backend(cls, value: str) -> "EntryKind":
        """Normalise a backend's spelling of an entry type."""
        if value in ("dir", "tree", "submodule"):
            return cls.DIR
        if value in ("file", "blob", "symlink"):
            return cls.FILE
        raise ValueError(f"Unknown entry type: {value}")


@dataclass(frozen=True)
class ContentEntry:
    """One file or directory from a contents listing."""

    path: str
    name: str
    kind: EntryKind
    sha: str | None
    size: int = 0
    content: str | None = None
    encoding: str | None = None  # "base64" when content is inline
    download_url: str | None = None

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIR

    def decoded_bytes(self) -> bytes:
        """
        Decode the inline content.

        Raises:
            ValueError: If the entry carries no base64 content
        """
        if self.content is None or self.encoding != "base64":
            raise ValueError(f"No inline base64 content for {self.path}")
        try:
            # Backends wrap base64 at 60-76 columns
            return base64.b64decode("".join(self.content.split()))
        except binascii.Error as e:
            raise ValueError(f"Malformed base64 content for {self.path}") from e

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ContentEntry":
        path = data["path"].lstrip("/")
        return cls(
            path=path,
            name=data.get("name") or path.rsplit("/", 1)[-1],
            kind=EntryKind.from_backend(data.get("type", "file")),
            sha=data.get("sha"),
            size=data.get("size") or 0,
            content=data.get("content"),
            encoding=data.get("encoding"),
            download_url=data.get("download_url"),
        )


@dataclass(frozen=True)
class TreeEntry:
    """A lightweight listing record, for enumeration only.

    Never used as the basis of a write without a fresh sha lookup or
    a sha the caller already holds.
    """

    path: str
    name: str
    kind: EntryKind
    sha: str | None = None
    size: int | None = None
    has_markdown: bool | None = None

    @classmethod
    def from_content(cls, entry: ContentEntry) -> "TreeEntry":
        return cls(
            path=entry.path,
            name=entry.name,
            kind=entry.kind,
            sha=entry.sha,
            size=entry.size,
        )


@dataclass
class FileListing:
    """Result of a recursive file listing.

    ``truncated`` means the backend's recursive listing hit its size
    limit and some files are missing. ``degraded`` means the recursive
    endpoint could not be used and only the top level was listed.
    """

    entries: list[TreeEntry] = field(default_factory=list)
    truncated: bool = False
    degraded: bool = False

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]

    @property
    def complete(self) -> bool:
        return not (self.truncated or self.degraded)

    def __iter__(self) -> Iterator[TreeEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class BinaryFile:
    """Raw file bytes with a MIME type guessed from the extension."""

    path: str
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class WriteRequest:
    """A single-path mutation."""

    path: str
    content: str | bytes
    message: str
    expected_sha: str | None = None

    def encoded_content(self) -> str:
        """Base64 payload for the contents API."""
        if isinstance(self.content, bytes):
            return base64.b64encode(self.content).decode("ascii")
        data_url = _DATA_URL.fullmatch(self.content)
        if data_url is not None:
            return data_url.group(1)
        return base64.b64encode(self.content.encode("utf-8")).decode("ascii")

    def to_body(self, include_sha: bool = True) -> dict[str, str]:
        body = {"message": self.message, "content": self.encoded_content()}
        if include_sha and self.expected_sha:
            body["sha"] = self.expected_sha
        return body
