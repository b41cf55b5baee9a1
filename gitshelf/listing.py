"""
Recursive and tree-view listings built on adapter primitives.

``list_all_files`` prefers a single recursive tree call and falls back to
a shallow directory listing when that call is unavailable.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from gitshelf.exceptions import AuthenticationError
from gitshelf.logging import get_logger
from gitshelf.scanning import ListDirectory, is_content_file
from gitshelf.types.contents import ContentEntry, EntryKind, FileListing, TreeEntry

logger = get_logger()

# Raw tree items plus the backend's truncated flag
FetchTree = Callable[[], Awaitable[tuple[list[dict[str, Any]], bool]]]

# Hidden from tree views (unlike discovery, "pages" stays visible)
IGNORED_TREE_DIRS = frozenset({
    "node_modules", ".git", ".github", "dist", "build", "vendor", ".vscode",
})


def normalize_prefix(path: str) -> str:
    """Turn a directory path into a "dir/" prefix ("" for the root)."""
    path = path.strip("/")
    return f"{path}/" if path else ""


def tree_files_under(items: list[dict[str, Any]], path: str) -> list[TreeEntry]:
    """Keep the blobs of a recursive tree that live under ``path``."""
    prefix = normalize_prefix(path)
    return [
        TreeEntry(
            path=item["path"],
            name=item["path"].rsplit("/", 1)[-1],
            kind=EntryKind.FILE,
            sha=item.get("sha"),
            size=item.get("size"),
        )
        for item in items
        if item.get("type") == "blob" and item["path"].startswith(prefix)
    ]


async def list_all_files(
    fetch_tree: FetchTree,
    list_directory: ListDirectory,
    path: str = "",
) -> FileListing:
    """
    List every file under ``path``.

    Args:
        fetch_tree: Fetches the whole repository tree in one go
        list_directory: Shallow listing primitive used as the fallback
        path: Directory to scope the listing to

    Returns:
        FileListing; ``truncated`` when the backend cut the tree short,
        ``degraded`` when only the top level of ``path`` could be listed
    """
    try:
        items, truncated = await fetch_tree()
        entries = tree_files_under(items, path)
    except AuthenticationError:
        raise
    except Exception as e:
        logger.warning("Tree listing failed, falling back to contents listing: %s", e)
        try:
            contents = await list_directory(path)
        except AuthenticationError:
            raise
        except Exception as fallback_error:
            logger.error("Contents listing of %r failed too: %s", path, fallback_error)
            return FileListing(degraded=True)
        return FileListing(
            entries=[TreeEntry.from_content(item) for item in contents if item.is_file],
            degraded=True,
        )

    if truncated:
        logger.warning(
            "Tree response truncated, %d files listed under %r; some may be missing",
            len(entries), path,
        )
    return FileListing(entries=entries, truncated=truncated)


def sort_tree_entries(entries: list[TreeEntry]) -> list[TreeEntry]:
    """Directories before files, then case-insensitive name order."""
    return sorted(entries, key=lambda e: (e.kind is not EntryKind.DIR, e.name.casefold()))


async def build_repo_tree(list_directory: ListDirectory, path: str = "") -> list[TreeEntry]:
    """
    One level of a tree view.

    Each directory is looked into once to tell whether it directly
    holds Markdown, so a tree view can highlight likely post folders.
    """
    contents = await list_directory(path)
    visible = [item for item in contents if item.name.lower() not in IGNORED_TREE_DIRS]

    async def describe(item: ContentEntry) -> TreeEntry:
        if not item.is_dir:
            return TreeEntry.from_content(item)
        try:
            children = await list_directory(item.path)
            has_markdown = any(c.is_file and is_content_file(c.name) for c in children)
        except Exception as e:
            logger.debug("Could not look into %r: %s", item.path, e)
            has_markdown = False
        return TreeEntry(
            path=item.path,
            name=item.name,
            kind=EntryKind.DIR,
            sha=item.sha,
            has_markdown=has_markdown,
        )

    entries = await asyncio.gather(*(describe(item) for item in visible))
    return sort_tree_entries(list(entries))


__all__ = [
    "IGNORED_TREE_DIRS",
    "build_repo_tree",
    "list_all_files",
    "normalize_prefix",
    "sort_tree_entries",
    "tree_files_under",
]
