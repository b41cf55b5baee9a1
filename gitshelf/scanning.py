"""
Directory discovery for first-time setup.

Walks the top of a repository looking for directories that directly hold
Markdown posts or images, and ranks them by how conventional they look.
Scans are best-effort: they are only used to suggest settings, so every
failure degrades to fewer results rather than an error.
"""

import asyncio
import re
from collections.abc import Awaitable, Callable, Iterable

from gitshelf.logging import get_logger
from gitshelf.types.contents import ContentEntry

logger = get_logger("scan")

ListDirectory = Callable[[str], Awaitable[list[ContentEntry]]]
FileCheck = Callable[[str], bool]

MAX_SCAN_DEPTH = 4

# Never descended into during discovery (compared lower-cased)
IGNORED_SCAN_DIRS = frozenset({
    "node_modules", ".git", ".github", "dist", "build", "vendor", ".vscode",
    "pages", "page",
})

CONTENT_DIR_NAMES = ("posts", "post", "blog", "content", "data", "articles")
IMAGE_DIR_NAMES = ("images", "assets", "static", "public")

# The usual home of images in Astro sites
PROMOTED_IMAGE_DIR = "public/images"

_IMAGE_RE = re.compile(r"\.(jpe?g|png|gif|webp|svg)$", re.IGNORECASE)


def is_content_file(name: str) -> bool:
    return name.endswith((".md", ".mdx"))


def is_image_file(name: str) -> bool:
    return _IMAGE_RE.search(name) is not None


async def scan_directories(
    list_directory: ListDirectory,
    file_check: FileCheck,
    max_depth: int = MAX_SCAN_DEPTH,
    ignored: Iterable[str] = IGNORED_SCAN_DIRS,
) -> set[str]:
    """
    Find directories that directly contain at least one matching file.

    Files in subdirectories do not make their parent a hit. Sibling
    directories are listed concurrently; a directory that cannot be
    listed contributes no hits and the scan carries on.

    Args:
        list_directory: Shallow listing primitive of a repository
        file_check: Predicate on file names
        max_depth: Number of directory levels to list, root included
        ignored: Directory names pruned from the walk

    Returns:
        Set of repository-relative directory paths (never the root)
    """
    ignored_names = {name.lower() for name in ignored}
    found: set[str] = set()

    async def visit(path: str, depth: int) -> None:
        if depth >= max_depth:
            return
        try:
            contents = await list_directory(path)
        except Exception as e:
            logger.debug("Could not scan directory %r: %s", path, e)
            return

        has_match = False
        subdirs: list[str] = []
        for item in contents:
            if item.is_file and file_check(item.name):
                has_match = True
            elif item.is_dir and item.name.lower() not in ignored_names:
                subdirs.append(item.path)

        if has_match and path:
            found.add(path)

        await asyncio.gather(*(visit(subdir, depth + 1) for subdir in subdirs))

    await visit("", 0)
    return found


def sort_paths(paths: Iterable[str], preferred_names: Iterable[str]) -> list[str]:
    """
    Rank directory paths.

    Paths whose last segment is a preferred name come first, then
    shallower paths, then case-insensitive alphabetical order.
    """
    preferred = {name.lower() for name in preferred_names}

    def rank(path: str) -> tuple[bool, int, str, str]:
        segments = path.split("/")
        return (segments[-1].lower() not in preferred, len(segments), path.casefold(), path)

    return sorted(paths, key=rank)


def promote(paths: list[str], target: str) -> list[str]:
    """Move ``target`` (case-insensitive) to the front if present."""
    for index, path in enumerate(paths):
        if path.lower() == target.lower():
            return [path] + paths[:index] + paths[index + 1:]
    return paths


async def discover_content_directories(list_directory: ListDirectory) -> list[str]:
    """Ranked directories that look like they hold Markdown posts."""
    found = await scan_directories(list_directory, is_content_file)
    ranked = sort_paths(found, CONTENT_DIR_NAMES)
    logger.info("Found %d candidate content directories", len(ranked))
    return ranked


async def discover_image_directories(list_directory: ListDirectory) -> list[str]:
    """Ranked directories that look like they hold images."""
    found = await scan_directories(list_directory, is_image_file)
    ranked = promote(sort_paths(found, IMAGE_DIR_NAMES), PROMOTED_IMAGE_DIR)
    logger.info("Found %d candidate image directories", len(ranked))
    return ranked


__all__ = [
    "CONTENT_DIR_NAMES",
    "IGNORED_SCAN_DIRS",
    "IMAGE_DIR_NAMES",
    "MAX_SCAN_DEPTH",
    "discover_content_directories",
    "discover_image_directories",
    "is_content_file",
    "is_image_file",
    "promote",
    "scan_directories",
    "sort_paths",
]
