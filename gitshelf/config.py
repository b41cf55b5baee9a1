"""
Project configuration stored inside the content repository.

A small JSON file at the repository root records where posts and images
live, commit message templates and a few editor preferences, so every
editor of the repository shares one setup. Values that fail validation
are ignored and the default is kept.
"""

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from gitshelf.contract import ContentRepository
from gitshelf.exceptions import NotFoundError
from gitshelf.logging import get_logger

logger = get_logger()

CONFIG_FILE = ".gitshelfrc.json"
CONFIG_VERSION = 1

ADD_CONFIG_MESSAGE = "chore: add gitshelf config"
UPDATE_CONFIG_MESSAGE = "chore: update gitshelf config"
DELETE_CONFIG_MESSAGE = "chore: delete gitshelf config"

Validator = Callable[[Any], bool]


def _repo_path(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip()) and ".." not in value


def _shorter_than(limit: int) -> Validator:
    return lambda value: isinstance(value, str) and len(value) < limit


def _number_between(low: int, high: int) -> Validator:
    return lambda value: (
        isinstance(value, (int, float)) and not isinstance(value, bool) and low <= value <= high
    )


def _one_of(*choices: str) -> Validator:
    return lambda value: value in choices


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


@dataclass
class CommitTemplates:
    """Commit messages; ``{filename}`` is replaced by the file's name."""

    new_post: str = 'feat(content): add post "{filename}"'
    update_post: str = 'fix(content): update post "{filename}"'
    new_image: str = 'feat(assets): add image "{filename}"'
    update_image: str = 'refactor(assets): update image for "{filename}"'

    def render(self, kind: str, filename: str) -> str:
        """
        Render one template.

        Args:
            kind: "new_post", "update_post", "new_image" or "update_image"
            filename: Name substituted for ``{filename}``
        """
        if kind not in ("new_post", "update_post", "new_image", "update_image"):
            raise ValueError(f"Unknown commit template: {kind}")
        return getattr(self, kind).replace("{filename}", filename)


@dataclass
class EditorSettings:
    post_file_types: str = ".md,.mdx"
    image_file_types: str = "image/*"
    publish_date_source: str = "file"
    image_compression_enabled: bool = False
    max_image_size: int = 500  # KB
    image_resize_max_width: int = 1024  # px


@dataclass
class ProjectConfig:
    """Contents of the repository's config file."""

    project_type: str = "astro"
    posts_path: str = ""
    images_path: str = "public/images"
    domain_url: str = ""
    settings: EditorSettings = field(default_factory=EditorSettings)
    commits: CommitTemplates = field(default_factory=CommitTemplates)
    frontmatter_template: Any = None
    table_columns: Any = None
    column_widths: Any = None
    version: int = CONFIG_VERSION

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectConfig":
        """Build from the JSON document, keeping defaults for invalid values."""
        config = cls()
        for section, key, target, attr, validator in _FIELDS:
            source = data if section is None else data.get(section)
            if not isinstance(source, dict):
                continue
            value = source.get(key)
            if value is None:
                continue
            holder = config if target is None else getattr(config, target)
            if validator(value):
                setattr(holder, attr, value)
            else:
                logger.warning("Ignoring invalid config value for %s", key)

        templates = data.get("templates")
        if isinstance(templates, dict):
            config.frontmatter_template = templates.get("frontmatter")
        ui = data.get("ui")
        if isinstance(ui, dict):
            config.table_columns = ui.get("tableColumns")
            config.column_widths = ui.get("columnWidths")
        return config

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "version": self.version,
            "projectType": self.project_type,
            "paths": {"posts": self.posts_path, "images": self.images_path},
            "domainUrl": self.domain_url,
            "templates": _without_none({"frontmatter": self.frontmatter_template}),
            "ui": _without_none({
                "tableColumns": self.table_columns,
                "columnWidths": self.column_widths,
            }),
            "settings": {
                "postFileTypes": self.settings.post_file_types,
                "imageFileTypes": self.settings.image_file_types,
                "publishDateSource": self.settings.publish_date_source,
                "imageCompressionEnabled": self.settings.image_compression_enabled,
                "maxImageSize": self.settings.max_image_size,
                "imageResizeMaxWidth": self.settings.image_resize_max_width,
            },
            "commits": {
                "newPost": self.commits.new_post,
                "updatePost": self.commits.update_post,
                "newImage": self.commits.new_image,
                "updateImage": self.commits.update_image,
            },
        }
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


# (JSON section, JSON key, attribute holder, attribute, validator)
_FIELDS: tuple[tuple[str | None, str, str | None, str, Validator], ...] = (
    (None, "projectType", None, "project_type", _one_of("astro", "github")),
    ("paths", "posts", None, "posts_path", _repo_path),
    ("paths", "images", None, "images_path", _repo_path),
    (None, "domainUrl", None, "domain_url", _is_str),
    ("settings", "postFileTypes", "settings", "post_file_types", _shorter_than(100)),
    ("settings", "imageFileTypes", "settings", "image_file_types", _shorter_than(100)),
    ("settings", "publishDateSource", "settings", "publish_date_source", _one_of("file", "system")),
    ("settings", "imageCompressionEnabled", "settings", "image_compression_enabled", _is_bool),
    ("settings", "maxImageSize", "settings", "max_image_size", _number_between(10, 1024)),
    ("settings", "imageResizeMaxWidth", "settings", "image_resize_max_width", _number_between(0, 10000)),
    ("commits", "newPost", "commits", "new_post", _shorter_than(200)),
    ("commits", "updatePost", "commits", "update_post", _shorter_than(200)),
    ("commits", "newImage", "commits", "new_image", _shorter_than(200)),
    ("commits", "updateImage", "commits", "update_image", _shorter_than(200)),
)


def _without_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class ProjectConfigStore:
    """Reads and writes the config file through a ContentRepository."""

    def __init__(self, repository: ContentRepository, path: str = CONFIG_FILE) -> None:
        self.repository = repository
        self.path = path

    async def load(self) -> ProjectConfig | None:
        """The stored config, or None if there is none or it is not JSON."""
        try:
            text = await self.repository.read_file(self.path)
        except NotFoundError:
            return None
        try:
            data = json.loads(text)
        except ValueError:
            logger.warning("%s is not valid JSON, ignoring it", self.path)
            return None
        if not isinstance(data, dict):
            logger.warning("%s is not a JSON object, ignoring it", self.path)
            return None
        return ProjectConfig.from_dict(data)

    async def save(self, config: ProjectConfig) -> None:
        """
        Create or replace the config file.

        Raises:
            ConflictError: If someone else changed the file in between
        """
        sha = await self.repository.get_file_sha(self.path)
        if sha is None:
            await self.repository.create_file(self.path, config.to_json(), ADD_CONFIG_MESSAGE)
        else:
            await self.repository.update_file(
                self.path, config.to_json(), UPDATE_CONFIG_MESSAGE, sha
            )

    async def delete(self) -> bool:
        """Remove the config file. Returns False if there was none."""
        sha = await self.repository.get_file_sha(self.path)
        if sha is None:
            return False
        await self.repository.delete_file(self.path, sha, DELETE_CONFIG_MESSAGE)
        return True


@dataclass
class SetupSuggestion:
    """Settings guessed for a repository that has no config file yet."""

    config: ProjectConfig
    content_directories: list[str]
    image_directories: list[str]


async def suggest_project_config(
    repository: ContentRepository, base: ProjectConfig | None = None
) -> SetupSuggestion:
    """
    Pre-fill a config from the repository's layout.

    Runs the site URL probe and both directory scans concurrently. The
    best-ranked directories become the posts and images paths.
    """
    config = base or ProjectConfig()
    site_url, content_dirs, image_dirs = await asyncio.gather(
        repository.discover_public_site_url(),
        repository.discover_content_directories(),
        repository.discover_image_directories(),
    )
    if site_url:
        config.domain_url = site_url
    if content_dirs:
        config.posts_path = content_dirs[0]
    if image_dirs:
        config.images_path = image_dirs[0]
    return SetupSuggestion(
        config=config,
        content_directories=content_dirs,
        image_directories=image_dirs,
    )


__all__ = [
    "CONFIG_FILE",
    "CONFIG_VERSION",
    "CommitTemplates",
    "EditorSettings",
    "ProjectConfig",
    "ProjectConfigStore",
    "SetupSuggestion",
    "suggest_project_config",
]
