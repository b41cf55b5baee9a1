"""
Tests for the repository-stored project config.

Feature: shared editor setup in .gitshelfrc.json
"""

import asyncio
import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gitshelf.config import (
    CONFIG_FILE,
    CommitTemplates,
    ProjectConfig,
    ProjectConfigStore,
    suggest_project_config,
)
from gitshelf.exceptions import ConflictError
from gitshelf.testing import FakeGitBackend, MockContentRepository


# ============================================================================
# ProjectConfig
# ============================================================================


def test_defaults() -> None:
    config = ProjectConfig()
    assert config.project_type == "astro"
    assert config.images_path == "public/images"
    assert config.settings.max_image_size == 500
    assert config.version == 1


def test_from_dict_applies_valid_values() -> None:
    config = ProjectConfig.from_dict({
        "projectType": "github",
        "paths": {"posts": "src/content/blog", "images": "src/assets"},
        "domainUrl": "https://example.com",
        "settings": {"maxImageSize": 800, "publishDateSource": "system"},
        "commits": {"newPost": "post: {filename}"},
        "templates": {"frontmatter": [{"key": "title"}]},
        "ui": {"tableColumns": ["title", "date"]},
    })

    assert config.project_type == "github"
    assert config.posts_path == "src/content/blog"
    assert config.images_path == "src/assets"
    assert config.domain_url == "https://example.com"
    assert config.settings.max_image_size == 800
    assert config.settings.publish_date_source == "system"
    assert config.commits.new_post == "post: {filename}"
    assert config.commits.update_post == CommitTemplates().update_post
    assert config.frontmatter_template == [{"key": "title"}]
    assert config.table_columns == ["title", "date"]
    assert config.column_widths is None


@pytest.mark.parametrize(
    "data",
    [
        {"projectType": "hugo"},
        {"paths": {"posts": "../outside"}},
        {"paths": {"images": "   "}},
        {"settings": {"maxImageSize": 5}},
        {"settings": {"maxImageSize": True}},
        {"settings": {"imageResizeMaxWidth": 20000}},
        {"settings": {"imageCompressionEnabled": "yes"}},
        {"settings": {"postFileTypes": "x" * 100}},
        {"commits": {"newPost": "x" * 200}},
        {"paths": "not-a-section"},
    ],
)
def test_from_dict_keeps_defaults_for_invalid_values(data: dict) -> None:
    assert ProjectConfig.from_dict(data) == ProjectConfig()


def test_to_dict_schema() -> None:
    data = ProjectConfig(posts_path="posts").to_dict()

    assert data["version"] == 1
    assert data["paths"] == {"posts": "posts", "images": "public/images"}
    assert data["templates"] == {}
    assert data["ui"] == {}
    assert set(data["settings"]) == {
        "postFileTypes", "imageFileTypes", "publishDateSource",
        "imageCompressionEnabled", "maxImageSize", "imageResizeMaxWidth",
    }
    assert set(data["commits"]) == {"newPost", "updatePost", "newImage", "updateImage"}


@given(
    posts=st.from_regex(r"[a-z][a-z/]{0,20}", fullmatch=True),
    max_image_size=st.integers(min_value=10, max_value=1024),
    compression=st.booleans(),
    new_post=st.text(max_size=50),
)
@settings(max_examples=100)
def test_json_document_reloads_to_same_config(
    posts: str, max_image_size: int, compression: bool, new_post: str
) -> None:
    config = ProjectConfig(posts_path=posts)
    config.settings.max_image_size = max_image_size
    config.settings.image_compression_enabled = compression
    config.commits.new_post = new_post

    assert ProjectConfig.from_dict(json.loads(config.to_json())) == config


# ============================================================================
# Commit templates
# ============================================================================


def test_render_templates() -> None:
    templates = CommitTemplates()
    assert templates.render("new_post", "hello.md") == 'feat(content): add post "hello.md"'
    assert templates.render("update_image", "cover.png") == 'refactor(assets): update image for "cover.png"'


def test_render_replaces_every_placeholder() -> None:
    templates = CommitTemplates(update_post="{filename}: edit {filename}")
    assert templates.render("update_post", "a.md") == "a.md: edit a.md"


def test_render_unknown_kind() -> None:
    with pytest.raises(ValueError):
        CommitTemplates().render("delete_post", "a.md")


# ============================================================================
# ProjectConfigStore
# ============================================================================


def test_load_missing_config(empty_repository: MockContentRepository) -> None:
    assert asyncio.run(ProjectConfigStore(empty_repository).load()) is None


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_load_unusable_config(content: str) -> None:
    repository = MockContentRepository(files={CONFIG_FILE: content})
    assert asyncio.run(ProjectConfigStore(repository).load()) is None


def test_save_creates_then_updates(empty_repository: MockContentRepository) -> None:
    store = ProjectConfigStore(empty_repository)

    async def scenario() -> ProjectConfig | None:
        await store.save(ProjectConfig(posts_path="posts"))
        await store.save(ProjectConfig(posts_path="blog"))
        return await store.load()

    loaded = asyncio.run(scenario())

    assert loaded is not None
    assert loaded.posts_path == "blog"
    assert empty_repository.call_count("create_file") == 1
    assert empty_repository.call_count("update_file") == 1
    assert empty_repository.get_calls("create_file")[0].args[2] == "chore: add gitshelf config"


def test_save_over_concurrent_change_conflicts() -> None:
    repository = MockContentRepository(files={CONFIG_FILE: "{}"})
    store = ProjectConfigStore(repository)
    original_get_sha = repository.get_file_sha

    async def stale_sha(path: str) -> str | None:
        sha = await original_get_sha(path)
        repository.put_file(CONFIG_FILE, '{"version": 1}')
        return sha

    repository.get_file_sha = stale_sha  # type: ignore[method-assign]

    with pytest.raises(ConflictError):
        asyncio.run(store.save(ProjectConfig()))


def test_delete() -> None:
    repository = MockContentRepository(files={CONFIG_FILE: "{}"})
    store = ProjectConfigStore(repository)

    assert asyncio.run(store.delete()) is True
    assert CONFIG_FILE not in repository.files
    assert asyncio.run(store.delete()) is False


def test_store_over_rest_backend(fake_backend: FakeGitBackend) -> None:
    async def scenario() -> ProjectConfig | None:
        async with fake_backend.client() as client:
            store = ProjectConfigStore(client.repository)
            await store.save(ProjectConfig(domain_url="https://blog.example.com"))
            return await store.load()

    loaded = asyncio.run(scenario())

    assert loaded is not None
    assert loaded.domain_url == "https://blog.example.com"
    assert json.loads(fake_backend.files[CONFIG_FILE])["version"] == 1


# ============================================================================
# Setup suggestions
# ============================================================================


def test_suggest_project_config(mock_repository: MockContentRepository) -> None:
    suggestion = asyncio.run(suggest_project_config(mock_repository))

    assert suggestion.config.domain_url == "https://blog.example.com"
    assert suggestion.config.posts_path == "src/content/posts"
    assert suggestion.config.images_path == "public/images"
    assert suggestion.content_directories == ["src/content/posts"]


def test_suggest_keeps_base_when_nothing_found(empty_repository: MockContentRepository) -> None:
    base = ProjectConfig(posts_path="posts", domain_url="https://keep.example.com")

    suggestion = asyncio.run(suggest_project_config(empty_repository, base))

    assert suggestion.config is base
    assert suggestion.config.posts_path == "posts"
    assert suggestion.config.domain_url == "https://keep.example.com"
    assert suggestion.image_directories == []
