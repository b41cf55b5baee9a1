"""
Pytest fixtures for gitshelf testing.

Provides common fixtures for testing applications that use gitshelf.
"""

from collections.abc import Generator

import pytest

from gitshelf.dialects import GITEA, GITHUB, GOGS
from gitshelf.testing.backend import FakeGitBackend
from gitshelf.testing.mock import MockContentRepository
from gitshelf.types.contents import ContentEntry, EntryKind, TreeEntry
from gitshelf.types.repos import RepositoryMetadata, RepositoryPermissions

# A small Astro-style blog
SAMPLE_FILES: dict[str, str] = {
    "astro.config.mjs": "export default defineConfig({ site: 'https://blog.example.com/' });",
    "package.json": '{"name": "blog", "homepage": "https://fallback.example.com"}',
    "README.md": "# Blog",
    "src/content/posts/hello.md": "---\ntitle: Hello\n---\n# Hello",
    "src/content/posts/second.mdx": "# Second",
    "public/images/cover.png": "png-bytes",
    "node_modules/pkg/README.md": "# Not content",
}


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_metadata(
    owner: str = "mock-owner",
    name: str = "mock-repo",
    default_branch: str = "main",
    can_write: bool = True,
    private: bool = False,
) -> RepositoryMetadata:
    """Create a RepositoryMetadata with sensible defaults."""
    return RepositoryMetadata(
        owner=owner,
        name=name,
        full_name=f"{owner}/{name}",
        private=private,
        default_branch=default_branch,
        permissions=RepositoryPermissions(push=can_write, pull=True),
    )


def create_mock_content_entry(
    path: str = "posts/hello.md",
    kind: EntryKind = EntryKind.FILE,
    sha: str | None = "0" * 40,
    size: int = 0,
) -> ContentEntry:
    """Create a ContentEntry; the name is derived from the path."""
    return ContentEntry(
        path=path,
        name=path.rsplit("/", 1)[-1],
        kind=kind,
        sha=sha,
        size=size,
    )


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def mock_repository() -> Generator[MockContentRepository, None, None]:
    """
    Provide a MockContentRepository seeded with a small blog.

    Example:
        ```python
        def test_my_feature(mock_repository):
            result = asyncio.run(my_function(mock_repository))
            assert mock_repository.was_called("update_file")
        ```
    """
    repository = MockContentRepository(files=dict(SAMPLE_FILES))
    yield repository
    repository.reset()


@pytest.fixture
def empty_repository() -> MockContentRepository:
    """Provide a MockContentRepository with no files."""
    return MockContentRepository()


@pytest.fixture(params=[GITHUB, GITEA, GOGS], ids=lambda d: d.name)
def fake_backend(request: pytest.FixtureRequest) -> FakeGitBackend:
    """Provide a FakeGitBackend seeded with a small blog, once per dialect."""
    backend = FakeGitBackend(dialect=request.param)
    for path, content in SAMPLE_FILES.items():
        backend.put_file(path, content)
    return backend


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_metadata() -> RepositoryMetadata:
    """Provide a sample RepositoryMetadata."""
    return create_mock_metadata()


@pytest.fixture
def sample_content_entry() -> ContentEntry:
    """Provide a sample file ContentEntry."""
    return create_mock_content_entry()


@pytest.fixture
def sample_tree_entry() -> TreeEntry:
    """Provide a sample file TreeEntry."""
    return TreeEntry(path="posts/hello.md", name="hello.md", kind=EntryKind.FILE, sha="0" * 40, size=7)
