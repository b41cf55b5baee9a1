"""gitshelf - Git-hosted repositories as a content store for posts and images."""

from gitshelf.adapters import GiteaRepository, GitHubRepository, RestContentRepository
from gitshelf.client import GitShelfClient, parse_repo_url
from gitshelf.config import ProjectConfig, ProjectConfigStore, suggest_project_config
from gitshelf.contract import ContentRepository
from gitshelf.dialects import GITEA, GITHUB, GOGS, BackendDialect
from gitshelf.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendError,
    ConfigurationError,
    ConflictError,
    GitShelfError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from gitshelf.logging import configure_logging, get_logger
from gitshelf.transport import AsyncHTTPTransport, RetryConfig
from gitshelf.types import (
    BinaryFile,
    ContentEntry,
    EntryKind,
    FileListing,
    RepositoryMetadata,
    TreeEntry,
    UserInfo,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "GitShelfClient",
    "parse_repo_url",
    # Contract and adapters
    "ContentRepository",
    "RestContentRepository",
    "GitHubRepository",
    "GiteaRepository",
    # Dialects
    "BackendDialect",
    "GITHUB",
    "GITEA",
    "GOGS",
    # Exceptions
    "GitShelfError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "BackendError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "ConfigurationError",
    # Types
    "RepositoryMetadata",
    "UserInfo",
    "EntryKind",
    "ContentEntry",
    "TreeEntry",
    "FileListing",
    "BinaryFile",
    # Project config
    "ProjectConfig",
    "ProjectConfigStore",
    "suggest_project_config",
    # Transport
    "AsyncHTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
