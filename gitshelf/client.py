"""
gitshelf client.

Entry point for host applications: picks the adapter for the chosen
backend, verifies the token and exposes the repository through the
ContentRepository contract.
"""

import os
from typing import Any
from urllib.parse import urlparse

import httpx

from gitshelf.adapters import GiteaRepository, GitHubRepository, RestContentRepository
from gitshelf.dialects import GITHUB, get_dialect
from gitshelf.exceptions import AuthorizationError, ConfigurationError
from gitshelf.logging import get_logger
from gitshelf.transport import AsyncHTTPTransport, AuthInvalidCallback, RetryConfig
from gitshelf.types.repos import RepositoryMetadata, UserInfo

logger = get_logger()


def parse_repo_url(url: str) -> tuple[str, str] | None:
    """
    Extract (owner, repo) from a repository web URL.

    The owner and repository are the last two path segments, so URLs of
    instances served under a sub-path work too.

    Returns:
        (owner, repo), or None if the URL is not usable
    """
    parsed = urlparse(url.strip())
    if not parsed.scheme or not parsed.netloc:
        return None
    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) < 2:
        return None
    repo = parts[-1].removesuffix(".git")
    if not repo:
        return None
    return parts[-2], repo


class GitShelfClient:
    """
    Client for one repository on GitHub, Gitea or Gogs.

    Example:
        ```python
        import asyncio
        from gitshelf import GitShelfClient

        async def main():
            async with GitShelfClient.from_env() as client:
                user, repo = await client.login()
                posts = await client.repository.discover_content_directories()

        asyncio.run(main())
        ```
    """

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_MAX_CONCURRENCY = 8

    def __init__(
        self,
        service: str,
        token: str,
        owner: str,
        repo: str,
        instance_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        on_auth_invalid: AuthInvalidCallback | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            service: "github", "gitea" or "gogs"
            token: Personal access token
            owner: Repository owner
            repo: Repository name
            instance_url: Web root of a Gitea/Gogs instance, or an API root
                overriding api.github.com
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Retry behavior for reads (default: no retries)
            max_concurrency: Maximum number of requests in flight (default: 8)
            on_auth_invalid: Called whenever the backend rejects the token
            http_transport: httpx transport override (used by tests)

        Raises:
            ConfigurationError: On an unknown service or a missing instance URL
        """
        try:
            dialect = get_dialect(service)
        except ValueError as e:
            raise ConfigurationError(str(e)) from None

        if not token:
            raise ConfigurationError("An access token is required")

        if dialect is not GITHUB and not (instance_url and instance_url.startswith("http")):
            raise ConfigurationError(
                f"{dialect.name} requires an instance URL starting with http(s)://"
            )

        self.service = dialect.name
        self.owner = owner
        self.repo = repo
        self.instance_url = instance_url

        base_url = instance_url if dialect is GITHUB and instance_url else dialect.api_base(instance_url)
        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token,
            dialect=dialect,
            timeout=timeout,
            retry_config=retry_config,
            max_concurrency=max_concurrency,
            on_auth_invalid=on_auth_invalid,
            transport=http_transport,
        )

        self.repository: RestContentRepository
        if dialect is GITHUB:
            self.repository = GitHubRepository(token, owner, repo, transport=self._transport)
        else:
            self.repository = GiteaRepository(
                token, owner, repo, instance_url or "", dialect=dialect, transport=self._transport
            )

    @classmethod
    def from_repo_url(
        cls,
        service: str,
        token: str,
        repo_url: str,
        instance_url: str | None = None,
        **kwargs: Any,
    ) -> "GitShelfClient":
        """
        Create a client from a repository web URL.

        Raises:
            ConfigurationError: If the URL has no owner/repo path
        """
        parts = parse_repo_url(repo_url)
        if parts is None:
            raise ConfigurationError(f"Invalid repository URL: {repo_url}")
        owner, repo = parts
        return cls(service, token, owner, repo, instance_url=instance_url, **kwargs)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        on_auth_invalid: AuthInvalidCallback | None = None,
    ) -> "GitShelfClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITSHELF_TOKEN: Personal access token (required)
            GITSHELF_REPO_URL: Repository web URL (required)
            GITSHELF_SERVICE: "github", "gitea" or "gogs" (optional, default: github)
            GITSHELF_INSTANCE_URL: Gitea/Gogs web root (required for gitea and gogs)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        token = os.environ.get("GITSHELF_TOKEN")
        repo_url = os.environ.get("GITSHELF_REPO_URL")
        service = os.environ.get("GITSHELF_SERVICE", "github").lower()
        instance_url = os.environ.get("GITSHELF_INSTANCE_URL") or None

        if not token:
            raise ConfigurationError("GITSHELF_TOKEN environment variable not set")

        if not repo_url:
            raise ConfigurationError("GITSHELF_REPO_URL environment variable not set")

        return cls.from_repo_url(
            service,
            token,
            repo_url,
            instance_url=instance_url,
            timeout=timeout,
            retry_config=retry_config,
            on_auth_invalid=on_auth_invalid,
        )

    @property
    def transport(self) -> AsyncHTTPTransport:
        """The shared HTTP transport, for requests the repository API does not cover."""
        return self._transport

    async def verify_token(self) -> UserInfo:
        """Identity behind the token (``GET /user``)."""
        data = await self._transport.request("GET", "/user")
        return UserInfo.from_api(data)

    async def login(self) -> tuple[UserInfo, RepositoryMetadata]:
        """
        Verify the token and check it may write to the repository.

        Raises:
            AuthenticationError: If the token is rejected
            AuthorizationError: If the token cannot push to the repository
        """
        user = await self.verify_token()
        metadata = await self.repository.get_repository_metadata()
        if not metadata.can_write:
            raise AuthorizationError(
                "NO_WRITE_PERMISSION",
                f"{user.login} does not have write permissions for {metadata.full_name}",
            )
        logger.info("Signed in to %s as %s", metadata.full_name, user.login)
        return user, metadata

    async def close(self) -> None:
        """Release the underlying httpx client."""
        await self._transport.close()

    async def __aenter__(self) -> "GitShelfClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
