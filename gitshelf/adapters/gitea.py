"""Gitea and Gogs (API v1) adapter.

Gogs speaks a subset of the Gitea API, so both use this adapter and
differ only in the dialect they are built with.
"""

from gitshelf.adapters.base import RestContentRepository
from gitshelf.dialects import GITEA, GOGS, BackendDialect
from gitshelf.transport import AsyncHTTPTransport, AuthInvalidCallback, RetryConfig


class GiteaRepository(RestContentRepository):
    """A repository on a self-hosted Gitea or Gogs instance."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        instance_url: str,
        dialect: BackendDialect = GITEA,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        max_concurrency: int = 8,
        on_auth_invalid: AuthInvalidCallback | None = None,
        transport: AsyncHTTPTransport | None = None,
    ) -> None:
        """
        Args:
            token: Personal access token
            owner: Repository owner
            repo: Repository name
            instance_url: Web root of the instance (e.g., "https://git.example.com")
            dialect: GITEA or GOGS
            timeout: Request timeout in seconds
            retry_config: Retry behavior for reads
            max_concurrency: Maximum number of requests in flight
            on_auth_invalid: Called whenever the instance answers 401
            transport: Prebuilt transport; the options above are then ignored
        """
        if transport is None:
            transport = AsyncHTTPTransport(
                base_url=dialect.api_base(instance_url),
                token=token,
                dialect=dialect,
                timeout=timeout,
                retry_config=retry_config,
                max_concurrency=max_concurrency,
                on_auth_invalid=on_auth_invalid,
            )
        super().__init__(transport, owner, repo)

    @classmethod
    def gogs(
        cls, token: str, owner: str, repo: str, instance_url: str, **kwargs
    ) -> "GiteaRepository":
        """Build the adapter for a Gogs instance."""
        return cls(token, owner, repo, instance_url, dialect=GOGS, **kwargs)
