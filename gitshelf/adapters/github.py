"""GitHub (REST v3) adapter."""

from gitshelf.adapters.base import RestContentRepository
from gitshelf.dialects import GITHUB
from gitshelf.transport import AsyncHTTPTransport, AuthInvalidCallback, RetryConfig


class GitHubRepository(RestContentRepository):
    """
    A repository on github.com or GitHub Enterprise.

    Example:
        ```python
        async with GitHubRepository(token, "octocat", "blog") as repo:
            text = await repo.read_file("src/content/posts/hello.md")
        ```
    """

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        base_url: str | None = None,
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
            base_url: API root for GitHub Enterprise (default: https://api.github.com)
            timeout: Request timeout in seconds
            retry_config: Retry behavior for reads
            max_concurrency: Maximum number of requests in flight
            on_auth_invalid: Called whenever GitHub answers 401
            transport: Prebuilt transport; the options above are then ignored
        """
        if transport is None:
            transport = AsyncHTTPTransport(
                base_url=base_url or GITHUB.api_base(),
                token=token,
                dialect=GITHUB,
                timeout=timeout,
                retry_config=retry_config,
                max_concurrency=max_concurrency,
                on_auth_invalid=on_auth_invalid,
            )
        super().__init__(transport, owner, repo)
