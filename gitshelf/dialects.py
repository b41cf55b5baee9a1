"""REST dialects of the supported Git hosting backends.

The three backends expose near-identical contents APIs. Everything that
differs between them is captured here as data so a single adapter
implementation can speak all of them.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BackendDialect:
    """Per-backend REST conventions."""

    name: str
    api_prefix: str
    accept: str
    auth_scheme: str = "token"
    create_method: str = "PUT"
    update_method: str = "PUT"
    write_conflict_statuses: frozenset[int] = frozenset({409, 422})
    paginated_tree: bool = False
    tree_page_size: int = 1000
    default_base_url: str | None = None

    def auth_header(self, token: str) -> str:
        """Value of the Authorization header for a personal access token."""
        return f"{self.auth_scheme} {token}"

    def api_base(self, instance_url: str | None = None) -> str:
        """Resolve the API root for a hosted or self-hosted instance."""
        base = instance_url or self.default_base_url
        if not base:
            raise ValueError(f"{self.name} requires an instance URL")
        return base.rstrip("/") + self.api_prefix

    def tree_params(self, page: int = 1) -> dict[str, str | int]:
        """Query parameters for the recursive tree endpoint."""
        if self.paginated_tree:
            return {"recursive": "true", "page": page, "per_page": self.tree_page_size}
        return {"recursive": 1}


GITHUB = BackendDialect(
    name="github",
    api_prefix="",
    accept="application/vnd.github.v3+json",
    default_base_url="https://api.github.com",
)

GITEA = BackendDialect(
    name="gitea",
    api_prefix="/api/v1",
    accept="application/json",
    create_method="POST",
    paginated_tree=True,
)

GOGS = BackendDialect(
    name="gogs",
    api_prefix="/api/v1",
    accept="application/json",
    create_method="POST",
    paginated_tree=True,
)

DIALECTS: dict[str, BackendDialect] = {
    GITHUB.name: GITHUB,
    GITEA.name: GITEA,
    GOGS.name: GOGS,
}


def get_dialect(service: str) -> BackendDialect:
    """Look up a dialect by service name ("github", "gitea" or "gogs")."""
    try:
        return DIALECTS[service.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown service: {service}. Must be one of {', '.join(DIALECTS)}"
        ) from None


__all__ = [
    "BackendDialect",
    "GITHUB",
    "GITEA",
    "GOGS",
    "DIALECTS",
    "get_dialect",
]
