"""Repository-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class RepositoryPermissions:
    """What the authenticated token may do in a repository."""

    admin: bool = False
    push: bool = False
    pull: bool = False


@dataclass(frozen=True)
class RepositoryMetadata:
    """Snapshot of a remote repository.

    Fetched once per session and refetched (never mutated) after writes,
    e.g. to notice that ``pushed_at`` moved once a deploy sync finished.
    """

    owner: str
    name: str
    full_name: str
    private: bool
    default_branch: str
    permissions: RepositoryPermissions = field(default_factory=RepositoryPermissions)
    html_url: str | None = None
    description: str | None = None
    pushed_at: datetime | None = None
    star_count: int = 0

    @property
    def can_write(self) -> bool:
        return self.permissions.push

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RepositoryMetadata":
        """Build from a GitHub, Gitea or Gogs ``/repos/{owner}/{repo}`` body."""
        perms = data.get("permissions") or {}
        owner = data.get("owner") or {}
        # GitHub says stargazers_count, Gitea and Gogs say stars_count
        stars = data.get("stargazers_count", data.get("stars_count", 0))
        return cls(
            owner=owner.get("login") or owner.get("username", ""),
            name=data["name"],
            full_name=data.get("full_name") or f"{owner.get('login', '')}/{data['name']}",
            private=bool(data.get("private", False)),
            default_branch=data.get("default_branch") or "master",
            permissions=RepositoryPermissions(
                admin=bool(perms.get("admin", False)),
                push=bool(perms.get("push", False)),
                pull=bool(perms.get("pull", False)),
            ),
            html_url=data.get("html_url"),
            description=data.get("description") or None,
            pushed_at=_parse_timestamp(data.get("pushed_at") or data.get("updated_at")),
            star_count=stars or 0,
        )


@dataclass(frozen=True)
class UserInfo:
    """The identity behind an access token."""

    login: str
    name: str | None
    avatar_url: str | None
    html_url: str | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "UserInfo":
        return cls(
            login=data.get("login") or data.get("username", ""),
            name=data.get("name") or data.get("full_name") or None,
            avatar_url=data.get("avatar_url"),
            html_url=data.get("html_url"),
        )


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
