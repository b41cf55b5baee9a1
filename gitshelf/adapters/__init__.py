"""gitshelf backend adapters."""

from gitshelf.adapters.base import RestContentRepository, guess_mime_type
from gitshelf.adapters.gitea import GiteaRepository
from gitshelf.adapters.github import GitHubRepository

__all__ = [
    "RestContentRepository",
    "GitHubRepository",
    "GiteaRepository",
    "guess_mime_type",
]
