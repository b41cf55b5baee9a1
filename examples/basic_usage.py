#!/usr/bin/env python3
"""
Basic gitshelf usage example.

Runs against the in-process fake backend, so no token or network is
needed. Swap ``backend.client()`` for ``GitShelfClient.from_env()`` to
point it at a real repository.
Run with: python examples/basic_usage.py
"""

import asyncio
import logging

from gitshelf import ConflictError, ProjectConfigStore, configure_logging, suggest_project_config
from gitshelf.dialects import GITEA
from gitshelf.testing import SAMPLE_FILES, FakeGitBackend
from gitshelf.types import EntryKind


async def main() -> None:
    print("=== gitshelf Basic Usage Example ===\n")

    backend = FakeGitBackend(dialect=GITEA)
    for path, content in SAMPLE_FILES.items():
        backend.put_file(path, content)

    async with backend.client() as client:
        repository = client.repository

        # 1. Sign in
        print("1. Signing in...")
        user, metadata = await client.login()
        print(f"   Signed in as {user.login} to {metadata.full_name} ({metadata.default_branch})\n")

        # 2. Suggest a setup from the repository layout
        print("2. Discovering the site layout...")
        suggestion = await suggest_project_config(repository)
        print(f"   Content directories: {suggestion.content_directories}")
        print(f"   Image directories:   {suggestion.image_directories}")
        print(f"   Site URL:            {suggestion.config.domain_url}\n")

        store = ProjectConfigStore(repository)
        await store.save(suggestion.config)
        print("   Saved .gitshelfrc.json\n")

        # 3. Write a post
        print("3. Writing a post...")
        config = suggestion.config
        post_path = f"{config.posts_path}/third.md"
        await repository.create_file(
            post_path, "---\ntitle: Third\n---\n# Third", config.commits.render("new_post", "third.md")
        )
        listing = await repository.list_all_files(config.posts_path)
        print(f"   Posts: {listing.paths} (complete: {listing.complete})\n")

        # 4. Two editors race on the same version
        print("4. Optimistic concurrency...")
        sha = await repository.get_file_sha(post_path)
        await repository.update_file(post_path, "# Third, edited", "edit one", sha)
        try:
            await repository.update_file(post_path, "# Third, edited again", "edit two", sha)
        except ConflictError as e:
            print(f"   Second write rejected: {e}")
        print(f"   Content now: {await repository.read_file(post_path)!r}\n")

        # 5. Tree view
        print("5. Tree view of the repository root...")
        for entry in await repository.get_repo_tree(""):
            marker = "/" if entry.kind is EntryKind.DIR else ""
            print(f"   {entry.name}{marker}")

    print("\n=== Done ===")


if __name__ == "__main__":
    configure_logging(level=logging.WARNING)
    asyncio.run(main())
