"""Publish archive entries to a GitHub branch as a single commit.

The sequence is: resolve the branch head (if any), upload one blob per file,
create a tree on top of the head's tree, create a commit, then move or create
the branch ref. Only the initial branch lookup may fail without aborting.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime

from repo_uploader.config import is_lenient_branch_lookup
from repo_uploader.models.archive import ArchiveEntry
from repo_uploader.models.publish import (
    BaseState,
    BranchBase,
    NoFilesError,
    PublishResult,
    RemoteError,
    RemoteTreeEntry,
)
from repo_uploader.services.github_client import GitHubClient

logger = logging.getLogger(__name__)

__all__ = [
    "default_commit_message",
    "publish",
    "publishable_entries",
    "repository_path",
    "resolve_branch_base",
]

_CONTAINER_DIR = re.compile(r"^[^/]+/")


def repository_path(archive_path: str) -> str:
    """Drop the archive's top-level folder: ``project-main/src/a.js`` -> ``src/a.js``.

    Paths without a slash are returned unchanged.
    """
    return _CONTAINER_DIR.sub("", archive_path, count=1)


def publishable_entries(entries: Iterable[ArchiveEntry]) -> list[ArchiveEntry]:
    """Keep files that carry content (empty files are skipped)."""
    return [entry for entry in entries if not entry.is_directory and entry.content]


def default_commit_message() -> str:
    return f"Upload files from {datetime.now(UTC).isoformat()}"


async def resolve_branch_base(client: GitHubClient, repo: str, branch: str) -> BranchBase:
    """Find the commit and tree the new commit builds on.

    A new branch (404) or an empty repository (409 "Git Repository is empty.")
    has no base. Other failures propagate unless lenient lookup is enabled.
    """
    try:
        commit_sha = await client.get_ref(repo, branch)
        tree_sha = await client.get_commit_tree(repo, commit_sha)
    except RemoteError as exc:
        if exc.is_missing_branch or is_lenient_branch_lookup():
            logger.warning(
                "Branch %s not resolvable on %s (%s); creating it", branch, repo, exc.message
            )
            return BranchBase.none()
        raise
    return BranchBase.existing(commit_sha, tree_sha)


async def _upload_blob(client: GitHubClient, repo: str, entry: ArchiveEntry) -> RemoteTreeEntry:
    blob_sha = await client.create_blob(repo, entry.content or "")
    return RemoteTreeEntry(path=repository_path(entry.path), sha=blob_sha)


async def publish(
    client: GitHubClient,
    repo: str,
    branch: str,
    entries: Iterable[ArchiveEntry],
    commit_message: str | None = None,
) -> PublishResult:
    """Commit the content-bearing ``entries`` to ``branch`` of ``repo``.

    Args:
        client: Authenticated GitHub client.
        repo: Repository full name, ``owner/name``.
        branch: Target branch; created when it does not exist.
        entries: Archive entries, fresh from a parse or loaded from storage.
        commit_message: Commit message; a timestamped default when empty.

    Returns:
        PublishResult for the new commit.

    Raises:
        NoFilesError: If no entry has content. Raised before any remote call.
        RemoteError: If any remote call after the branch lookup fails.
    """
    files = publishable_entries(entries)
    if not files:
        raise NoFilesError("No files to push")

    base = await resolve_branch_base(client, repo, branch)

    # gather() raises the first failure, so no tree is built from a partial blob set.
    tree_entries = await asyncio.gather(*(_upload_blob(client, repo, entry) for entry in files))

    if base.state is BaseState.HAS_BASE:
        tree_sha = await client.create_tree(repo, tree_entries, base_tree=base.tree_sha)
        parents = [base.commit_sha]
    else:
        tree_sha = await client.create_tree(repo, tree_entries)
        parents = []

    commit_sha = await client.create_commit(
        repo, commit_message or default_commit_message(), tree_sha, parents
    )

    if base.state is BaseState.HAS_BASE:
        await client.update_ref(repo, branch, commit_sha)
    else:
        await client.create_ref(repo, branch, commit_sha)

    logger.info("Published %d files to %s@%s as %s", len(files), repo, branch, commit_sha)
    return PublishResult(commit_sha=commit_sha, file_count=len(files), branch=branch)
