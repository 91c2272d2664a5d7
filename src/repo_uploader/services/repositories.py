"""Repository service: create, list and inspect GitHub repositories."""

from __future__ import annotations

import logging
from typing import Any

from repo_uploader.data.db import get_session
from repo_uploader.data.models import RepositoryRecord
from repo_uploader.services.github_client import GitHubClient
from repo_uploader.services.uploads import ensure_upload_owned, link_upload_to_repository

logger = logging.getLogger(__name__)

__all__ = ["create_repository", "list_managed_repositories", "list_repositories", "pull_repository"]


async def create_repository(
    client: GitHubClient,
    user_id: str,
    name: str,
    description: str = "",
    private: bool = False,
    upload_id: int | None = None,
) -> tuple[RepositoryRecord, dict[str, Any]]:
    """Create an empty GitHub repository and record it for the user.

    Args:
        client: Authenticated GitHub client.
        user_id: Owner of the new record.
        name: Repository name.
        description: Optional description.
        private: Whether the repository is private.
        upload_id: Upload to link to the new repository, if any.

    Returns:
        Tuple of the persisted record and the raw GitHub repository payload.

    Raises:
        UploadNotFoundError: If ``upload_id`` is given and not owned by
            ``user_id``. Nothing is created remotely in that case.
        RemoteError: If GitHub rejects the creation.
    """
    if upload_id is not None:
        ensure_upload_owned(upload_id, user_id)

    repo_data = await client.create_repository(name, description, private)

    with get_session() as session:
        record = RepositoryRecord(
            user_id=user_id,
            github_repo_id=str(repo_data["id"]),
            repo_name=repo_data["name"],
            repo_full_name=repo_data.get("full_name"),
            repo_url=repo_data.get("html_url"),
            description=repo_data.get("description"),
            is_private=bool(repo_data.get("private", False)),
            default_branch=repo_data.get("default_branch") or "main",
        )
        session.add(record)
        session.flush()

    if upload_id is not None:
        link_upload_to_repository(upload_id, user_id, record.id)

    logger.info("Created repository %s for user %s", record.repo_full_name, user_id)
    return record, repo_data


def list_managed_repositories(user_id: str) -> list[RepositoryRecord]:
    with get_session() as session:
        return (
            session.query(RepositoryRecord)
            .filter(RepositoryRecord.user_id == user_id)
            .order_by(RepositoryRecord.id)
            .all()
        )


async def list_repositories(
    client: GitHubClient, user_id: str
) -> tuple[list[dict[str, Any]], list[RepositoryRecord]]:
    """Return the user's GitHub repositories and the ones managed here."""
    remote = await client.list_user_repos()
    return remote, list_managed_repositories(user_id)


async def pull_repository(client: GitHubClient, repo: str, branch: str) -> dict[str, Any]:
    """List every path on ``branch`` with its head commit.

    Returns:
        Dict with ``branch``, ``commit_sha``, ``files`` (path, type, size, sha)
        and ``total_files`` (blob count).
    """
    commit_sha = await client.get_ref(repo, branch)
    tree_sha = await client.get_commit_tree(repo, commit_sha)
    tree = await client.get_tree(repo, tree_sha, recursive=True)

    files = [
        {
            "path": item["path"],
            "type": item["type"],
            "size": item.get("size") or 0,
            "sha": item["sha"],
        }
        for item in tree.get("tree", [])
    ]
    return {
        "branch": branch,
        "commit_sha": commit_sha,
        "files": files,
        "total_files": sum(1 for item in files if item["type"] == "blob"),
    }
