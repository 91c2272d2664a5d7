"""Push a stored upload to GitHub as one commit."""

from __future__ import annotations

import logging

from repo_uploader.data.models import UploadStatus
from repo_uploader.models.publish import PublishResult, RemoteError
from repo_uploader.services.git_publisher import publish
from repo_uploader.services.github_client import GitHubClient
from repo_uploader.services.uploads import load_upload_entries, set_upload_status

logger = logging.getLogger(__name__)


async def push_upload(
    client: GitHubClient,
    user_id: str,
    upload_id: int,
    repo_full_name: str,
    branch: str,
    commit_message: str | None = None,
) -> PublishResult:
    """Load the upload's entries and commit them to ``repo_full_name``.

    The upload is marked ``pushed`` on success and ``failed`` when the remote
    rejects the publish. An upload with nothing to push keeps its status.

    Raises:
        UploadNotFoundError: If the upload does not belong to ``user_id``.
        NoFilesError: If the upload has no content-bearing files.
        RemoteError: If a GitHub call fails.
    """
    entries = load_upload_entries(upload_id, user_id)
    try:
        result = await publish(client, repo_full_name, branch, entries, commit_message)
    except RemoteError:
        logger.exception("Push of upload %d to %s failed", upload_id, repo_full_name)
        set_upload_status(upload_id, UploadStatus.FAILED)
        raise

    set_upload_status(upload_id, UploadStatus.PUSHED)
    return result
