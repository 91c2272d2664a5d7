"""Services"""

from repo_uploader.services.archive_reader import detect_format, extract, read_archive
from repo_uploader.services.git_publisher import publish
from repo_uploader.services.github_client import GitHubClient
from repo_uploader.services.push import push_upload
from repo_uploader.services.uploads import (
    UploadNotFoundError,
    create_upload,
    list_uploads,
    load_upload_entries,
)

__all__ = [
    "GitHubClient",
    "UploadNotFoundError",
    "create_upload",
    "detect_format",
    "extract",
    "list_uploads",
    "load_upload_entries",
    "publish",
    "push_upload",
    "read_archive",
]
