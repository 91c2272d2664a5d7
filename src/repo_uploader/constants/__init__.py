from __future__ import annotations

from repo_uploader.constants.archive_constants import (
    DEFAULT_INLINE_CONTENT_THRESHOLD,
    DEFAULT_MAX_UPLOAD_BYTES,
    TAR_BLOCK_SIZE,
)
from repo_uploader.constants.github_constants import (
    DEFAULT_BRANCH,
    DEFAULT_GITHUB_API_URL,
    REGULAR_FILE_MODE,
)

__all__ = [
    "DEFAULT_BRANCH",
    "DEFAULT_GITHUB_API_URL",
    "DEFAULT_INLINE_CONTENT_THRESHOLD",
    "DEFAULT_MAX_UPLOAD_BYTES",
    "REGULAR_FILE_MODE",
    "TAR_BLOCK_SIZE",
]
