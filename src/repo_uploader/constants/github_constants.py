"""Constants for the GitHub Git Data API."""

from __future__ import annotations

DEFAULT_GITHUB_API_URL = "https://api.github.com"
GITHUB_ACCEPT_HEADER = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0

DEFAULT_BRANCH = "main"

# Tree entries are always regular, non-executable files.
REGULAR_FILE_MODE = "100644"
BLOB_TYPE = "blob"
