"""Runtime configuration read from environment variables.

Every setting has a getter so tests can override it with ``monkeypatch.setenv``
without reloading modules. Invalid numeric values fall back to the defaults.
"""

from __future__ import annotations

import os

from repo_uploader.constants.archive_constants import (
    DEFAULT_INLINE_CONTENT_THRESHOLD,
    DEFAULT_MAX_UPLOAD_BYTES,
)
from repo_uploader.constants.github_constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)

_TRUTHY = {"1", "true", "yes", "on"}


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_inline_threshold() -> int:
    """Return the size below which decoded text is attached to an entry."""
    return _int_from_env("REPO_UPLOADER_INLINE_THRESHOLD", DEFAULT_INLINE_CONTENT_THRESHOLD)


def get_max_upload_bytes() -> int:
    """Return the largest archive the HTTP layer accepts."""
    return _int_from_env("REPO_UPLOADER_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)


def get_github_api_url() -> str:
    """Return the GitHub REST base URL without a trailing slash."""
    return (os.getenv("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL).rstrip("/")


def get_request_timeout() -> float:
    """Return the per-call timeout in seconds for GitHub requests."""
    raw = os.getenv("REPO_UPLOADER_GITHUB_TIMEOUT")
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_REQUEST_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_REQUEST_TIMEOUT_SECONDS


def is_lenient_branch_lookup() -> bool:
    """Return True when any branch lookup failure should count as "no base"."""
    return os.getenv("REPO_UPLOADER_LENIENT_BRANCH_LOOKUP", "").strip().lower() in _TRUTHY
