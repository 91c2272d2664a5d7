"""Data models for publishing archive entries as a Git commit."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from repo_uploader.constants.github_constants import BLOB_TYPE, REGULAR_FILE_MODE


class RemoteError(RuntimeError):
    """Raised when the Git host answers with a non-2xx status or cannot be reached.

    Attributes:
        status_code: HTTP status of the failed call, or None for transport
            failures such as timeouts and for malformed response bodies.
        message: Human-readable reason reported by the remote.
    """

    def __init__(self, status_code: int | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_missing_branch(self) -> bool:
        """404 for an unknown branch, 409 for a repository with no commits yet."""
        return self.status_code in (404, 409)


class NoFilesError(ValueError):
    """Raised when there are no content-bearing entries to publish."""


class BaseState(Enum):
    """Whether the target branch already exists on the remote."""

    NO_BASE = "no_base"
    HAS_BASE = "has_base"


@dataclass(slots=True, frozen=True)
class BranchBase:
    """Resolved starting point for a new commit."""

    state: BaseState
    commit_sha: str | None = None
    tree_sha: str | None = None

    @classmethod
    def none(cls) -> BranchBase:
        return cls(state=BaseState.NO_BASE)

    @classmethod
    def existing(cls, commit_sha: str, tree_sha: str) -> BranchBase:
        return cls(state=BaseState.HAS_BASE, commit_sha=commit_sha, tree_sha=tree_sha)


@dataclass(slots=True, frozen=True)
class RemoteTreeEntry:
    """One blob placed in the new tree."""

    path: str
    sha: str
    mode: str = REGULAR_FILE_MODE
    type: str = BLOB_TYPE

    def to_payload(self) -> dict[str, str]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


@dataclass(slots=True, frozen=True)
class PublishResult:
    """Outcome of a successful publish.

    Attributes:
        commit_sha: Id of the newly created commit.
        file_count: Number of files included in the commit.
        branch: Branch the commit was written to.
    """

    commit_sha: str
    file_count: int
    branch: str
