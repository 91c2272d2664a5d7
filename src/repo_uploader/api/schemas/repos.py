"""Pydantic schemas for repository API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from repo_uploader.constants.github_constants import DEFAULT_BRANCH


class RepositoryCreateRequest(BaseModel):
    """Fields accepted when creating a repository."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    is_private: bool = False
    upload_id: int | None = None


class ManagedRepository(BaseModel):
    """Repository created through this API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    github_repo_id: str | None
    repo_name: str
    repo_full_name: str | None
    repo_url: str | None
    description: str | None
    is_private: bool
    default_branch: str
    created_at: datetime


class GitHubRepositorySummary(BaseModel):
    id: int
    name: str
    full_name: str
    html_url: str | None = None
    clone_url: str | None = None


class RepositoryCreateResponse(BaseModel):
    repository: ManagedRepository
    github_repo: GitHubRepositorySummary


class RepositoryListResponse(BaseModel):
    repositories: list[dict[str, Any]]
    managed_repos: list[ManagedRepository]


class PushRequest(BaseModel):
    """Push a stored upload to a repository branch."""

    model_config = ConfigDict(extra="forbid")

    repo_full_name: str = Field(min_length=1)
    upload_id: int
    commit_message: str | None = None
    branch: str = Field(default=DEFAULT_BRANCH, min_length=1)


class PushResponse(BaseModel):
    success: bool = True
    commit_sha: str
    files_count: int
    branch: str


class RemoteFile(BaseModel):
    path: str
    type: str
    size: int
    sha: str


class PullResponse(BaseModel):
    branch: str
    commit_sha: str
    files: list[RemoteFile]
    total_files: int
