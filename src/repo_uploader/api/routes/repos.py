"""Repository routes: create, list, push to and pull from GitHub repositories."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from repo_uploader.api.dependencies import get_current_user_id, get_github_client
from repo_uploader.api.schemas.repos import (
    GitHubRepositorySummary,
    ManagedRepository,
    PullResponse,
    PushRequest,
    PushResponse,
    RepositoryCreateRequest,
    RepositoryCreateResponse,
    RepositoryListResponse,
)
from repo_uploader.constants.github_constants import DEFAULT_BRANCH
from repo_uploader.models.publish import NoFilesError, RemoteError
from repo_uploader.services.github_client import GitHubClient
from repo_uploader.services.push import push_upload
from repo_uploader.services.repositories import (
    create_repository,
    list_repositories,
    pull_repository,
)
from repo_uploader.services.uploads import UploadNotFoundError

router = APIRouter(prefix="/repos", tags=["repos"])


def _remote_failure(exc: RemoteError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)


@router.get(
    "",
    response_model=RepositoryListResponse,
    summary="List repositories",
    description="List the user's GitHub repositories and the ones created here.",
)
async def get_repositories(
    user_id: Annotated[str, Depends(get_current_user_id)],
    client: Annotated[GitHubClient, Depends(get_github_client)],
) -> RepositoryListResponse:
    try:
        remote, managed = await list_repositories(client, user_id)
    except RemoteError as exc:
        raise _remote_failure(exc) from exc
    return RepositoryListResponse(
        repositories=remote,
        managed_repos=[ManagedRepository.model_validate(record) for record in managed],
    )


@router.post(
    "",
    response_model=RepositoryCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a repository",
    responses={502: {"description": "GitHub rejected the request"}},
)
async def post_repository(
    payload: RepositoryCreateRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    client: Annotated[GitHubClient, Depends(get_github_client)],
) -> RepositoryCreateResponse:
    try:
        record, repo_data = await create_repository(
            client,
            user_id,
            payload.name,
            description=payload.description or "",
            private=payload.is_private,
            upload_id=payload.upload_id,
        )
    except RemoteError as exc:
        raise _remote_failure(exc) from exc
    except UploadNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return RepositoryCreateResponse(
        repository=ManagedRepository.model_validate(record),
        github_repo=GitHubRepositorySummary.model_validate(repo_data),
    )


@router.post(
    "/push",
    response_model=PushResponse,
    summary="Push an upload",
    description="Commit the files of a stored upload to a repository branch.",
    responses={
        400: {"description": "Upload has no files to push"},
        404: {"description": "Upload not found"},
        502: {"description": "GitHub rejected the push"},
    },
)
async def push(
    payload: PushRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    client: Annotated[GitHubClient, Depends(get_github_client)],
) -> PushResponse:
    try:
        result = await push_upload(
            client,
            user_id,
            payload.upload_id,
            payload.repo_full_name,
            payload.branch,
            payload.commit_message,
        )
    except UploadNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except NoFilesError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RemoteError as exc:
        raise _remote_failure(exc) from exc

    return PushResponse(
        commit_sha=result.commit_sha,
        files_count=result.file_count,
        branch=result.branch,
    )


@router.get(
    "/pull",
    response_model=PullResponse,
    summary="List a branch's files",
    responses={502: {"description": "GitHub rejected the request"}},
)
async def pull(
    repo: Annotated[str, Query(min_length=1, description="Repository full name")],
    client: Annotated[GitHubClient, Depends(get_github_client)],
    branch: Annotated[str, Query(min_length=1)] = DEFAULT_BRANCH,
) -> PullResponse:
    try:
        data = await pull_repository(client, repo, branch)
    except RemoteError as exc:
        raise _remote_failure(exc) from exc
    return PullResponse.model_validate(data)
