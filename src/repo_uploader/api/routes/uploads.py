"""Upload routes for the API."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from repo_uploader.api.dependencies import get_current_user_id
from repo_uploader.api.schemas.uploads import (
    ArchiveEntrySchema,
    UploadListResponse,
    UploadResponse,
    UploadSummarySchema,
)
from repo_uploader.config import get_max_upload_bytes
from repo_uploader.models.archive import CorruptArchiveError, FormatError
from repo_uploader.services.uploads import create_upload, list_uploads

router = APIRouter(prefix="/uploads", tags=["uploads"])

_CHUNK_SIZE = 64 * 1024


async def _read_limited(file: UploadFile, limit: int) -> bytes:
    buffer = bytearray()
    while True:
        chunk = await file.read(_CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > limit:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large (max {limit // (1024 * 1024)}MB)",
            )
    return bytes(buffer)


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an archive",
    description="Upload a .zip, .tar or .tar.gz archive and store its extracted entries.",
    responses={
        400: {"description": "Unsupported or unreadable archive"},
        401: {"description": "Missing user"},
        413: {"description": "Archive too large"},
    },
)
async def upload_archive(
    file: Annotated[UploadFile, File(description="Archive to extract")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> UploadResponse:
    filename = Path(file.filename or "").name
    if not filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    data = await _read_limited(file, get_max_upload_bytes())

    try:
        summary = create_upload(user_id, filename, data)
    except (FormatError, CorruptArchiveError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return UploadResponse(
        upload_id=summary.upload_id,
        filename=summary.filename,
        file_type=summary.file_type,
        file_size=summary.file_size,
        created_at=summary.created_at,
        files=[ArchiveEntrySchema.model_validate(entry) for entry in summary.entries],
        total_files=summary.total_files,
        total_directories=summary.total_directories,
        warnings=summary.warnings,
    )


@router.get(
    "",
    response_model=UploadListResponse,
    summary="List uploads",
    description="List the current user's uploads, newest first.",
)
def get_uploads(user_id: Annotated[str, Depends(get_current_user_id)]) -> UploadListResponse:
    records = list_uploads(user_id)
    return UploadListResponse(
        uploads=[UploadSummarySchema.model_validate(record) for record in records]
    )
