"""Pydantic schemas for upload API responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ArchiveEntrySchema(BaseModel):
    """One extracted archive entry. ``content`` is null for directories and large files."""

    model_config = ConfigDict(from_attributes=True)

    path: str
    size: int = Field(ge=0)
    is_directory: bool
    content: str | None = None


class UploadResponse(BaseModel):
    """Response schema for the upload endpoint."""

    upload_id: int
    filename: str
    file_type: str
    file_size: int
    created_at: datetime
    files: list[ArchiveEntrySchema]
    total_files: int
    total_directories: int
    warnings: list[str] = Field(default_factory=list)


class UploadSummarySchema(BaseModel):
    """Stored upload without its entries."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    original_filename: str
    file_type: str
    file_size: int | None
    status: str
    repository_id: int | None
    created_at: datetime


class UploadListResponse(BaseModel):
    uploads: list[UploadSummarySchema]
