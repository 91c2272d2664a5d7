"""Upload service: extract an archive and persist its entries for a later push."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from repo_uploader.data.db import get_session
from repo_uploader.data.models import UploadRecord, UploadStatus
from repo_uploader.models.archive import ArchiveEntry
from repo_uploader.services.archive_reader import detect_format, read_archive

logger = logging.getLogger(__name__)

__all__ = [
    "UploadNotFoundError",
    "UploadSummary",
    "create_upload",
    "ensure_upload_owned",
    "link_upload_to_repository",
    "list_uploads",
    "load_upload_entries",
    "set_upload_status",
]


class UploadNotFoundError(LookupError):
    """Raised when an upload does not exist or belongs to another user."""


@dataclass(slots=True)
class UploadSummary:
    """Result of a processed upload."""

    upload_id: int
    filename: str
    file_type: str
    file_size: int
    created_at: datetime
    entries: list[ArchiveEntry]
    warnings: list[str] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return sum(1 for entry in self.entries if not entry.is_directory)

    @property
    def total_directories(self) -> int:
        return sum(1 for entry in self.entries if entry.is_directory)


def create_upload(
    user_id: str, filename: str, data: bytes, inline_threshold: int | None = None
) -> UploadSummary:
    """Extract ``data`` and store the entries as a new upload.

    Args:
        user_id: Owner of the upload.
        filename: Original file name; its extension selects the archive format.
        data: Raw archive bytes.
        inline_threshold: Optional override of the configured inline threshold.

    Returns:
        UploadSummary with the stored entries.

    Raises:
        FormatError: If the extension is not a supported archive type.
        CorruptArchiveError: If the archive cannot be read.
    """
    archive_format = detect_format(filename)
    result = read_archive(data, archive_format, inline_threshold)

    with get_session() as session:
        record = UploadRecord(
            user_id=user_id,
            original_filename=filename,
            file_type=archive_format.file_type,
            file_size=len(data),
            extracted_files=[entry.to_dict() for entry in result.entries],
            status=UploadStatus.EXTRACTED.value,
        )
        session.add(record)
        session.flush()
        summary = UploadSummary(
            upload_id=record.id,
            filename=record.original_filename,
            file_type=record.file_type,
            file_size=len(data),
            created_at=record.created_at,
            entries=result.entries,
            warnings=result.warnings,
        )

    logger.info(
        "Stored upload %d (%s): %d files, %d directories",
        summary.upload_id,
        filename,
        summary.total_files,
        summary.total_directories,
    )
    return summary


def list_uploads(user_id: str) -> list[UploadRecord]:
    """Return the user's uploads, newest first."""
    with get_session() as session:
        return (
            session.query(UploadRecord)
            .filter(UploadRecord.user_id == user_id)
            .order_by(UploadRecord.created_at.desc(), UploadRecord.id.desc())
            .all()
        )


def _get_owned_upload(session: Session, upload_id: int, user_id: str) -> UploadRecord:
    record = (
        session.query(UploadRecord)
        .filter(UploadRecord.id == upload_id, UploadRecord.user_id == user_id)
        .one_or_none()
    )
    if record is None:
        raise UploadNotFoundError(f"Upload {upload_id} not found")
    return record


def load_upload_entries(upload_id: int, user_id: str) -> list[ArchiveEntry]:
    """Re-hydrate the stored entries of one of the user's uploads."""
    with get_session() as session:
        record = _get_owned_upload(session, upload_id, user_id)
        stored = list(record.extracted_files or [])
    return [ArchiveEntry.from_dict(item) for item in stored]


def set_upload_status(upload_id: int, status: UploadStatus) -> None:
    with get_session() as session:
        record = session.get(UploadRecord, upload_id)
        if record is None:
            raise UploadNotFoundError(f"Upload {upload_id} not found")
        record.status = status.value


def link_upload_to_repository(upload_id: int, user_id: str, repository_id: int) -> None:
    with get_session() as session:
        record = _get_owned_upload(session, upload_id, user_id)
        record.repository_id = repository_id


def ensure_upload_owned(upload_id: int, user_id: str) -> None:
    """Raise ``UploadNotFoundError`` unless ``user_id`` owns the upload."""
    with get_session() as session:
        _get_owned_upload(session, upload_id, user_id)
