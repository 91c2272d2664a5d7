"""ORM model for uploaded archives and their extracted entries.

The extracted entries are stored verbatim as a JSON list so that a later push
can re-hydrate them without the original archive.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repo_uploader.data.db import Base

if TYPE_CHECKING:
    from repo_uploader.data.models.repository_record import RepositoryRecord


class UploadStatus(StrEnum):
    PENDING = "pending"
    EXTRACTED = "extracted"
    PUSHED = "pushed"
    FAILED = "failed"


class UploadRecord(Base):
    """Persisted upload and its extracted archive entries.

    Attributes:
        id: Auto-incrementing primary key.
        user_id: Identifier of the uploading user (owned by the auth layer).
        repository_id: Managed repository this upload was linked to, if any.
        original_filename: Name of the uploaded archive.
        file_type: ``zip`` or ``tar``.
        file_size: Size of the uploaded archive in bytes.
        extracted_files: Serialized ArchiveEntry list, in archive order.
        status: Lifecycle status, see UploadStatus.
        created_at: UTC timestamp of the upload.
    """

    __tablename__ = "uploads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    repository_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("repositories.id", ondelete="SET NULL"), nullable=True
    )
    original_filename: Mapped[str] = mapped_column(String, nullable=False)
    file_type: Mapped[str] = mapped_column(String(16), nullable=False)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    extracted_files: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=UploadStatus.PENDING.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    repository: Mapped[RepositoryRecord | None] = relationship(
        "RepositoryRecord", back_populates="uploads"
    )
