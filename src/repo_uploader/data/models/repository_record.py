"""ORM model for GitHub repositories created through the API."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repo_uploader.data.db import Base

if TYPE_CHECKING:
    from repo_uploader.data.models.upload_record import UploadRecord


class RepositoryRecord(Base):
    """A GitHub repository managed on behalf of a user.

    Attributes:
        id: Auto-incrementing primary key.
        user_id: Identifier of the owning user.
        github_repo_id: Numeric GitHub id, stored as text.
        repo_name: Short repository name.
        repo_full_name: ``owner/name``.
        repo_url: Browser URL of the repository.
        description: Repository description.
        is_private: Visibility.
        default_branch: Branch new pushes target by default.
        created_at: UTC timestamp of creation.
    """

    __tablename__ = "repositories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    github_repo_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    repo_name: Mapped[str] = mapped_column(String(255), nullable=False)
    repo_full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    repo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    default_branch: Mapped[str] = mapped_column(String(255), nullable=False, default="main")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    uploads: Mapped[list[UploadRecord]] = relationship("UploadRecord", back_populates="repository")
