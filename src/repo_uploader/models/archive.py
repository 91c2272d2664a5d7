"""Data models for archive extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class FormatError(ValueError):
    """Raised when an archive type is not one of the supported formats."""


class CorruptArchiveError(ValueError):
    """Raised when the archive bytes cannot be parsed as the declared format."""


class ArchiveFormat(StrEnum):
    """Archive formats the reader understands."""

    ZIP = "zip"
    TAR = "tar"
    TAR_GZ = "tar.gz"

    @property
    def file_type(self) -> str:
        """Coarse type stored on upload records (gzip-wrapped tar is still ``tar``)."""
        return "zip" if self is ArchiveFormat.ZIP else "tar"


@dataclass(slots=True, frozen=True)
class ArchiveEntry:
    """A single file or directory found in an uploaded archive.

    Attributes:
        path: Slash-separated path exactly as stored in the archive.
        size: Byte count for TAR files, decoded length in Unicode code points
            for ZIP files (an emoji counts once, not as a UTF-16 pair), ``0``
            for directories.
        is_directory: Whether the entry is a directory.
        content: Decoded text, or None when the entry is a directory or too
            large to inline. An empty file has ``content == ""``.
    """

    path: str
    size: int
    is_directory: bool
    content: str | None = None

    def __post_init__(self) -> None:
        if self.is_directory and self.content is not None:
            raise ValueError(f"Directory entry {self.path!r} cannot carry content")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for persistence; ``content`` is left out rather than nulled."""
        data: dict[str, Any] = {
            "path": self.path,
            "size": self.size,
            "isDirectory": self.is_directory,
        }
        if self.content is not None:
            data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ArchiveEntry:
        """Rebuild an entry from its persisted form."""
        is_directory = bool(data.get("isDirectory", False))
        content = data.get("content")
        return cls(
            path=str(data["path"]),
            size=int(data.get("size") or 0),
            is_directory=is_directory,
            content=None if is_directory or content is None else str(content),
        )


@dataclass(slots=True)
class ArchiveReadResult:
    """Entries extracted from an archive plus non-fatal parse diagnostics."""

    archive_format: ArchiveFormat
    entries: list[ArchiveEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return sum(1 for entry in self.entries if not entry.is_directory)

    @property
    def directory_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_directory)
