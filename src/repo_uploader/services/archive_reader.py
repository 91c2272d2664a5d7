"""Archive extraction service.

Turns an uploaded archive (ZIP, TAR or gzip-wrapped TAR) into an ordered list
of ``ArchiveEntry`` values. ZIP containers are read with :mod:`zipfile`; TAR
archives are walked block by block so that a damaged header degrades into a
warning instead of aborting the whole upload.
"""

from __future__ import annotations

import gzip
import io
import logging
import re
import zlib
from zipfile import BadZipFile, ZipFile

from repo_uploader.config import get_inline_threshold
from repo_uploader.constants.archive_constants import (
    PAX_GLOBAL_HEADER_NAME,
    TAR_BLOCK_SIZE,
    TAR_DIRECTORY_TYPEFLAG,
    TAR_NAME_FIELD,
    TAR_SIZE_FIELD,
    TAR_TYPEFLAG_OFFSET,
    UNSUPPORTED_FORMAT_MESSAGE,
)
from repo_uploader.models.archive import (
    ArchiveEntry,
    ArchiveFormat,
    ArchiveReadResult,
    CorruptArchiveError,
    FormatError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "detect_format",
    "extract",
    "read_archive",
    "tar_entry_span",
]

_OCTAL_DIGITS = re.compile(rb"[0-7]+")
_ZERO_BLOCK = bytes(TAR_BLOCK_SIZE)


def detect_format(filename: str) -> ArchiveFormat:
    """Map an uploaded file name to its archive format.

    Args:
        filename: Original file name, e.g. ``project.tar.gz``.

    Returns:
        The matching ArchiveFormat.

    Raises:
        FormatError: If the extension is not ``.zip``, ``.tar``, ``.tar.gz`` or ``.tgz``.
    """
    lowered = filename.lower()
    if lowered.endswith(".zip"):
        return ArchiveFormat.ZIP
    if lowered.endswith(".tar.gz") or lowered.endswith(".tgz"):
        return ArchiveFormat.TAR_GZ
    if lowered.endswith(".tar"):
        return ArchiveFormat.TAR
    raise FormatError(UNSUPPORTED_FORMAT_MESSAGE)


def _coerce_format(archive_format: ArchiveFormat | str) -> ArchiveFormat:
    if isinstance(archive_format, ArchiveFormat):
        return archive_format
    normalized = str(archive_format).strip().lower()
    if normalized == "tgz":
        return ArchiveFormat.TAR_GZ
    try:
        return ArchiveFormat(normalized)
    except ValueError as exc:
        raise FormatError(f"Unsupported archive format: {archive_format!r}") from exc


def tar_entry_span(size: int) -> int:
    """Return how far the cursor moves past a header declaring ``size`` bytes."""
    content_blocks = -(-size // TAR_BLOCK_SIZE)
    return TAR_BLOCK_SIZE + content_blocks * TAR_BLOCK_SIZE


def _decode_name(header: bytes) -> str:
    start, end = TAR_NAME_FIELD
    raw = header[start:end]
    terminator = raw.find(b"\x00")
    if terminator != -1:
        raw = raw[:terminator]
    return raw.decode("latin-1")


def _parse_size(header: bytes, offset: int, warnings: list[str]) -> int:
    start, end = TAR_SIZE_FIELD
    field = header[start:end].strip(b" \t\n\r\x00")
    if not field:
        return 0
    match = _OCTAL_DIGITS.match(field)
    if match is None:
        warnings.append(f"Malformed size field at offset {offset}: {field!r}; treating as 0")
        return 0
    return int(match.group(0), 8)


def _decode_text(data: bytes, path: str, warnings: list[str]) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        warnings.append(f"Could not decode {path} as UTF-8; content left empty")
        return ""


def _walk_tar(data: bytes, threshold: int, warnings: list[str]) -> list[ArchiveEntry]:
    entries: list[ArchiveEntry] = []
    offset = 0
    total = len(data)

    while total - offset >= TAR_BLOCK_SIZE:
        header = data[offset : offset + TAR_BLOCK_SIZE]
        # End-of-archive marker; anything after it is ignored.
        if header == _ZERO_BLOCK:
            break

        name = _decode_name(header)
        size = _parse_size(header, offset, warnings)
        is_directory = (
            header[TAR_TYPEFLAG_OFFSET] == TAR_DIRECTORY_TYPEFLAG or name.endswith("/")
        )

        if name and name != PAX_GLOBAL_HEADER_NAME:
            if is_directory:
                entries.append(ArchiveEntry(path=name, size=0, is_directory=True))
            else:
                content_start = offset + TAR_BLOCK_SIZE
                content_bytes = data[content_start : content_start + size]
                if len(content_bytes) < size:
                    warnings.append(
                        f"{name} declares {size} bytes but only {len(content_bytes)} remain"
                    )
                text = _decode_text(content_bytes, name, warnings)
                entries.append(
                    ArchiveEntry(
                        path=name,
                        size=size,
                        is_directory=False,
                        content=text if size < threshold else None,
                    )
                )

        offset += tar_entry_span(size)

    return entries


def _read_zip(data: bytes, threshold: int) -> list[ArchiveEntry]:
    entries: list[ArchiveEntry] = []
    try:
        with ZipFile(io.BytesIO(data)) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    entries.append(ArchiveEntry(path=info.filename, size=0, is_directory=True))
                    continue
                text = archive.read(info).decode("utf-8", errors="replace")
                entries.append(
                    ArchiveEntry(
                        path=info.filename,
                        size=len(text),
                        is_directory=False,
                        content=text if len(text) < threshold else None,
                    )
                )
    except (BadZipFile, zlib.error, EOFError, NotImplementedError) as exc:
        raise CorruptArchiveError(f"Not a valid ZIP archive: {exc}") from exc
    return entries


def _gunzip(data: bytes) -> bytes:
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise CorruptArchiveError(f"Not a valid gzip stream: {exc}") from exc


def read_archive(
    data: bytes,
    archive_format: ArchiveFormat | str,
    inline_threshold: int | None = None,
) -> ArchiveReadResult:
    """Extract entries from an in-memory archive and collect parse warnings.

    Args:
        data: Raw archive bytes.
        archive_format: Declared format of ``data``.
        inline_threshold: Entries at or above this size omit their content.
            Defaults to the configured threshold.

    Returns:
        ArchiveReadResult with entries in archive order.

    Raises:
        FormatError: If the declared format is not supported.
        CorruptArchiveError: If the ZIP container or gzip stream is unreadable.
    """
    fmt = _coerce_format(archive_format)
    threshold = get_inline_threshold() if inline_threshold is None else inline_threshold
    result = ArchiveReadResult(archive_format=fmt)

    if fmt is ArchiveFormat.ZIP:
        result.entries = _read_zip(data, threshold)
    elif fmt is ArchiveFormat.TAR_GZ:
        result.entries = _walk_tar(_gunzip(data), threshold, result.warnings)
    else:
        result.entries = _walk_tar(data, threshold, result.warnings)

    for warning in result.warnings:
        logger.warning("Archive parse warning: %s", warning)
    logger.debug(
        "Read %s archive: %d files, %d directories",
        fmt.value,
        result.file_count,
        result.directory_count,
    )
    return result


def extract(
    data: bytes,
    archive_format: ArchiveFormat | str,
    inline_threshold: int | None = None,
) -> list[ArchiveEntry]:
    """Extract entries from an in-memory archive.

    Same as :func:`read_archive` without the warnings.
    """
    return read_archive(data, archive_format, inline_threshold).entries
