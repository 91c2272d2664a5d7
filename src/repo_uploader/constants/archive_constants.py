"""Constants for archive extraction."""

from __future__ import annotations

# TAR layout (POSIX ustar)
TAR_BLOCK_SIZE = 512
TAR_NAME_FIELD = (0, 100)
TAR_SIZE_FIELD = (124, 136)
TAR_TYPEFLAG_OFFSET = 156
TAR_DIRECTORY_TYPEFLAG = ord("5")
PAX_GLOBAL_HEADER_NAME = "pax_global_header"

# Entries whose decoded text is at least this long keep their size but drop content.
DEFAULT_INLINE_CONTENT_THRESHOLD = 100_000

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024

UNSUPPORTED_FORMAT_MESSAGE = "Unsupported file type. Use .zip, .tar, or .tar.gz"
