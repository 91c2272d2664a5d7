"""Data models and type definitions"""

from repo_uploader.models.archive import (
    ArchiveEntry,
    ArchiveFormat,
    ArchiveReadResult,
    CorruptArchiveError,
    FormatError,
)
from repo_uploader.models.publish import (
    BaseState,
    BranchBase,
    NoFilesError,
    PublishResult,
    RemoteError,
    RemoteTreeEntry,
)

__all__ = [
    "ArchiveEntry",
    "ArchiveFormat",
    "ArchiveReadResult",
    "BaseState",
    "BranchBase",
    "CorruptArchiveError",
    "FormatError",
    "NoFilesError",
    "PublishResult",
    "RemoteError",
    "RemoteTreeEntry",
]
