"""ORM models package for database tables.

- UploadRecord: uploaded archives and their extracted entries
- RepositoryRecord: GitHub repositories created on behalf of users

All models inherit from the shared Base declarative class defined in data.db.
"""

from repo_uploader.data.db import Base
from repo_uploader.data.models.repository_record import RepositoryRecord
from repo_uploader.data.models.upload_record import UploadRecord, UploadStatus

__all__ = ["Base", "RepositoryRecord", "UploadRecord", "UploadStatus"]
