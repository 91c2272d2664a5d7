from __future__ import annotations

import io
from zipfile import ZipFile

import pytest

from repo_uploader.data.db import get_session
from repo_uploader.data.models import UploadRecord, UploadStatus
from repo_uploader.models.archive import FormatError
from repo_uploader.services.uploads import (
    UploadNotFoundError,
    create_upload,
    list_uploads,
    load_upload_entries,
    set_upload_status,
)


def _zip_bytes(entries: list[tuple[str, bytes]]) -> bytes:
    buffer = io.BytesIO()
    with ZipFile(buffer, "w") as archive:
        for name, data in entries:
            archive.writestr(name, data)
    return buffer.getvalue()


def test_create_upload_persists_entries(api_db: None) -> None:
    data = _zip_bytes([("proj/", b""), ("proj/a.txt", b"alpha"), ("proj/empty.txt", b"")])

    summary = create_upload("user-1", "proj.zip", data)

    assert summary.file_type == "zip"
    assert summary.file_size == len(data)
    assert summary.total_files == 2
    assert summary.total_directories == 1
    with get_session() as session:
        record = session.get(UploadRecord, summary.upload_id)
        assert record is not None
        assert record.status == UploadStatus.EXTRACTED.value
        assert record.extracted_files[0] == {"path": "proj/", "size": 0, "isDirectory": True}


def test_entries_reload_with_omitted_and_empty_content(api_db: None) -> None:
    data = _zip_bytes([("proj/big.txt", b"x" * 20), ("proj/empty.txt", b"")])
    summary = create_upload("user-1", "proj.zip", data, inline_threshold=10)

    entries = load_upload_entries(summary.upload_id, "user-1")

    assert entries == summary.entries
    assert entries[0].content is None
    assert entries[0].size == 20
    assert entries[1].content == ""


def test_load_entries_of_other_user_is_not_found(api_db: None) -> None:
    summary = create_upload("owner", "proj.zip", _zip_bytes([("proj/a.txt", b"a")]))

    with pytest.raises(UploadNotFoundError):
        load_upload_entries(summary.upload_id, "intruder")


def test_unsupported_extension_is_not_persisted(api_db: None) -> None:
    with pytest.raises(FormatError):
        create_upload("user-1", "proj.rar", b"whatever")

    assert list_uploads("user-1") == []


def test_list_uploads_newest_first_and_status_updates(api_db: None) -> None:
    first = create_upload("user-1", "one.zip", _zip_bytes([("p/a.txt", b"a")]))
    second = create_upload("user-1", "two.zip", _zip_bytes([("p/b.txt", b"b")]))
    create_upload("user-2", "other.zip", _zip_bytes([("p/c.txt", b"c")]))

    set_upload_status(first.upload_id, UploadStatus.PUSHED)
    records = list_uploads("user-1")

    assert [record.id for record in records] == [second.upload_id, first.upload_id]
    assert records[1].status == "pushed"
