from __future__ import annotations

import base64
from collections.abc import Callable

import pytest

from conftest import FakeGitHub
from repo_uploader.models.archive import ArchiveEntry
from repo_uploader.models.publish import NoFilesError, PublishResult, RemoteError
from repo_uploader.services.git_publisher import (
    publish,
    publishable_entries,
    repository_path,
)
from repo_uploader.services.github_client import GitHubClient

REPO = "octo/demo"

ClientFactory = Callable[[FakeGitHub], GitHubClient]


def _file(path: str, content: str) -> ArchiveEntry:
    return ArchiveEntry(path=path, size=len(content), is_directory=False, content=content)


def _entries() -> list[ArchiveEntry]:
    return [
        ArchiveEntry(path="project-main/", size=0, is_directory=True),
        _file("project-main/src/index.js", "console.log('hi');\n"),
        _file("project-main/README.md", "# Demo\n"),
    ]


@pytest.mark.parametrize(
    ("archive_path", "expected"),
    [
        ("project-main/src/index.js", "src/index.js"),
        ("project-main/README.md", "README.md"),
        ("a/b/c/d.txt", "b/c/d.txt"),
        ("toplevel.txt", "toplevel.txt"),
    ],
)
def test_repository_path_strips_first_segment(archive_path: str, expected: str) -> None:
    assert repository_path(archive_path) == expected


def test_publishable_entries_skips_directories_and_missing_content() -> None:
    entries = [
        ArchiveEntry(path="p/", size=0, is_directory=True),
        ArchiveEntry(path="p/huge.bin", size=200_000, is_directory=False),
        ArchiveEntry(path="p/empty.txt", size=0, is_directory=False, content=""),
        _file("p/ok.txt", "ok"),
    ]

    assert [entry.path for entry in publishable_entries(entries)] == ["p/ok.txt"]


@pytest.mark.asyncio
async def test_publish_to_missing_branch_creates_ref_with_root_commit(
    fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    async with make_client(fake_github) as client:
        result = await publish(client, REPO, "main", _entries(), "Initial import")

    assert result == PublishResult(commit_sha="commit-new", file_count=2, branch="main")

    (tree_body,) = fake_github.calls("POST", "/git/trees")
    assert "base_tree" not in tree_body
    assert tree_body["tree"] == [
        {
            "path": "src/index.js",
            "mode": "100644",
            "type": "blob",
            "sha": "blob:console.log('hi');\n",
        },
        {"path": "README.md", "mode": "100644", "type": "blob", "sha": "blob:# Demo\n"},
    ]

    (commit_body,) = fake_github.calls("POST", "/git/commits")
    assert commit_body == {"message": "Initial import", "tree": "tree-new", "parents": []}

    assert fake_github.calls("POST", "/git/refs") == [
        {"ref": "refs/heads/main", "sha": "commit-new"}
    ]
    assert fake_github.calls("PATCH", "/git/refs/heads/main") == []


@pytest.mark.asyncio
async def test_publish_to_existing_branch_builds_on_head(make_client: ClientFactory) -> None:
    fake = FakeGitHub(head="C0", base_tree="T0")

    async with make_client(fake) as client:
        result = await publish(client, REPO, "develop", _entries(), "Update")

    assert result.branch == "develop"
    (tree_body,) = fake.calls("POST", "/git/trees")
    assert tree_body["base_tree"] == "T0"
    (commit_body,) = fake.calls("POST", "/git/commits")
    assert commit_body["parents"] == ["C0"]
    assert fake.calls("PATCH", "/git/refs/heads/develop") == [{"sha": "commit-new"}]
    assert fake.calls("POST", "/git/refs") == []
    assert fake.calls("GET", "/git/commits/C0") == [None]


@pytest.mark.asyncio
async def test_publish_without_files_makes_no_remote_calls(
    fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    entries = [
        ArchiveEntry(path="p/", size=0, is_directory=True),
        ArchiveEntry(path="p/big.txt", size=500_000, is_directory=False),
    ]

    async with make_client(fake_github) as client:
        with pytest.raises(NoFilesError):
            await publish(client, REPO, "main", entries)

    assert fake_github.requests == []


@pytest.mark.asyncio
async def test_publish_uploads_base64_utf8_blobs(
    fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    async with make_client(fake_github) as client:
        await publish(client, REPO, "main", [_file("p/naïve.txt", "naïve ✓")])

    (blob_body,) = fake_github.calls("POST", "/git/blobs")
    assert blob_body["encoding"] == "base64"
    assert base64.b64decode(blob_body["content"]).decode("utf-8") == "naïve ✓"


@pytest.mark.asyncio
async def test_publish_default_message_has_timestamp(
    fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    async with make_client(fake_github) as client:
        await publish(client, REPO, "main", _entries(), commit_message=None)

    (commit_body,) = fake_github.calls("POST", "/git/commits")
    assert commit_body["message"].startswith("Upload files from ")


@pytest.mark.asyncio
async def test_failed_blob_aborts_before_tree(
    fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    fake_github.fail("POST", "/git/blobs", 500)

    async with make_client(fake_github) as client:
        with pytest.raises(RemoteError) as exc_info:
            await publish(client, REPO, "main", _entries())

    assert exc_info.value.status_code == 500
    assert fake_github.calls("POST", "/git/trees") == []
    assert fake_github.calls("POST", "/git/commits") == []


@pytest.mark.asyncio
async def test_failed_ref_update_propagates(make_client: ClientFactory) -> None:
    fake = FakeGitHub(head="C0", base_tree="T0")
    fake.fail("PATCH", "/git/refs/heads/main", 422)

    async with make_client(fake) as client:
        with pytest.raises(RemoteError) as exc_info:
            await publish(client, REPO, "main", _entries())

    assert exc_info.value.status_code == 422
    assert exc_info.value.message == "Simulated 422"


@pytest.mark.asyncio
async def test_publish_to_empty_repository_creates_root_commit(
    fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    fake_github.fail("GET", "/git/ref/heads/main", 409)

    async with make_client(fake_github) as client:
        result = await publish(client, REPO, "main", _entries(), "Initial import")

    assert result.commit_sha == "commit-new"
    (tree_body,) = fake_github.calls("POST", "/git/trees")
    assert "base_tree" not in tree_body
    (commit_body,) = fake_github.calls("POST", "/git/commits")
    assert commit_body["parents"] == []
    assert fake_github.calls("POST", "/git/refs") == [
        {"ref": "refs/heads/main", "sha": "commit-new"}
    ]


@pytest.mark.asyncio
async def test_branch_lookup_auth_failure_propagates(
    fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    fake_github.fail("GET", "/git/ref/heads/main", 401)

    async with make_client(fake_github) as client:
        with pytest.raises(RemoteError) as exc_info:
            await publish(client, REPO, "main", _entries())

    assert exc_info.value.status_code == 401
    assert fake_github.calls("POST", "/git/blobs") == []


@pytest.mark.asyncio
async def test_lenient_lookup_treats_any_failure_as_new_branch(
    monkeypatch: pytest.MonkeyPatch, fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    monkeypatch.setenv("REPO_UPLOADER_LENIENT_BRANCH_LOOKUP", "1")
    fake_github.fail("GET", "/git/ref/heads/main", 500)

    async with make_client(fake_github) as client:
        result = await publish(client, REPO, "main", _entries())

    assert result.commit_sha == "commit-new"
    assert len(fake_github.calls("POST", "/git/refs")) == 1


@pytest.mark.asyncio
async def test_publish_accepts_entries_loaded_from_storage(
    fake_github: FakeGitHub, make_client: ClientFactory
) -> None:
    stored = [entry.to_dict() for entry in _entries()]
    entries = [ArchiveEntry.from_dict(item) for item in stored]

    async with make_client(fake_github) as client:
        result = await publish(client, REPO, "main", entries)

    assert result.file_count == 2
