from __future__ import annotations

import base64
import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

import repo_uploader.data.db as app_db
from repo_uploader.data.db import init_db
from repo_uploader.services.github_client import GitHubClient

TEST_API_URL = "https://api.github.test"


@pytest.fixture
def api_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Use a temporary SQLite DB."""
    db_path = tmp_path / "api.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    app_db.reset_engine()
    init_db()
    yield
    app_db.reset_engine()


@pytest.fixture(autouse=True)
def _auto_api_db(request: pytest.FixtureRequest) -> None:
    """Automatically apply the api_db fixture to tests in API test files."""
    test_file_path = Path(str(request.node.fspath))
    if "api" in test_file_path.stem.lower():
        request.getfixturevalue("api_db")


class FakeGitHub:
    """In-memory stand-in for the GitHub REST API, used as an httpx transport handler.

    Attributes:
        head: Commit sha of the target branch, or None when the branch is missing.
        base_tree: Root tree sha of ``head``.
        requests: ``(method, path, json_body)`` for every call received.
        failures: Maps ``(method, path suffix)`` to an HTTP status to answer with.
    """

    def __init__(self, head: str | None = None, base_tree: str | None = None) -> None:
        self.head = head
        self.base_tree = base_tree
        self.requests: list[tuple[str, str, Any]] = []
        self.failures: dict[tuple[str, str], int] = {}
        self.remote_files: list[dict[str, Any]] = []

    def fail(self, method: str, path_suffix: str, status_code: int) -> None:
        self.failures[(method, path_suffix)] = status_code

    def calls(self, method: str, path_suffix: str) -> list[Any]:
        return [
            body
            for call_method, path, body in self.requests
            if call_method == method and path.endswith(path_suffix)
        ]

    def _failure_for(self, method: str, path: str) -> int | None:
        for (fail_method, suffix), status_code in self.failures.items():
            if fail_method == method and path.endswith(suffix):
                return status_code
        return None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((method, path, body))

        status_code = self._failure_for(method, path)
        if status_code is not None:
            return httpx.Response(status_code, json={"message": f"Simulated {status_code}"})

        if method == "GET" and "/git/ref/heads/" in path:
            if self.head is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"object": {"sha": self.head}})
        if method == "GET" and "/git/commits/" in path:
            return httpx.Response(200, json={"tree": {"sha": self.base_tree}})
        if method == "GET" and "/git/trees/" in path:
            return httpx.Response(200, json={"sha": self.base_tree, "tree": self.remote_files})
        if method == "POST" and path.endswith("/git/blobs"):
            text = base64.b64decode(body["content"]).decode("utf-8")
            return httpx.Response(201, json={"sha": f"blob:{text}"})
        if method == "POST" and path.endswith("/git/trees"):
            return httpx.Response(201, json={"sha": "tree-new"})
        if method == "POST" and path.endswith("/git/commits"):
            return httpx.Response(201, json={"sha": "commit-new"})
        if method == "PATCH" and "/git/refs/heads/" in path:
            return httpx.Response(200, json={"object": {"sha": body["sha"]}})
        if method == "POST" and path.endswith("/git/refs"):
            return httpx.Response(201, json={"ref": body["ref"], "object": {"sha": body["sha"]}})
        if method == "GET" and path == "/user/repos":
            return httpx.Response(200, json=[{"id": 1, "name": "demo", "full_name": "octo/demo"}])
        if method == "POST" and path == "/user/repos":
            return httpx.Response(
                201,
                json={
                    "id": 4242,
                    "name": body["name"],
                    "full_name": f"octo/{body['name']}",
                    "html_url": f"https://github.test/octo/{body['name']}",
                    "clone_url": f"https://github.test/octo/{body['name']}.git",
                    "description": body["description"],
                    "private": body["private"],
                    "default_branch": None,
                },
            )
        return httpx.Response(404, json={"message": f"Unhandled {method} {path}"})


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def make_client() -> Callable[[FakeGitHub], GitHubClient]:
    """Build a GitHubClient whose requests are served by a FakeGitHub."""

    def _make(fake: FakeGitHub) -> GitHubClient:
        return GitHubClient(
            "test-token", base_url=TEST_API_URL, transport=httpx.MockTransport(fake)
        )

    return _make
