"""GitHub REST client for the Git Data API calls used when publishing.

Every non-2xx response becomes a ``RemoteError`` carrying the status code and
the ``message`` field of the response body. Timeouts and connection failures
become a ``RemoteError`` with no status code, as does a 2xx body that is
not JSON or lacks the field a call reads.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from repo_uploader.config import get_github_api_url, get_request_timeout
from repo_uploader.constants.github_constants import GITHUB_ACCEPT_HEADER, GITHUB_API_VERSION
from repo_uploader.models.publish import RemoteError, RemoteTreeEntry

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    message: str | None = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        message = str(body["message"])
    return message or response.reason_phrase or f"GitHub API error: {response.status_code}"


def _field(data: Any, *keys: str) -> Any:
    """Walk ``keys`` into a response body; a missing key is a remote failure."""
    value = data
    try:
        for key in keys:
            value = value[key]
    except (KeyError, TypeError) as exc:
        raise RemoteError(None, f"Malformed GitHub response: missing {'.'.join(keys)}") from exc
    return value


class GitHubClient:
    """Async client bound to one bearer token.

    Use as an async context manager so the underlying connection pool is
    closed when the request is done::

        async with GitHubClient(token) as client:
            sha = await client.get_ref("octo/repo", "main")
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url or get_github_api_url(),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": GITHUB_ACCEPT_HEADER,
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
            timeout=timeout if timeout is not None else get_request_timeout(),
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("GitHub %s %s", method, path)
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TimeoutException as exc:
            raise RemoteError(None, f"GitHub request timed out: {method} {path}") from exc
        except httpx.RequestError as exc:
            raise RemoteError(None, f"GitHub request failed: {exc}") from exc

        if not response.is_success:
            raise RemoteError(response.status_code, _error_message(response))
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(None, f"Malformed GitHub response: {method} {path}") from exc

    # Git Data API

    async def get_ref(self, repo: str, branch: str) -> str:
        """Return the commit sha that ``heads/<branch>`` points at."""
        data = await self._request("GET", f"/repos/{repo}/git/ref/heads/{branch}")
        return _field(data, "object", "sha")

    async def get_commit_tree(self, repo: str, commit_sha: str) -> str:
        """Return the root tree sha of a commit."""
        data = await self._request("GET", f"/repos/{repo}/git/commits/{commit_sha}")
        return _field(data, "tree", "sha")

    async def create_blob(self, repo: str, content: str) -> str:
        encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
        data = await self._request(
            "POST",
            f"/repos/{repo}/git/blobs",
            json={"content": encoded, "encoding": "base64"},
        )
        return _field(data, "sha")

    async def create_tree(
        self,
        repo: str,
        entries: Sequence[RemoteTreeEntry],
        base_tree: str | None = None,
    ) -> str:
        payload: dict[str, Any] = {"tree": [entry.to_payload() for entry in entries]}
        if base_tree is not None:
            payload["base_tree"] = base_tree
        data = await self._request("POST", f"/repos/{repo}/git/trees", json=payload)
        return _field(data, "sha")

    async def create_commit(
        self, repo: str, message: str, tree_sha: str, parents: Sequence[str]
    ) -> str:
        data = await self._request(
            "POST",
            f"/repos/{repo}/git/commits",
            json={"message": message, "tree": tree_sha, "parents": list(parents)},
        )
        return _field(data, "sha")

    async def update_ref(self, repo: str, branch: str, commit_sha: str) -> None:
        """Fast-forward ``heads/<branch>``; the remote rejects non fast-forward moves."""
        await self._request(
            "PATCH",
            f"/repos/{repo}/git/refs/heads/{branch}",
            json={"sha": commit_sha},
        )

    async def create_ref(self, repo: str, branch: str, commit_sha: str) -> None:
        await self._request(
            "POST",
            f"/repos/{repo}/git/refs",
            json={"ref": f"refs/heads/{branch}", "sha": commit_sha},
        )

    async def get_tree(self, repo: str, tree_sha: str, recursive: bool = True) -> dict[str, Any]:
        params = {"recursive": "1"} if recursive else None
        return await self._request("GET", f"/repos/{repo}/git/trees/{tree_sha}", params=params)

    # Repositories

    async def list_user_repos(self) -> list[dict[str, Any]]:
        """Return the authenticated user's repositories, most recently updated first."""
        return await self._request(
            "GET", "/user/repos", params={"sort": "updated", "per_page": 100}
        )

    async def create_repository(
        self, name: str, description: str = "", private: bool = False
    ) -> dict[str, Any]:
        """Create an empty repository (no initial commit) for the authenticated user."""
        return await self._request(
            "POST",
            "/user/repos",
            json={
                "name": name,
                "description": description,
                "private": private,
                "auto_init": False,
            },
        )
