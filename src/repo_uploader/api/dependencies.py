"""Shared dependencies for API routes."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from repo_uploader.services.github_client import GitHubClient


def get_current_user_id(
    x_user_id: Annotated[
        str | None,
        Header(
            description=(
                "Current user id. In production, this is resolved by the session "
                "layer in front of this API."
            )
        ),
    ] = None,
) -> str:
    """Get the current user id from request context.

    Args:
        x_user_id: User id from the X-User-Id header.

    Returns:
        str: Authenticated user id.

    Raises:
        HTTPException: If the header is missing (401).
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return x_user_id


def get_access_token(
    authorization: Annotated[
        str | None,
        Header(description="GitHub access token as 'Bearer <token>'."),
    ] = None,
) -> str:
    """Extract the GitHub bearer token.

    Raises:
        HTTPException: If the header is missing or not a bearer token (401).
    """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return token.strip()


async def get_github_client(
    token: Annotated[str, Depends(get_access_token)],
) -> AsyncIterator[GitHubClient]:
    """Yield a GitHub client for the request and close it afterwards."""
    async with GitHubClient(token) as client:
        yield client
