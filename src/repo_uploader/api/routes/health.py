"""Health check routes."""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict[str, str]:
    """Report liveness; does not touch the database or GitHub."""
    return {"status": "healthy", "service": "repo-uploader"}
