"""Route handlers for the API."""

from repo_uploader.api.routes import health, repos, uploads

__all__ = [
    "health",
    "repos",
    "uploads",
]
