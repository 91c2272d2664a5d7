"""FastAPI application entry point for the repo-uploader API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from repo_uploader.api.routes import health, repos, uploads

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create database tables on startup."""
    from repo_uploader.data.db import init_db

    init_db()
    yield


app = FastAPI(
    title="repo-uploader API",
    description="Upload archives, inspect their contents and push them to GitHub",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(uploads.router, prefix="/api")
app.include_router(repos.router, prefix="/api")


def main(host: str = "0.0.0.0", port: int = 8000, reload: bool = True) -> None:
    """Start the development server."""
    import uvicorn

    uvicorn.run(
        "repo_uploader.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
