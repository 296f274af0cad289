"""Serves the pre-built web client with an index-page fallback."""

from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse

from tasklist.errors import NotFoundError

INDEX_FILE = "index.html"
API_FALLBACK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _resolve_asset(directory: Path, requested: str) -> Path | None:
    try:
        candidate = (directory / requested).resolve()
        if not candidate.is_relative_to(directory) or not candidate.is_file():
            return None
    except (OSError, ValueError):
        # Null bytes and over-long names cannot name a served file
        return None
    return candidate


def register_frontend(app: FastAPI, directory: Path) -> None:
    """Add the catch-all routes; must be registered after the API routers."""
    directory = directory.resolve()

    @app.api_route("/api", methods=API_FALLBACK_METHODS, include_in_schema=False)
    @app.api_route("/api/{rest:path}", methods=API_FALLBACK_METHODS, include_in_schema=False)
    async def api_not_found() -> None:
        raise NotFoundError("Not found")

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_frontend(full_path: str) -> FileResponse:
        asset = _resolve_asset(directory, full_path) if full_path else None
        if asset is None:
            asset = _resolve_asset(directory, INDEX_FILE)
        if asset is None:
            raise NotFoundError("Not found")
        return FileResponse(asset)
