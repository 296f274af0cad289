"""Health check endpoint."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from tasklist.db import get_database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
async def health_check() -> JSONResponse:
    """Report whether the database answers a trivial query."""
    try:
        database = await get_database()
        await database.ping()
    except Exception:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "Database unavailable"},
        )
    return JSONResponse(content={"status": "ok"})
