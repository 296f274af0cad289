"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasklist.api.auth import router as auth_router
from tasklist.api.health import router as health_router
from tasklist.api.tasks import router as tasks_router
from tasklist.config import get_settings
from tasklist.db import close_database, get_database
from tasklist.errors import register_exception_handlers
from tasklist.static import register_frontend


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Bootstrap the database on startup and release it on shutdown."""
    await get_database()
    yield
    await close_database()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Tasklist API",
        description="Personal task management: accounts and per-user tasks",
        version="1.0.0",
        lifespan=lifespan,
    )

    allow_all = "*" in settings.CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(tasks_router)

    # Must stay last: it matches every GET path
    register_frontend(app, settings.FRONTEND_DIR)
    return app


app = create_app()
