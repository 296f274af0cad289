"""Process-wide database handle.

The backend is chosen once per process from configuration: PostgreSQL
when DATABASE_URL is set, otherwise the SQLite file at DB_FILE.
"""

import asyncio
import logging

from tasklist.config import Settings, get_settings
from tasklist.db.base import Database
from tasklist.db.embedded import EmbeddedDatabase
from tasklist.db.networked import NetworkedDatabase

logger = logging.getLogger(__name__)

# Single-assignment slot holding the initialization task. Callers await it
# through asyncio.shield so cancelling one caller never cancels the others.
_database_future: asyncio.Future[Database] | None = None


def create_database(settings: Settings) -> Database:
    """Build (but do not bootstrap) the configured backend."""
    if settings.uses_networked_database:
        return NetworkedDatabase(settings.async_database_url, sslmode=settings.DATABASE_SSLMODE)
    return EmbeddedDatabase(settings.DB_FILE, seed_file=settings.SEED_FILE)


async def _initialize() -> Database:
    database = create_database(get_settings())
    try:
        await database.bootstrap()
    except BaseException:
        await database.close()
        raise
    logger.info("Database initialized", extra={"backend": database.backend_name})
    return database


def _forget_failed(future: asyncio.Future[Database]) -> None:
    global _database_future
    failed = future.cancelled() or future.exception() is not None
    if failed and _database_future is future:
        # Let a later call try again; current waiters see this error
        _database_future = None


async def get_database() -> Database:
    """Return the bootstrapped database, creating it on first use."""
    global _database_future
    if _database_future is None:
        _database_future = asyncio.ensure_future(_initialize())
        _database_future.add_done_callback(_forget_failed)
    return await asyncio.shield(_database_future)


async def close_database() -> None:
    """Dispose of the engine and forget the handle."""
    global _database_future
    future, _database_future = _database_future, None
    if future is None:
        return
    if not future.done():
        future.cancel()
        return
    if future.cancelled() or future.exception() is not None:
        return
    await future.result().close()
