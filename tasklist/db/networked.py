"""Networked PostgreSQL backend (psycopg v3 driver)."""

import logging

from sqlalchemy.ext.asyncio import create_async_engine

from tasklist.db.base import Database
from tasklist.db.placeholders import FORMAT

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id BIGSERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id BIGSERIAL PRIMARY KEY,
        user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        completed BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_id ON tasks (user_id)",
)


class NetworkedDatabase(Database):
    """PostgreSQL store reached over a connection URL."""

    backend_name = "postgresql"
    paramstyle = FORMAT
    supports_returning = True

    def __init__(self, url: str, sslmode: str = "") -> None:
        engine = create_async_engine(
            url,
            echo=False,
            pool_pre_ping=True,
            connect_args={"sslmode": sslmode} if sslmode else {},
        )
        super().__init__(engine)

    async def bootstrap(self) -> None:
        await self.execute_script(SCHEMA_STATEMENTS)
        logger.info("Networked database ready", extra={"host": self.engine.url.host})
