"""Embedded SQLite backend (aiosqlite driver)."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import create_async_engine

from tasklist.db.base import Database
from tasklist.db.placeholders import QMARK

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).with_name("sql") / "schema.sql"


def split_script(script: str) -> list[str]:
    """Split a SQL script into complete statements."""
    statements: list[str] = []
    buffer = ""
    for line in script.splitlines(keepends=True):
        buffer += line
        if sqlite3.complete_statement(buffer):
            statements.append(buffer.strip())
            buffer = ""
    leftover = "\n".join(
        line for line in buffer.splitlines() if line.strip() and not line.strip().startswith("--")
    )
    if leftover:
        statements.append(leftover)
    return statements


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


class EmbeddedDatabase(Database):
    """File-backed SQLite store."""

    backend_name = "sqlite"
    paramstyle = QMARK

    def __init__(self, path: Path, seed_file: Path | None = None) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(f"sqlite+aiosqlite:///{path}")
        event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
        super().__init__(engine)
        self.path = path
        self.seed_file = seed_file
        self.supports_returning = sqlite3.sqlite_version_info >= (3, 35, 0)

    def adapt_param(self, value: Any) -> Any:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, datetime):
            # Fixed width so that text order matches time order
            return value.isoformat(timespec="microseconds")
        return value

    def last_row_id(self, result: CursorResult) -> int | None:
        return result.lastrowid

    async def bootstrap(self) -> None:
        await self.execute_script(split_script(SCHEMA_FILE.read_text(encoding="utf-8")))
        await self._upgrade_users_table()
        await self._apply_seed()
        logger.info("Embedded database ready", extra={"path": str(self.path)})

    async def _upgrade_users_table(self) -> None:
        """Bring users tables created by older releases up to date."""
        result = await self.execute("PRAGMA table_info(users)")
        columns = {row["name"] for row in result.rows}

        if "password_hash" not in columns:
            logger.warning(
                "Upgrading users table: adding password_hash column (existing users will be cleared)."
            )
            await self.execute("ALTER TABLE users ADD COLUMN password_hash TEXT")
            await self.execute("DELETE FROM users")

        if "updated_at" not in columns:
            logger.warning("Upgrading users table: adding updated_at column.")
            await self.execute("ALTER TABLE users ADD COLUMN updated_at TEXT")
            await self.execute(
                "UPDATE users SET updated_at = "
                "COALESCE(updated_at, created_at, strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now'))"
            )

    async def _apply_seed(self) -> None:
        if self.seed_file is None or not self.seed_file.is_file():
            return
        existing = await self.fetch_one("SELECT COUNT(*) AS count FROM users")
        if existing and existing["count"]:
            return
        statements = split_script(self.seed_file.read_text(encoding="utf-8"))
        await self.execute_script(statements)
        logger.info(
            "Applied seed script",
            extra={"seed_file": str(self.seed_file), "statements": len(statements)},
        )
