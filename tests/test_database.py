"""Tests for the embedded backend and the process-wide handle."""

import asyncio
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

import pytest

from tasklist.db import (
    EmbeddedDatabase,
    IntegrityViolationError,
    MalformedStatementError,
    UniqueViolationError,
    close_database,
    get_database,
)
from tasklist.db import session as db_session
from tasklist.db.embedded import split_script

pytestmark = pytest.mark.anyio

INSERT_USER = (
    "INSERT INTO users (name, email, password_hash, created_at, updated_at) "
    "VALUES ($1, $2, $3, $4, $5)"
)
INSERT_TASK = (
    "INSERT INTO tasks (user_id, title, completed, created_at, updated_at) "
    "VALUES ($1, $2, $3, $4, $4)"
)


@pytest.fixture
async def database(tmp_path: Path, anyio_backend):
    db = EmbeddedDatabase(tmp_path / "test.db")
    await db.bootstrap()
    yield db
    await db.close()


async def add_user(db: EmbeddedDatabase, email: str = "ann@x.com") -> int:
    now = datetime.now(timezone.utc)
    user = await db.write_returning(
        INSERT_USER,
        ["Ann", email, "digest", now, now],
        returning="id",
        read_back="SELECT id FROM users WHERE email = $1",
        read_back_params=[email],
    )
    return user["id"]


async def count(db: EmbeddedDatabase, table: str) -> int:
    row = await db.fetch_one(f"SELECT COUNT(*) AS count FROM {table}")
    return row["count"]


# ============================================================================
# execute / normalization
# ============================================================================


class TestExecute:
    """Result shape and value normalization."""

    async def test_select_returns_dict_rows_and_count(self, database):
        await add_user(database)
        result = await database.execute("SELECT id, name FROM users")
        assert result.rows == [{"id": 1, "name": "Ann"}]
        assert result.row_count == 1

    async def test_empty_select_returns_empty_list(self, database):
        result = await database.execute("SELECT id FROM users WHERE id = $1", [42])
        assert result.rows == []
        assert result.row_count == 0
        assert result.first() is None

    async def test_write_reports_affected_rows(self, database):
        user_id = await add_user(database)
        now = datetime.now(timezone.utc)
        await database.execute(INSERT_TASK, [user_id, "a", False, now])
        await database.execute(INSERT_TASK, [user_id, "b", False, now])
        result = await database.execute("DELETE FROM tasks WHERE user_id = $1", [user_id])
        assert result.rows == []
        assert result.row_count == 2

    async def test_completed_is_normalized_to_bool(self, database):
        user_id = await add_user(database)
        now = datetime.now(timezone.utc)
        await database.execute(INSERT_TASK, [user_id, "done", True, now])
        row = await database.fetch_one("SELECT completed FROM tasks")
        assert row["completed"] is True

    async def test_timestamps_stored_with_microseconds(self, database):
        moment = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        await database.execute(INSERT_USER, ["Ann", "ann@x.com", "digest", moment, moment])
        row = await database.fetch_one("SELECT created_at FROM users")
        assert row["created_at"] == "2024-01-01T12:00:00.000000+00:00"


class TestWriteReturning:
    """RETURNING and the read-back fallback give the same row."""

    async def test_read_back_by_generated_id(self, database):
        database.supports_returning = False
        user_id = await add_user(database)
        now = datetime.now(timezone.utc)
        task = await database.write_returning(
            INSERT_TASK,
            [user_id, "Buy milk", False, now],
            returning="id, user_id, title, completed",
            read_back="SELECT id, user_id, title, completed FROM tasks WHERE id = $1",
        )
        assert task == {"id": 1, "user_id": user_id, "title": "Buy milk", "completed": False}

    async def test_returning_matches_read_back(self, database):
        if sqlite3.sqlite_version_info < (3, 35, 0):
            pytest.skip("SQLite build without RETURNING")
        user_id = await add_user(database)
        now = datetime.now(timezone.utc)
        database.supports_returning = True
        returned = await database.write_returning(
            INSERT_TASK,
            [user_id, "Buy milk", False, now],
            returning="id, user_id, title, completed",
            read_back="unused",
        )
        assert returned == {"id": 1, "user_id": user_id, "title": "Buy milk", "completed": False}

    async def test_empty_read_back_returns_none(self, database):
        database.supports_returning = False
        user_id = await add_user(database)
        row = await database.write_returning(
            "UPDATE users SET name = $1 WHERE id = $2",
            ["Anna", user_id],
            returning="id",
            read_back="SELECT id FROM users WHERE id = $1",
            read_back_params=[999],
        )
        assert row is None


# ============================================================================
# Errors
# ============================================================================


class TestErrors:
    """Driver errors are classified, never swallowed."""

    async def test_duplicate_email_is_unique_violation(self, database):
        await add_user(database, "ann@x.com")
        with pytest.raises(UniqueViolationError):
            await add_user(database, "ann@x.com")

    async def test_email_uniqueness_ignores_case(self, database):
        await add_user(database, "ann@x.com")
        with pytest.raises(UniqueViolationError):
            await add_user(database, "ANN@X.COM")

    async def test_missing_user_is_integrity_violation(self, database):
        now = datetime.now(timezone.utc)
        with pytest.raises(IntegrityViolationError) as excinfo:
            await database.execute(INSERT_TASK, [999, "orphan", False, now])
        assert not isinstance(excinfo.value, UniqueViolationError)

    async def test_unknown_table_is_malformed_statement(self, database):
        with pytest.raises(MalformedStatementError):
            await database.execute("SELECT * FROM nope")

    async def test_syntax_error_is_malformed_statement(self, database):
        with pytest.raises(MalformedStatementError):
            await database.execute("SELEC 1")


# ============================================================================
# Bootstrap
# ============================================================================


class TestBootstrap:
    """Schema creation, seeding and legacy upgrades."""

    async def test_bootstrap_twice_keeps_rows(self, database):
        user_id = await add_user(database)
        now = datetime.now(timezone.utc)
        await database.execute(INSERT_TASK, [user_id, "keep me", False, now])

        await database.bootstrap()
        await database.bootstrap()

        assert await count(database, "users") == 1
        assert await count(database, "tasks") == 1

    async def test_deleting_user_cascades_to_tasks(self, database):
        user_id = await add_user(database)
        now = datetime.now(timezone.utc)
        await database.execute(INSERT_TASK, [user_id, "gone", False, now])

        await database.execute("DELETE FROM users WHERE id = $1", [user_id])

        assert await count(database, "tasks") == 0

    async def test_seed_applied_only_to_empty_store(self, tmp_path: Path, anyio_backend):
        seed = tmp_path / "seed.sql"
        seed.write_text(
            "-- demo data\n"
            "INSERT INTO users (name, email, password_hash) VALUES ('Demo', 'demo@x.com', 'x');\n"
            "INSERT INTO tasks (user_id, title) VALUES (1, 'Try the app');\n",
            encoding="utf-8",
        )
        db = EmbeddedDatabase(tmp_path / "seeded.db", seed_file=seed)
        try:
            await db.bootstrap()
            await db.bootstrap()
            assert await count(db, "users") == 1
            assert await count(db, "tasks") == 1
            task = await db.fetch_one("SELECT completed, created_at FROM tasks")
            assert task["completed"] is False
            assert task["created_at"]
        finally:
            await db.close()

    async def test_missing_seed_file_is_ignored(self, tmp_path: Path, anyio_backend):
        db = EmbeddedDatabase(tmp_path / "plain.db", seed_file=tmp_path / "absent.sql")
        try:
            await db.bootstrap()
            assert await count(db, "users") == 0
        finally:
            await db.close()

    async def test_users_table_without_password_hash_is_upgraded(self, tmp_path: Path, anyio_backend):
        path = tmp_path / "legacy.db"
        with sqlite3.connect(path) as conn:
            conn.execute(
                "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, "
                "email TEXT UNIQUE, created_at TEXT)"
            )
            conn.execute("INSERT INTO users (name, email, created_at) VALUES ('Old', 'old@x.com', '2020')")
        conn.close()

        db = EmbeddedDatabase(path)
        try:
            await db.bootstrap()
            columns = {row["name"] for row in (await db.execute("PRAGMA table_info(users)")).rows}
            assert {"password_hash", "updated_at"} <= columns
            assert await count(db, "users") == 0
        finally:
            await db.close()

    async def test_missing_updated_at_is_backfilled(self, tmp_path: Path, anyio_backend):
        path = tmp_path / "legacy.db"
        with sqlite3.connect(path) as conn:
            conn.execute(
                "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, "
                "email TEXT UNIQUE, password_hash TEXT, created_at TEXT)"
            )
            conn.execute(
                "INSERT INTO users (name, email, password_hash, created_at) "
                "VALUES ('Old', 'old@x.com', 'x', '2020-01-01T00:00:00.000000+00:00')"
            )
        conn.close()

        db = EmbeddedDatabase(path)
        try:
            await db.bootstrap()
            row = await db.fetch_one("SELECT updated_at FROM users")
            assert row["updated_at"] == "2020-01-01T00:00:00.000000+00:00"
        finally:
            await db.close()


def test_split_script_keeps_statements_whole():
    script = "CREATE TABLE a (x TEXT DEFAULT ';');\n-- note\nCREATE TABLE b (y INT);\n-- trailing\n"
    assert split_script(script) == [
        "CREATE TABLE a (x TEXT DEFAULT ';');",
        "-- note\nCREATE TABLE b (y INT);",
    ]


# ============================================================================
# Process-wide handle
# ============================================================================


class FailingDatabase:
    backend_name = "failing"

    def __init__(self) -> None:
        self.closed = False

    async def bootstrap(self) -> None:
        await asyncio.sleep(0)
        raise ConnectionError("backend unreachable")

    async def close(self) -> None:
        self.closed = True


class TestGetDatabase:
    """Once-only initialization of the shared handle."""

    async def test_concurrent_first_callers_share_one_instance(self, app_env):
        try:
            first, second, third = await asyncio.gather(
                get_database(), get_database(), get_database()
            )
            assert first is second is third
            assert isinstance(first, EmbeddedDatabase)
            assert first.path == (app_env / "app.db").resolve()
        finally:
            await close_database()

    async def test_failed_initialization_reaches_all_callers_and_resets(self, monkeypatch):
        created = []

        def fake_create_database(settings):
            created.append(FailingDatabase())
            return created[-1]

        monkeypatch.setattr(db_session, "create_database", fake_create_database)

        results = await asyncio.gather(get_database(), get_database(), return_exceptions=True)

        assert all(isinstance(result, ConnectionError) for result in results)
        assert len(created) == 1
        assert created[0].closed
        assert db_session._database_future is None

    async def test_close_allows_fresh_initialization(self):
        first = await get_database()
        await close_database()
        second = await get_database()
        try:
            assert first is not second
        finally:
            await close_database()

    async def test_cancelled_caller_does_not_cancel_other_waiters(self, monkeypatch):
        initialize = db_session._initialize
        started = asyncio.Event()

        async def slow_initialize():
            started.set()
            await asyncio.sleep(0.05)
            return await initialize()

        monkeypatch.setattr(db_session, "_initialize", slow_initialize)

        first = asyncio.ensure_future(get_database())
        second = asyncio.ensure_future(get_database())
        await started.wait()
        first.cancel()

        try:
            database = await second
            assert isinstance(database, EmbeddedDatabase)
            with pytest.raises(asyncio.CancelledError):
                await first
            assert await get_database() is database
        finally:
            await close_database()
