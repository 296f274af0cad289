"""Backend-agnostic data access interface.

Both backends run on SQLAlchemy's async engine but send statements through
``exec_driver_sql``, so each one receives SQL in its driver's own
paramstyle. Callers always write ``$n`` placeholders.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from tasklist.db.errors import classify_error
from tasklist.db.placeholders import translate

logger = logging.getLogger(__name__)

Row = dict[str, Any]


@dataclass
class QueryResult:
    """Normalized result of a single statement.

    Attributes:
        rows: Returned rows as plain dicts (empty for non-returning writes)
        row_count: Rows returned, or rows affected for writes
        last_row_id: Generated row id, where the backend reports one
    """

    rows: list[Row] = field(default_factory=list)
    row_count: int = 0
    last_row_id: int | None = None

    def first(self) -> Row | None:
        return self.rows[0] if self.rows else None


class Database(ABC):
    """A relational store reached through an async SQLAlchemy engine."""

    backend_name: str = "unknown"
    paramstyle: str
    supports_returning: bool = False
    boolean_columns: frozenset[str] = frozenset({"completed"})

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    def adapt_param(self, value: Any) -> Any:
        """Convert a Python value into something the driver accepts."""
        return value

    def normalize_row(self, row: Row) -> Row:
        for column in self.boolean_columns.intersection(row):
            if row[column] is not None:
                row[column] = bool(row[column])
        return row

    def last_row_id(self, result: CursorResult) -> int | None:
        return None

    async def execute(self, statement: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run one statement written with ``$n`` placeholders."""
        sql, args = translate(statement, params, self.paramstyle)
        args = tuple(self.adapt_param(value) for value in args)
        try:
            async with self.engine.begin() as conn:
                # None rather than () so the driver skips placeholder parsing
                result = await conn.exec_driver_sql(sql, args or None)
                if result.returns_rows:
                    rows = [self.normalize_row(dict(row)) for row in result.mappings().all()]
                    return QueryResult(rows=rows, row_count=len(rows))
                return QueryResult(
                    row_count=max(result.rowcount, 0),
                    last_row_id=self.last_row_id(result),
                )
        except SQLAlchemyError as e:
            raise classify_error(e) from e

    async def execute_script(self, statements: Iterable[str]) -> None:
        """Run parameterless statements in a single transaction."""
        try:
            async with self.engine.begin() as conn:
                for statement in statements:
                    await conn.exec_driver_sql(statement)
        except SQLAlchemyError as e:
            raise classify_error(e) from e

    async def fetch_one(self, statement: str, params: Sequence[Any] = ()) -> Row | None:
        result = await self.execute(statement, params)
        return result.first()

    async def write_returning(
        self,
        statement: str,
        params: Sequence[Any],
        *,
        returning: str,
        read_back: str,
        read_back_params: Sequence[Any] | None = None,
    ) -> Row | None:
        """Run an INSERT or UPDATE and return the written row.

        Uses ``RETURNING`` where the backend supports it. Otherwise runs the
        write, then ``read_back`` with ``read_back_params`` (or, when those
        are omitted, the generated row id). The two statements are not
        atomic, so a concurrent delete can make the read-back come back
        empty, in which case None is returned.
        """
        if self.supports_returning:
            result = await self.execute(f"{statement} RETURNING {returning}", params)
            return result.first()

        result = await self.execute(statement, params)
        if read_back_params is None:
            read_back_params = [result.last_row_id]
        return await self.fetch_one(read_back, read_back_params)

    async def ping(self) -> None:
        await self.execute("SELECT 1")

    async def close(self) -> None:
        await self.engine.dispose()

    @abstractmethod
    async def bootstrap(self) -> None:
        """Create the schema if needed. Safe to call on every start."""
