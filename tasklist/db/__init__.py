"""Data access layer: one interface over SQLite and PostgreSQL."""

from tasklist.db.base import Database, QueryResult, Row
from tasklist.db.embedded import EmbeddedDatabase
from tasklist.db.errors import (
    DatabaseError,
    DatabaseUnavailableError,
    IntegrityViolationError,
    MalformedStatementError,
    UniqueViolationError,
)
from tasklist.db.networked import NetworkedDatabase
from tasklist.db.session import close_database, create_database, get_database

__all__ = [
    "Database",
    "QueryResult",
    "Row",
    "EmbeddedDatabase",
    "NetworkedDatabase",
    "DatabaseError",
    "DatabaseUnavailableError",
    "IntegrityViolationError",
    "MalformedStatementError",
    "UniqueViolationError",
    "close_database",
    "create_database",
    "get_database",
]
