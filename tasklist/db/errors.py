"""Data access errors, independent of the backend that raised them."""

from sqlalchemy import exc as sa_exc

# SQLSTATE for unique_violation
PG_UNIQUE_VIOLATION = "23505"


class DatabaseError(Exception):
    """Base class for failures raised by the data access layer."""


class DatabaseUnavailableError(DatabaseError):
    """The backend could not be reached or the connection dropped."""


class MalformedStatementError(DatabaseError):
    """The statement or its parameters were rejected before execution."""


class IntegrityViolationError(DatabaseError):
    """A store-level constraint rejected the write."""


class UniqueViolationError(IntegrityViolationError):
    """A unique constraint rejected the write."""


def _is_unique_violation(orig: BaseException | None) -> bool:
    if orig is None:
        return False
    if getattr(orig, "sqlstate", None) == PG_UNIQUE_VIOLATION:
        return True
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    return "UNIQUE constraint failed" in str(orig)


def classify_error(error: sa_exc.SQLAlchemyError) -> DatabaseError:
    """Map a SQLAlchemy/driver error onto the data access taxonomy."""
    orig = getattr(error, "orig", None)
    detail = str(orig or error)

    if isinstance(error, sa_exc.IntegrityError):
        if _is_unique_violation(orig):
            return UniqueViolationError(detail)
        return IntegrityViolationError(detail)
    if isinstance(error, sa_exc.ProgrammingError):
        return MalformedStatementError(detail)
    if isinstance(error, sa_exc.OperationalError):
        # SQLite reports bad SQL as an operational error
        if "syntax error" in detail or "no such " in detail or "has no column" in detail:
            return MalformedStatementError(detail)
        return DatabaseUnavailableError(detail)
    if isinstance(error, (sa_exc.InterfaceError, sa_exc.DisconnectionError, sa_exc.TimeoutError)):
        return DatabaseUnavailableError(detail)
    return DatabaseError(detail)
