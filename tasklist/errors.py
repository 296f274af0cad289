"""Application error taxonomy and its translation to HTTP responses.

Every failure leaving an endpoint is rendered as ``{"message": ...}``
with the status code of its error class. Internal details (tracebacks,
SQL text, driver messages) are logged, never returned.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors with a user-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing, empty, too short or mistyped input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """Credential mismatch. Deliberately identical for unknown users."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    """Referenced user or task does not exist, or is not owned by the user."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Duplicate value for a unique field."""

    status_code = status.HTTP_409_CONFLICT


class InternalError(AppError):
    """Backend unreachable, malformed statement or hashing failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


@contextmanager
def error_boundary(fallback_message: str) -> Iterator[None]:
    """Let taxonomy errors through and turn anything else into InternalError."""
    try:
        yield
    except AppError:
        raise
    except Exception as e:
        logger.exception(fallback_message)
        raise InternalError(fallback_message) from e


def _message_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    # loc looks like ("body", "completed"); drop the source prefix
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    field = ".".join(location)
    if not field:
        return "Request body must be a JSON object"
    return f"Invalid value for '{field}': {first.get('msg', 'invalid')}"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _message_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _message_response(exc.status_code, message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _message_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON ``{message}`` handlers on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
