"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from tasklist.db import Database, get_database
from tasklist.errors import ValidationError

# Largest id both backends can store (SQLite INTEGER, PostgreSQL BIGINT)
MAX_ID = 2**63 - 1

DBSession = Annotated[Database, Depends(get_database)]


def parse_id(value: str, label: str) -> int:
    """Parse a path id, rejecting anything but a non-negative integer."""
    if not value.isascii() or not value.isdigit() or int(value) > MAX_ID:
        raise ValidationError(f"Invalid {label} id")
    return int(value)


def get_path_user_id(user_id: str) -> int:
    return parse_id(user_id, "user")


def get_path_task_id(task_id: str) -> int:
    return parse_id(task_id, "task")


UserId = Annotated[int, Depends(get_path_user_id)]
TaskId = Annotated[int, Depends(get_path_task_id)]
