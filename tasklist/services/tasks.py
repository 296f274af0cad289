"""Task service for CRUD operations scoped to one user."""

import logging
from datetime import datetime, timezone

from tasklist.db import Database, Row
from tasklist.errors import InternalError, NotFoundError, ValidationError
from tasklist.models.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TASK_COLUMNS = "id, user_id, title, completed, created_at, updated_at"


async def get_user_tasks(database: Database, user_id: int) -> list[Row]:
    """Get all tasks of the user, newest first."""
    result = await database.execute(
        f"SELECT {TASK_COLUMNS} FROM tasks WHERE user_id = $1 "
        "ORDER BY created_at DESC, id DESC",
        [user_id],
    )
    return result.rows


async def get_task_by_id(database: Database, user_id: int, task_id: int) -> Row | None:
    """Get a specific task owned by the user."""
    return await database.fetch_one(
        f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = $1 AND user_id = $2",
        [task_id, user_id],
    )


async def create_task(database: Database, user_id: int, task_data: TaskCreate) -> Row:
    """Create a new, incomplete task for the specified user."""
    title = (task_data.title or "").strip()
    if not title:
        raise ValidationError("Task title is required")

    now = datetime.now(timezone.utc)
    task = await database.write_returning(
        "INSERT INTO tasks (user_id, title, completed, created_at, updated_at) "
        "VALUES ($1, $2, $3, $4, $5)",
        [user_id, title, False, now, now],
        returning=TASK_COLUMNS,
        read_back=f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = $1",
    )
    if task is None:
        raise InternalError("Failed to create task")

    logger.info("Task created", extra={"task_id": task["id"], "user_id": user_id})
    return task


async def update_task(
    database: Database, user_id: int, task_id: int, task_data: TaskUpdate
) -> Row:
    """Apply the fields present in ``task_data`` and refresh updated_at."""
    current = await get_task_by_id(database, user_id, task_id)
    if current is None:
        raise NotFoundError("Task not found")

    provided = task_data.model_fields_set

    title = current["title"]
    if "title" in provided:
        title = (task_data.title or "").strip()
        if not title:
            raise ValidationError("Task title cannot be empty")

    completed = current["completed"]
    if "completed" in provided:
        if task_data.completed is None:
            raise ValidationError("Task completed flag must be a boolean")
        completed = task_data.completed

    task = await database.write_returning(
        "UPDATE tasks SET title = $1, completed = $2, updated_at = $3 "
        "WHERE id = $4 AND user_id = $5",
        [title, completed, datetime.now(timezone.utc), task_id, user_id],
        returning=TASK_COLUMNS,
        read_back=f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = $1 AND user_id = $2",
        read_back_params=[task_id, user_id],
    )
    # Deleted between the ownership check and the update
    if task is None:
        raise NotFoundError("Task not found")

    logger.info("Task updated", extra={"task_id": task_id, "user_id": user_id})
    return task


async def delete_task(database: Database, user_id: int, task_id: int) -> None:
    """Delete a task owned by the user."""
    result = await database.execute(
        "DELETE FROM tasks WHERE id = $1 AND user_id = $2", [task_id, user_id]
    )
    if result.row_count == 0:
        raise NotFoundError("Task not found")

    logger.info("Task deleted", extra={"task_id": task_id, "user_id": user_id})
