"""Task API endpoints, scoped to the user in the path."""

from fastapi import APIRouter, Response, status

from tasklist.api.deps import DBSession, TaskId, UserId
from tasklist.errors import error_boundary
from tasklist.models.task import TaskCreate, TaskResponse, TaskUpdate
from tasklist.services.tasks import create_task, delete_task, get_user_tasks, update_task
from tasklist.services.users import ensure_user

router = APIRouter(prefix="/api/users/{user_id}/tasks", tags=["Tasks"])


@router.get("", response_model=list[TaskResponse])
async def list_tasks_endpoint(session: DBSession, user_id: UserId) -> list[TaskResponse]:
    """List all tasks of the user, newest first."""
    with error_boundary("Failed to load tasks"):
        await ensure_user(session, user_id)
        tasks = await get_user_tasks(session, user_id)
    return [TaskResponse.from_row(task) for task in tasks]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    session: DBSession,
    user_id: UserId,
    task_data: TaskCreate,
) -> TaskResponse:
    """Create a new task for the user."""
    with error_boundary("Failed to create task"):
        await ensure_user(session, user_id)
        task = await create_task(session, user_id, task_data)
    return TaskResponse.from_row(task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task_endpoint(
    session: DBSession,
    user_id: UserId,
    task_id: TaskId,
    task_data: TaskUpdate,
) -> TaskResponse:
    """Update a task's title and/or completion."""
    with error_boundary("Failed to update task"):
        await ensure_user(session, user_id)
        task = await update_task(session, user_id, task_id, task_data)
    return TaskResponse.from_row(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_endpoint(
    session: DBSession,
    user_id: UserId,
    task_id: TaskId,
) -> Response:
    """Delete a task."""
    with error_boundary("Failed to delete task"):
        await ensure_user(session, user_id)
        await delete_task(session, user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
