"""API schemas for the Tasklist application."""

from tasklist.models.task import TaskCreate, TaskResponse, TaskUpdate
from tasklist.models.user import AuthResponse, UserCreate, UserLogin, UserResponse

__all__ = [
    "AuthResponse",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "TaskCreate",
    "TaskResponse",
    "TaskUpdate",
]
