"""Task request and response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from sqlmodel import SQLModel


class TaskCreate(SQLModel):
    """Schema for task creation."""

    title: str | None = None


class TaskUpdate(SQLModel):
    """Schema for task update.

    Only fields present in the request body are applied; presence is read
    from ``model_fields_set``.
    """

    title: str | None = None
    completed: StrictBool | None = None


class TaskResponse(BaseModel):
    """Schema for task response, serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    user_id: int = Field(alias="userId")
    title: str
    completed: bool
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "TaskResponse":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            completed=bool(row["completed"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
