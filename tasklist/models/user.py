"""User request and response schemas."""

from typing import Any

from sqlmodel import SQLModel


class UserCreate(SQLModel):
    """Schema for user registration.

    Fields are optional here so that missing values are reported with the
    same message as empty ones.
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None


class UserLogin(SQLModel):
    """Schema for user login."""

    email: str | None = None
    password: str | None = None


class UserResponse(SQLModel):
    """Public user fields (no password hash)."""

    id: int
    name: str
    email: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "UserResponse":
        return cls(id=row["id"], name=row["name"], email=row["email"])


class AuthResponse(SQLModel):
    """Schema for register/login responses."""

    user: UserResponse
