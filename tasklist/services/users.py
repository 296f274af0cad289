"""User lookups shared by the auth and task services."""

from tasklist.db import Database, Row
from tasklist.errors import NotFoundError

USER_PUBLIC_COLUMNS = "id, name, email"


def normalize_email(email: str | None) -> str:
    """Trim and lower-case an email so lookups are case-insensitive."""
    return (email or "").strip().lower()


async def get_user_by_id(database: Database, user_id: int) -> Row | None:
    """Get a user's public fields by id."""
    return await database.fetch_one(
        f"SELECT {USER_PUBLIC_COLUMNS} FROM users WHERE id = $1", [user_id]
    )


async def get_user_by_email(database: Database, email: str) -> Row | None:
    """Get a user, including the password hash, by normalized email."""
    return await database.fetch_one(
        f"SELECT {USER_PUBLIC_COLUMNS}, password_hash FROM users WHERE email = $1", [email]
    )


async def ensure_user(database: Database, user_id: int) -> Row:
    """Resolve a path user id to an existing user or raise NotFoundError."""
    user = await get_user_by_id(database, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
