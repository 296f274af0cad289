"""Authentication service: registration and credential checks."""

import logging
from datetime import datetime, timezone

from tasklist.db import Database, Row, UniqueViolationError
from tasklist.errors import AuthError, ConflictError, InternalError, ValidationError
from tasklist.models.user import UserCreate, UserLogin
from tasklist.services.passwords import hash_password, verify_password
from tasklist.services.users import USER_PUBLIC_COLUMNS, get_user_by_email, normalize_email

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "Invalid credentials"


async def register_user(database: Database, user_data: UserCreate) -> Row:
    """
    Create a new user account.
    Returns the public fields of the stored user.
    """
    name = (user_data.name or "").strip()
    email = normalize_email(user_data.email)
    password = user_data.password or ""

    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    # Friendly pre-check; the unique constraint still guards against races
    if await get_user_by_email(database, email) is not None:
        raise ConflictError("Email already registered")

    password_hash = await hash_password(password)
    now = datetime.now(timezone.utc)
    try:
        user = await database.write_returning(
            "INSERT INTO users (name, email, password_hash, created_at, updated_at) "
            "VALUES ($1, $2, $3, $4, $5)",
            [name, email, password_hash, now, now],
            returning=USER_PUBLIC_COLUMNS,
            read_back=f"SELECT {USER_PUBLIC_COLUMNS} FROM users WHERE email = $1",
            read_back_params=[email],
        )
    except UniqueViolationError as e:
        raise ConflictError("Email already registered") from e

    if user is None:
        raise InternalError("Failed to register")

    logger.info("User registered", extra={"user_id": user["id"]})
    return user


async def authenticate_user(database: Database, credentials: UserLogin) -> Row:
    """
    Check an email/password pair.
    Unknown emails and wrong passwords raise the same AuthError.
    """
    email = normalize_email(credentials.email)
    password = credentials.password or ""

    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await get_user_by_email(database, email)
    if user is None:
        raise AuthError(INVALID_CREDENTIALS)

    if not await verify_password(password, user["password_hash"]):
        raise AuthError(INVALID_CREDENTIALS)

    logger.info("User logged in", extra={"user_id": user["id"]})
    return user
