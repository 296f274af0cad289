"""Password hashing with bcrypt, run off the event loop."""

import bcrypt
from fastapi.concurrency import run_in_threadpool

from tasklist.config import get_settings

# bcrypt only looks at the first 72 bytes; newer releases raise past that
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def _hash_sync(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def _verify_sync(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))


async def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password using bcrypt with a fresh salt."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    return await run_in_threadpool(_hash_sync, password, rounds)


async def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Returns False on mismatch. Raises ValueError if the stored hash is not
    a bcrypt digest.
    """
    return await run_in_threadpool(_verify_sync, plain_password, hashed_password)
