"""Authentication API endpoints."""

from fastapi import APIRouter, status

from tasklist.api.deps import DBSession
from tasklist.errors import error_boundary
from tasklist.models.user import AuthResponse, UserCreate, UserLogin, UserResponse
from tasklist.services.auth import authenticate_user, register_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user_endpoint(session: DBSession, user_data: UserCreate) -> AuthResponse:
    """Register a new user account."""
    with error_boundary("Failed to register"):
        user = await register_user(session, user_data)
    return AuthResponse(user=UserResponse.from_row(user))


@router.post("/login", response_model=AuthResponse)
async def login_user_endpoint(session: DBSession, credentials: UserLogin) -> AuthResponse:
    """Sign in with email and password.

    No token is issued; the client keeps the returned user id.
    """
    with error_boundary("Failed to login"):
        user = await authenticate_user(session, credentials)
    return AuthResponse(user=UserResponse.from_row(user))
