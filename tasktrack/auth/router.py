"""
TaskTrack API - Authentication Router

Endpoints for user registration, login, and current user info.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from tasktrack.auth.schemas import AuthResponse, CredentialsRequest, UserResponse
from tasktrack.auth.service import AuthService
from tasktrack.auth.dependencies import CurrentPrincipal, get_auth_service
from tasktrack.errors import InvalidTokenError


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: CredentialsRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Register a new user and log them in.

    - Username must be at least 3 characters
    - Password must be at least 6 characters and contain a number
      and one of `! @ # $ % ^ & *`
    """
    result = await auth_service.register_user(
        username=request.username,
        password=request.password,
    )
    return AuthResponse(token=result.token, username=result.user.username)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login and get a session token",
)
async def login(
    request: CredentialsRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate user and return a JWT session token.

    Use the returned token in the Authorization header:
    `Authorization: Bearer <token>`
    """
    result = await auth_service.authenticate_user(
        username=request.username,
        password=request.password,
    )
    return AuthResponse(token=result.token, username=result.user.username)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user info",
)
async def get_me(
    principal: CurrentPrincipal,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserResponse:
    """
    Get the current authenticated user's public information.
    """
    user = await auth_service.get_user_by_id(principal.user_id)
    if user is None:
        raise InvalidTokenError()
    return UserResponse(id=user.id, username=user.username, created_at=user.created_at)
