from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from tasktrack.config import settings
from tasktrack.database import get_database
from tasktrack.auth.models import Principal
from tasktrack.auth.repository import MongoUserRepository, UserRepositoryInterface
from tasktrack.auth.service import AuthService
from tasktrack.auth.tokens import TokenService
from tasktrack.errors import NoTokenError


# HTTP Bearer token scheme - auto_error=False to report missing tokens ourselves
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service() -> TokenService:
    """Dependency to get the token issuer/validator for the configured secret."""
    return TokenService.from_settings(settings)


async def get_user_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> UserRepositoryInterface:
    """Dependency to get user repository instance."""
    return MongoUserRepository(db)


def get_auth_service(
    repository: Annotated[UserRepositoryInterface, Depends(get_user_repository)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService(repository, tokens, bcrypt_rounds=settings.BCRYPT_ROUNDS)


def get_principal(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Principal:
    """
    Guard for protected routes.

    Reads ``Authorization: Bearer <token>`` and returns the caller's identity.
    No database lookup is made: a valid token is trusted until it expires.
    """
    # HTTPBearer matches the scheme case-insensitively; only "Bearer" is accepted
    if credentials is None or credentials.scheme != "Bearer":
        raise NoTokenError()
    return Principal(user_id=tokens.validate(credentials.credentials))


# Type alias for cleaner dependency injection
CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
