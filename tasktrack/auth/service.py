import logging
from functools import lru_cache
from dataclasses import dataclass
from typing import Optional

import bcrypt

from tasktrack.auth.models import User
from tasktrack.auth.repository import UserRepositoryInterface
from tasktrack.auth.tokens import TokenService
from tasktrack.auth.validation import require_credentials, validate_registration
from tasktrack.errors import InvalidCredentialsError, UsernameTakenError

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes; newer releases reject longer input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    """Hash checked when the username is unknown, so both failure paths cost the same."""
    return bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=rounds)).decode("utf-8")


@dataclass(frozen=True)
class AuthResult:
    """A freshly authenticated session."""

    user: User
    token: str


class AuthService:
    """Authentication service with password hashing and session issuance."""

    def __init__(
        self,
        repository: UserRepositoryInterface,
        tokens: TokenService,
        bcrypt_rounds: int = 10,
    ):
        self.repository = repository
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt."""
        password_bytes = _password_bytes(password)
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        try:
            return bcrypt.checkpw(
                _password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError:
            return False

    async def register_user(self, username: Optional[str], password: Optional[str]) -> AuthResult:
        """Validate, persist and log in a new user."""
        validate_registration(username, password)

        if await self.repository.exists_by_username(username):
            logger.info("Registration rejected, username taken: %s", username)
            raise UsernameTakenError()

        user = User.create(username=username, password_hash=self.hash_password(password))
        user = await self.repository.create(user)
        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return AuthResult(user=user, token=self.tokens.issue(user.id))

    async def authenticate_user(self, username: Optional[str], password: Optional[str]) -> AuthResult:
        """Verify credentials and issue a session token."""
        require_credentials(username, password)

        user = await self.repository.get_by_username(username)
        if user is None:
            self.verify_password(password, _dummy_hash(self.bcrypt_rounds))
            logger.info("Login failed for username=%s", username)
            raise InvalidCredentialsError()
        if not self.verify_password(password, user.password_hash):
            logger.info("Login failed for username=%s", username)
            raise InvalidCredentialsError()

        return AuthResult(user=user, token=self.tokens.issue(user.id))

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return await self.repository.get_by_id(user_id)
