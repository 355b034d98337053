"""
TaskTrack API - Session Tokens

Issues and validates the signed, time-limited bearer tokens that identify a
user between requests. Tokens are self-contained JWTs; nothing is stored
server-side, so a token stays valid until it expires.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt

from tasktrack.config import Settings
from tasktrack.errors import ConfigurationError, InvalidTokenError


class TokenService:
    """JWT issuer and validator bound to one signing secret."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(days=7),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret_key:
            raise ConfigurationError("A JWT signing secret is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expires_delta=timedelta(days=settings.JWT_ACCESS_TOKEN_EXPIRE_DAYS),
        )

    def issue(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed token for ``user_id``."""
        if expires_delta is None:
            expires_delta = self.expires_delta

        now = self._clock()
        claims = {
            # RFC 7519 requires "sub" to be a string
            "sub": str(user_id),
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def validate(self, token: str) -> int:
        """Verify signature and expiry, returning the user id.

        Raises ``InvalidTokenError`` for any token that is forged, expired,
        malformed or missing a numeric subject.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise InvalidTokenError() from None

        subject = payload.get("sub")
        if subject is None:
            raise InvalidTokenError()
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise InvalidTokenError() from None
