"""
TaskTrack API - Registration Rules

Credential rules checked before an account is created. Rules are applied in
a fixed order and the first one that fails is reported.
"""

import re
from typing import Optional

from tasktrack.errors import (
    MissingFieldsError,
    PasswordMissingDigitError,
    PasswordMissingSymbolError,
    PasswordTooShortError,
    UsernameTooShortError,
)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
PASSWORD_SYMBOLS = "!@#$%^&*"

_DIGIT_RE = re.compile(r"[0-9]")
_SYMBOL_RE = re.compile("[" + re.escape(PASSWORD_SYMBOLS) + "]")


def require_credentials(username: Optional[str], password: Optional[str]) -> None:
    """Both fields must be present and non-empty."""
    if not username or not password:
        raise MissingFieldsError()


def validate_registration(username: Optional[str], password: Optional[str]) -> None:
    """Raise the first failing registration rule, if any."""
    require_credentials(username, password)

    # Lengths count characters (code points), not bytes or UTF-16 units
    if len(username) < MIN_USERNAME_LENGTH:
        raise UsernameTooShortError()

    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordTooShortError()

    if not _DIGIT_RE.search(password):
        raise PasswordMissingDigitError()

    if not _SYMBOL_RE.search(password):
        raise PasswordMissingSymbolError()
