"""
TaskTrack API - Security Validation

Startup checks for security-relevant configuration.
"""

import warnings

from tasktrack.config import Settings, settings as default_settings
from tasktrack.errors import ConfigurationError

MIN_SECRET_LENGTH = 32


def validate_security_config(settings: Settings = default_settings) -> None:
    """
    Validate security configuration on startup.

    A missing JWT secret is fatal: the application refuses to start rather
    than failing on every request. Weak but present settings only warn.
    """
    if not settings.JWT_SECRET_KEY:
        raise ConfigurationError(
            "JWT_SECRET_KEY is not set. Provide a signing secret via the environment."
        )

    if len(settings.JWT_SECRET_KEY) < MIN_SECRET_LENGTH:
        warnings.warn(
            "SECURITY WARNING: JWT_SECRET_KEY is shorter than "
            f"{MIN_SECRET_LENGTH} characters.",
            UserWarning,
        )

    if "*" in settings.CORS_ORIGINS:
        warnings.warn(
            "SECURITY WARNING: CORS wildcard (*) detected. "
            "Set specific origins via CORS_ORIGINS.",
            UserWarning,
        )
