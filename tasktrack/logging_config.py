"""
TaskTrack API - Logging Setup

Configures stdlib logging once at startup and masks credentials that
would otherwise end up in log output.
"""

import logging
import re

from tasktrack.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SENSITIVE_PATTERNS = [
    (re.compile(r"(password['\"]?\s*[:=]\s*['\"]?)([^'\"\s,}]+)", re.IGNORECASE), r"\1***REDACTED***"),
    (re.compile(r"(bearer\s+)([A-Za-z0-9_\-\.]+)", re.IGNORECASE), r"\1***REDACTED***"),
    (re.compile(r"(mongodb(?:\+srv)?://)([^:/@]+):([^@]+)@"), r"\1\2:***REDACTED***@"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class RedactingFilter(logging.Filter):
    """Rewrite log records so passwords and bearer tokens are never emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        sanitized = sanitize_message(message)
        if sanitized != message:
            record.msg = sanitized
            record.args = None
        return True


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger from LOG_LEVEL."""
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    redactor = RedactingFilter()
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(redactor)
