"""
TaskTrack API - Error Taxonomy

Typed application errors and the FastAPI handlers that render them.

Services raise subclasses of ``AppError``; each carries the HTTP status and a
stable machine-readable code. Anything that is not an ``AppError`` is treated
as an unexpected fault: it is logged with its traceback and the client only
sees a generic 500 response.
"""

import logging
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto a client-visible response."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    code: str = "app_error"
    message: str = "Application error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


# Error classes


class ValidationError(AppError):
    status = HTTPStatus.BAD_REQUEST
    code = "validation_error"
    message = "Invalid request"


class ConflictError(AppError):
    status = HTTPStatus.CONFLICT
    code = "conflict"
    message = "Resource already exists"


class AuthenticationError(AppError):
    status = HTTPStatus.UNAUTHORIZED
    code = "authentication_error"
    message = "Authentication failed"


class NotFoundError(AppError):
    status = HTTPStatus.NOT_FOUND
    code = "not_found"
    message = "Resource not found"


class ConfigurationError(AppError):
    """Raised at startup when required configuration is missing."""

    code = "configuration_error"
    message = "Invalid configuration"


# Registration / login


class MissingFieldsError(ValidationError):
    code = "missing_fields"
    message = "Username and password are required"


class UsernameTooShortError(ValidationError):
    code = "username_too_short"
    message = "Username must be at least 3 characters"


class PasswordTooShortError(ValidationError):
    code = "password_too_short"
    message = "Password must be at least 6 characters"


class PasswordMissingDigitError(ValidationError):
    code = "password_missing_digit"
    message = "Password must contain at least one number"


class PasswordMissingSymbolError(ValidationError):
    code = "password_missing_symbol"
    message = "Password must contain at least one special character"


class UsernameTakenError(ConflictError):
    code = "username_taken"
    message = "Username already taken"


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    message = "Invalid credentials"


# Session tokens


class NoTokenError(AuthenticationError):
    code = "no_token"
    message = "No token provided"


class InvalidTokenError(AuthenticationError):
    code = "invalid_token"
    message = "Invalid or expired token"


# Tasks


class TitleRequiredError(ValidationError):
    code = "title_required"
    message = "Title is required"


class TaskNotFoundError(NotFoundError):
    code = "task_not_found"
    message = "Task not found"


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.message
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"{location}: {first.get('msg', 'invalid value')}"
    return first.get("msg", ValidationError.message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the boundary handlers for the error taxonomy."""

    @app.exception_handler(AppError)
    async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        headers = None
        if exc.status == HTTPStatus.UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status,
            content=exc.to_dict(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=HTTPStatus.BAD_REQUEST,
            content={
                "detail": _format_validation_error(exc),
                "code": ValidationError.code,
            },
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception: %s %s (%s)",
            request.method,
            request.url.path,
            type(exc).__name__,
        )
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "code": "internal_error"},
        )
