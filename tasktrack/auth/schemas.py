"""
TaskTrack API - Authentication Schemas

Pydantic models for authentication requests and responses.

Credential fields are deliberately unconstrained here: the registration rules
are checked in order by the service so the first failing rule is reported.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CredentialsRequest(BaseModel):
    """Request schema for registration and login."""

    username: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    """Response schema for successful registration or login."""

    token: str
    username: str


class UserResponse(BaseModel):
    """Public user information response."""

    id: int
    username: str
    created_at: datetime
