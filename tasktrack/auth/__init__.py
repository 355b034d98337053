"""
TaskTrack API - Authentication Module

Register/login with bcrypt credentials and JWT session tokens.
"""

from tasktrack.auth.router import router as auth_router
from tasktrack.auth.dependencies import CurrentPrincipal, get_principal

__all__ = ["auth_router", "CurrentPrincipal", "get_principal"]
