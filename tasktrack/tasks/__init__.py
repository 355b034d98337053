"""
TaskTrack API - Tasks Module

CRUD operations for tasks, scoped to the authenticated user.
"""

from tasktrack.tasks.router import router as tasks_router

__all__ = ["tasks_router"]
