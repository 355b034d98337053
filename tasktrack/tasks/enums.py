"""
TaskTrack API - Task Enums

Allowed values for task status and priority. These strings are part of the
public API and are shared with the frontend.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Task status values."""
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskPriority(str, Enum):
    """Task priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
