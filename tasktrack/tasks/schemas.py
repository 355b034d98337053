"""
TaskTrack API - Task Schemas

Pydantic models for task API requests and responses.
"""

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, Field

from tasktrack.tasks.enums import TaskPriority, TaskStatus


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Empty strings from HTML date inputs mean "no due date"
DueDate = Annotated[Optional[date], BeforeValidator(_blank_to_none)]


class TaskCreateRequest(BaseModel):
    """Request model for creating a task.

    ``title`` is checked by the service (trimmed, non-empty) so that a
    missing and a blank title report the same error. Unknown fields,
    including any client-supplied owner, are ignored.
    """

    title: Optional[str] = Field(default=None, max_length=500, description="Task title")
    description: Optional[str] = Field(default=None, max_length=5000, description="Task description")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Task status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    due_date: DueDate = Field(default=None, description="Due date (YYYY-MM-DD)")


class TaskUpdateRequest(BaseModel):
    """Request model for updating a task.

    Only fields present in the payload are applied. ``due_date`` set to
    null or "" clears the due date; null for any other field is ignored.
    """

    title: Optional[str] = Field(default=None, max_length=500, description="Task title")
    description: Optional[str] = Field(default=None, max_length=5000, description="Task description")
    status: Optional[TaskStatus] = Field(default=None, description="Task status")
    priority: Optional[TaskPriority] = Field(default=None, description="Task priority")
    due_date: DueDate = Field(default=None, description="Due date (YYYY-MM-DD)")


class TaskResponse(BaseModel):
    """Response model for a single task."""

    id: int = Field(description="Task ID")
    user_id: int = Field(description="Owner user ID")
    title: str = Field(description="Task title")
    description: str = Field(description="Task description")
    status: TaskStatus = Field(description="Task status")
    priority: TaskPriority = Field(description="Task priority")
    due_date: Optional[date] = Field(default=None, description="Due date")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")
