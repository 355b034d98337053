"""
TaskTrack API - Task Models

Internal task model for database operations.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from tasktrack.tasks.enums import TaskPriority, TaskStatus


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class Task:
    """Task entity for database storage.

    ``user_id`` is the owning user and never changes after creation.
    """

    user_id: int
    title: str
    id: Optional[int] = None
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(
        cls,
        user_id: int,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.TODO,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> "Task":
        """Create a new, not yet persisted task."""
        now = now or _utcnow()
        return cls(
            user_id=user_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert task to dictionary for MongoDB storage."""
        return {
            "_id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            # BSON has no date-only type
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create task from MongoDB document."""
        due_date = data.get("due_date")
        return cls(
            id=data["_id"],
            user_id=data["user_id"],
            title=data["title"],
            description=data.get("description") or "",
            status=TaskStatus(data["status"]),
            priority=TaskPriority(data["priority"]),
            due_date=date.fromisoformat(due_date) if due_date else None,
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
