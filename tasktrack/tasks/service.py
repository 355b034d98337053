"""
TaskTrack API - Task Service

Business logic for task operations. Every operation takes the caller's user
id and only ever touches that user's tasks; a task owned by someone else is
reported exactly like a task that does not exist.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Callable

from tasktrack.errors import TaskNotFoundError, TitleRequiredError
from tasktrack.tasks.models import Task
from tasktrack.tasks.repository import TaskRepositoryInterface
from tasktrack.tasks.enums import TaskPriority, TaskStatus
from tasktrack.tasks.schemas import TaskCreateRequest, TaskUpdateRequest, TaskResponse

logger = logging.getLogger(__name__)

# Fields where an explicit null means "leave unchanged"
_NULL_KEEPS_VALUE = ("title", "description", "status", "priority")


def _clean_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise TitleRequiredError()
    return title


class TaskService:
    """Service layer for task business logic."""

    def __init__(
        self,
        repository: TaskRepositoryInterface,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the task service.

        Args:
            repository: Task repository implementation
            clock: Optional clock function for testing (returns current datetime)
        """
        self.repository = repository
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _now(self) -> datetime:
        """Get current time using the configured clock."""
        return self._clock()

    @staticmethod
    def _task_to_response(task: Task) -> TaskResponse:
        return TaskResponse(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    async def create_task(
        self,
        owner_id: int,
        request: TaskCreateRequest,
    ) -> TaskResponse:
        """Create a new task owned by ``owner_id``."""
        task = Task.create(
            user_id=owner_id,
            title=_clean_title(request.title),
            description=request.description or "",
            status=request.status,
            priority=request.priority,
            due_date=request.due_date,
            now=self._now(),
        )
        task = await self.repository.create(task)
        logger.debug("Created task id=%s for user id=%s", task.id, owner_id)
        return self._task_to_response(task)

    async def get_task(self, task_id: int, owner_id: int) -> TaskResponse:
        """Get a task by ID, scoped to owner."""
        task = await self.repository.get_by_id(task_id, owner_id)
        if task is None:
            raise TaskNotFoundError()
        return self._task_to_response(task)

    async def list_tasks(
        self,
        owner_id: int,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        search: Optional[str] = None,
    ) -> List[TaskResponse]:
        """List tasks for owner, newest first, with optional filters."""
        tasks = await self.repository.list_by_owner(
            owner_id=owner_id,
            status=status,
            priority=priority,
            search=search.strip() if search else None,
        )
        return [self._task_to_response(task) for task in tasks]

    async def update_task(
        self,
        task_id: int,
        owner_id: int,
        request: TaskUpdateRequest,
    ) -> TaskResponse:
        """Apply the fields present in ``request`` to an owned task."""
        current = await self.repository.get_by_id(task_id, owner_id)
        if current is None:
            raise TaskNotFoundError()

        # exclude_unset tells "omitted" apart from "sent as null"
        provided = request.model_dump(exclude_unset=True)
        updates: dict = {}
        for key in _NULL_KEEPS_VALUE:
            if provided.get(key) is not None:
                updates[key] = provided[key]
        if "title" in updates:
            updates["title"] = _clean_title(updates["title"])
        if "due_date" in provided:
            updates["due_date"] = provided["due_date"]

        updates["updated_at"] = self._now()

        task = await self.repository.update(task_id, owner_id, updates)
        if task is None:
            # Deleted between the ownership check and the write
            raise TaskNotFoundError()
        return self._task_to_response(task)

    async def delete_task(self, task_id: int, owner_id: int) -> None:
        """Delete a task, scoped to owner."""
        if await self.repository.get_by_id(task_id, owner_id) is None:
            raise TaskNotFoundError()
        if not await self.repository.delete(task_id, owner_id):
            raise TaskNotFoundError()
        logger.debug("Deleted task id=%s for user id=%s", task_id, owner_id)
