"""
TaskTrack API - Task Repository

Repository pattern for task data access.
Includes MongoDB implementation for runtime and interface for testing.
"""

import itertools
import re
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date, datetime
from enum import Enum
from typing import Optional, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from tasktrack.database import next_sequence
from tasktrack.tasks.models import Task
from tasktrack.tasks.enums import TaskPriority, TaskStatus


class TaskRepositoryInterface(ABC):
    """
    Abstract interface for task repository.

    Enables swapping implementations (MongoDB for runtime, in-memory for tests).
    All operations are scoped by owner_id to enforce ownership isolation.
    """

    @abstractmethod
    async def create(self, task: Task) -> Task:
        """Persist a new task and return it with its assigned id."""
        pass

    @abstractmethod
    async def get_by_id(self, task_id: int, owner_id: int) -> Optional[Task]:
        pass

    @abstractmethod
    async def list_by_owner(
        self,
        owner_id: int,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        """List tasks for owner, newest first, with optional filters."""
        pass

    @abstractmethod
    async def update(self, task_id: int, owner_id: int, updates: dict) -> Optional[Task]:
        pass

    @abstractmethod
    async def delete(self, task_id: int, owner_id: int) -> bool:
        pass


def _storage_value(value):
    if isinstance(value, Enum):
        return value.value
    # datetime is a date subclass but BSON stores it natively
    if isinstance(value, date) and not isinstance(value, datetime):
        return value.isoformat()
    return value


class TaskRepository(TaskRepositoryInterface):
    """
    MongoDB implementation of the task repository.

    All queries are scoped by owner_id to enforce ownership isolation.
    """

    COLLECTION_NAME = "tasks"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def create(self, task: Task) -> Task:
        task = replace(task, id=await next_sequence(self.db, self.COLLECTION_NAME))
        await self.collection.insert_one(task.to_dict())
        return task

    async def get_by_id(self, task_id: int, owner_id: int) -> Optional[Task]:
        doc = await self.collection.find_one({"_id": task_id, "user_id": owner_id})
        if doc is None:
            return None
        return Task.from_dict(doc)

    async def list_by_owner(
        self,
        owner_id: int,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        query: dict = {"user_id": owner_id}

        if status is not None:
            query["status"] = status.value
        if priority is not None:
            query["priority"] = priority.value
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{"title": pattern}, {"description": pattern}]

        cursor = self.collection.find(query).sort([("created_at", -1), ("_id", -1)])
        tasks: List[Task] = []
        async for doc in cursor:
            tasks.append(Task.from_dict(doc))
        return tasks

    async def update(self, task_id: int, owner_id: int, updates: dict) -> Optional[Task]:
        # TaskService always sets updated_at, so $set is never empty
        result = await self.collection.find_one_and_update(
            {"_id": task_id, "user_id": owner_id},
            {"$set": {key: _storage_value(value) for key, value in updates.items()}},
            return_document=True,
        )
        if result is None:
            return None
        return Task.from_dict(result)

    async def delete(self, task_id: int, owner_id: int) -> bool:
        result = await self.collection.delete_one({"_id": task_id, "user_id": owner_id})
        return result.deleted_count > 0


class InMemoryTaskRepository(TaskRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._tasks: dict[int, Task] = {}
        self._ids = itertools.count(1)

    def clear(self) -> None:
        self._tasks.clear()
        self._ids = itertools.count(1)

    async def create(self, task: Task) -> Task:
        task = replace(task, id=next(self._ids))
        self._tasks[task.id] = task
        return task

    async def get_by_id(self, task_id: int, owner_id: int) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None or task.user_id != owner_id:
            return None
        return task

    async def list_by_owner(
        self,
        owner_id: int,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        needle = search.lower() if search else None
        results: List[Task] = []

        for task in self._tasks.values():
            if task.user_id != owner_id:
                continue
            if status is not None and task.status != status:
                continue
            if priority is not None and task.priority != priority:
                continue
            if needle and needle not in task.title.lower() and needle not in task.description.lower():
                continue
            results.append(task)

        results.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        return results

    async def update(self, task_id: int, owner_id: int, updates: dict) -> Optional[Task]:
        task = await self.get_by_id(task_id, owner_id)
        if task is None:
            return None

        for key, value in updates.items():
            if hasattr(task, key):
                setattr(task, key, value)
        return task

    async def delete(self, task_id: int, owner_id: int) -> bool:
        if await self.get_by_id(task_id, owner_id) is None:
            return False
        del self._tasks[task_id]
        return True
