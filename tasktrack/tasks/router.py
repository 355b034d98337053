"""
TaskTrack API - Task Router

CRUD endpoints for task management.
All endpoints are JWT-protected and user-scoped.
"""

from typing import Optional, Annotated, List

from fastapi import APIRouter, Depends, Query, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from tasktrack.database import get_database
from tasktrack.auth.dependencies import CurrentPrincipal
from tasktrack.tasks.service import TaskService
from tasktrack.tasks.repository import TaskRepository, TaskRepositoryInterface
from tasktrack.tasks.schemas import (
    TaskCreateRequest,
    TaskUpdateRequest,
    TaskResponse,
)
from tasktrack.tasks.enums import TaskPriority, TaskStatus


router = APIRouter(prefix="/tasks", tags=["Tasks"])


async def get_task_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> TaskRepositoryInterface:
    """Dependency to get task repository instance."""
    return TaskRepository(db)


async def get_task_service(
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)]
) -> TaskService:
    """Dependency to get task service instance."""
    return TaskService(repository)


@router.get(
    "",
    response_model=List[TaskResponse],
    summary="List tasks",
)
async def list_tasks(
    principal: CurrentPrincipal,
    service: Annotated[TaskService, Depends(get_task_service)],
    status_filter: Optional[TaskStatus] = Query(
        default=None,
        alias="status",
        description="Filter by task status",
    ),
    priority: Optional[TaskPriority] = Query(
        default=None,
        description="Filter by task priority",
    ),
    search: Optional[str] = Query(
        default=None,
        max_length=200,
        description="Case-insensitive match on title or description",
    ),
) -> List[TaskResponse]:
    """
    List the authenticated user's tasks, newest first.
    """
    return await service.list_tasks(
        owner_id=principal.user_id,
        status=status_filter,
        priority=priority,
        search=search,
    )


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    request: TaskCreateRequest,
    principal: CurrentPrincipal,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Create a new task for the authenticated user.

    The task is always owned by the caller.
    """
    return await service.create_task(owner_id=principal.user_id, request=request)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get a task by ID",
)
async def get_task(
    task_id: int,
    principal: CurrentPrincipal,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Returns 404 if the task doesn't exist or belongs to another user.
    """
    return await service.get_task(task_id, principal.user_id)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update a task",
)
async def update_task(
    task_id: int,
    request: TaskUpdateRequest,
    principal: CurrentPrincipal,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Update a task by ID.

    Only provided fields will be updated.
    Returns 404 if the task doesn't exist or belongs to another user.
    """
    return await service.update_task(task_id, principal.user_id, request)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a task",
)
async def delete_task(
    task_id: int,
    principal: CurrentPrincipal,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> Response:
    """
    Delete a task by ID.

    Returns 404 if the task doesn't exist or belongs to another user.
    """
    await service.delete_task(task_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
