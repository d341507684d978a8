"""Tasks of the signed-in user."""
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from solosuccess.api.dependencies import DbSession, Pagination
from solosuccess.api.schemas.goals import (
    PriorityLiteral,
    StatusLiteral,
    TaskBulkResult,
    TaskBulkUpdate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)
from solosuccess.api.schemas.pagination import PaginatedResponse
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.services.goals import TaskService

router = APIRouter()

TaskSortField = Literal["created_at", "updated_at", "due_date", "priority", "title"]


@router.get("", response_model=PaginatedResponse[TaskRead])
async def list_tasks(
    user: CurrentUser,
    session: DbSession,
    pagination: Pagination,
    status_filter: Optional[StatusLiteral] = Query(default=None, alias="status"),
    priority: Optional[PriorityLiteral] = None,
    goal_id: Optional[UUID] = None,
    category: Optional[str] = None,
    sort_by: TaskSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
):
    result = await TaskService(session).search(
        user.id,
        status=status_filter,
        priority=priority,
        goal_id=goal_id,
        category=category,
        sort_by=sort_by,
        order=order,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return PaginatedResponse.build(result, TaskRead)


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid priority or status value"},
        404: {"description": "goal_id is not one of the caller's goals"},
    },
)
async def create_task(data: TaskCreate, user: CurrentUser, session: DbSession):
    return await TaskService(session).create(user.id, data)


# Registered before /{task_id} so "bulk" is not parsed as an id
@router.patch(
    "/bulk",
    response_model=TaskBulkResult,
    summary="Update many tasks",
)
async def bulk_update_tasks(data: TaskBulkUpdate, user: CurrentUser, session: DbSession):
    """
    Set status and/or priority on up to 100 tasks.

    Ids that are unknown or belong to another user are returned in
    `not_found`; the other tasks are still updated.
    """
    return await TaskService(session).bulk_update(user.id, data)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(task_id: UUID, user: CurrentUser, session: DbSession):
    return await TaskService(session).get(user.id, task_id)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(task_id: UUID, data: TaskUpdate, user: CurrentUser, session: DbSession):
    return await TaskService(session).update(user.id, task_id, data)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: UUID, user: CurrentUser, session: DbSession):
    await TaskService(session).delete(user.id, task_id)
