"""Goals of the signed-in user."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from solosuccess.api.dependencies import DbSession, Pagination
from solosuccess.api.schemas.goals import GoalCreate, GoalRead, GoalUpdate, PriorityLiteral, StatusLiteral
from solosuccess.api.schemas.pagination import PaginatedResponse
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.services.goals import GoalService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[GoalRead])
async def list_goals(
    user: CurrentUser,
    session: DbSession,
    pagination: Pagination,
    status_filter: Optional[StatusLiteral] = Query(default=None, alias="status"),
    priority: Optional[PriorityLiteral] = None,
):
    result = await GoalService(session).search(
        user.id,
        status=status_filter,
        priority=priority,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return PaginatedResponse.build(result, GoalRead)


@router.post("", response_model=GoalRead, status_code=status.HTTP_201_CREATED)
async def create_goal(data: GoalCreate, user: CurrentUser, session: DbSession):
    return await GoalService(session).create(user.id, data)


@router.get("/{goal_id}", response_model=GoalRead)
async def get_goal(goal_id: UUID, user: CurrentUser, session: DbSession):
    return await GoalService(session).get(user.id, goal_id)


@router.patch("/{goal_id}", response_model=GoalRead)
async def update_goal(goal_id: UUID, data: GoalUpdate, user: CurrentUser, session: DbSession):
    """Setting status `completed` stamps completed_at and sets progress to 100."""
    return await GoalService(session).update(user.id, goal_id, data)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: UUID, user: CurrentUser, session: DbSession):
    """Delete a goal. Its tasks are kept with goal_id cleared."""
    await GoalService(session).delete(user.id, goal_id)
