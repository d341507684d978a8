"""Dashboard overview."""
from fastapi import APIRouter

from solosuccess.api.dependencies import DbSession
from solosuccess.api.schemas.onboarding import DashboardResponse
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.services.dashboard import DashboardService

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(user: CurrentUser, session: DbSession):
    return await DashboardService(session).overview(user)
