"""Onboarding completion."""
from fastapi import APIRouter

from solosuccess.api.dependencies import DbSession
from solosuccess.api.schemas.onboarding import OnboardingRequest, OnboardingResult
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.services.onboarding import OnboardingService

router = APIRouter()


@router.post("/complete", response_model=OnboardingResult)
async def complete_onboarding(data: OnboardingRequest, user: CurrentUser, session: DbSession):
    """
    Create the starter briefcase, goals and tasks.

    Safe to call more than once; steps that already happened are skipped.
    """
    return await OnboardingService(session).complete(user, data)
