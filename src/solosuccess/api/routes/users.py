"""Profile of the signed-in user."""
from fastapi import APIRouter

from solosuccess.api.dependencies import DbSession
from solosuccess.api.schemas.auth import ProfileUpdate, UserRead
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.services.users import UserService

router = APIRouter()


@router.get("/me/profile", response_model=UserRead)
async def get_profile(user: CurrentUser):
    return user


@router.patch("/me/profile", response_model=UserRead)
async def update_profile(data: ProfileUpdate, user: CurrentUser, session: DbSession):
    """
    Update profile fields.

    Omitted fields are left untouched; `notification_preferences` is merged
    into the stored preferences.
    """
    return await UserService(session).update_profile(user, data)
