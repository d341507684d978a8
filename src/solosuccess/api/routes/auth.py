"""Registration, sign-in and the current user."""
from fastapi import APIRouter, Request, Response, status

from solosuccess.api.dependencies import DbSession
from solosuccess.api.middleware.rate_limit import limiter
from solosuccess.api.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.auth.security import create_access_token
from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.database.models import User
from solosuccess.services.users import UserService

router = APIRouter()


def _token_response(user: User) -> TokenResponse:
    token, expires_in = create_access_token(user.id, user.email)
    return TokenResponse(
        access_token=token,
        expires_in=expires_in,
        user=UserRead.model_validate(user),
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        400: {"description": "Invalid email or password shorter than 8 characters"},
        409: {"description": "Email already registered"},
    },
)
async def register(data: RegisterRequest, session: DbSession):
    """Create an account and return an access token for it."""
    user = await UserService(session).register(data)
    return _token_response(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Sign in with email and password",
    responses={
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many login attempts"},
    },
)
@limiter.limit(lambda: get_settings().rate_limit_login)
async def login(request: Request, response: Response, data: LoginRequest, session: DbSession):
    """
    Exchange credentials for a bearer token.

    **Rate Limiting:** 10 requests/minute per IP
    """
    user = await UserService(session).authenticate(data.email, data.password)
    return _token_response(user)


@router.get("/me", response_model=UserRead, summary="Current user")
async def me(user: CurrentUser):
    return user
