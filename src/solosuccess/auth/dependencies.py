"""
FastAPI authentication dependencies.

Usage:
    >>> from solosuccess.auth.dependencies import CurrentUser
    >>>
    >>> @router.get("/me")
    >>> async def get_me(user: CurrentUser):
    ...     return {"id": user.id, "email": user.email}
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from solosuccess.api.dependencies import DbSession
from solosuccess.auth.security import decode_access_token
from solosuccess.domain.exceptions import AuthError, TokenInvalid
from solosuccess.infrastructure.database.models import User
from solosuccess.infrastructure.database.repositories import UserRepository
from solosuccess.infrastructure.observability.error_tracking import set_user_context


oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,  # Missing tokens are reported through AuthError
)


async def get_current_user(
    request: Request,
    session: DbSession,
    token: Optional[str] = Depends(oauth2_scheme),
) -> User:
    """
    Resolve the bearer token to an active user.

    Raises:
        AuthError: 401 if the token is missing
        TokenExpired/TokenInvalid: 401 if the token cannot be verified
        TokenInvalid: 401 if the user no longer exists or is deactivated
    """
    if not token:
        raise AuthError("Not authenticated")

    claims = decode_access_token(token)

    user = await UserRepository(session).get(UUID(claims["sub"]))
    if user is None or not user.is_active:
        raise TokenInvalid("User no longer exists")

    # Plain values: the ORM instance is detached once the session closes
    request.state.user_info = {"user_id": str(user.id), "email": user.email}
    set_user_context(**request.state.user_info)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
