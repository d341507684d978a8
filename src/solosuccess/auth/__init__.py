"""
Authentication: bcrypt password hashing, HS256 access tokens and the
`CurrentUser` dependency.

Basic Usage:
    >>> from solosuccess.auth import CurrentUser
    >>>
    >>> @router.get("/me")
    >>> async def me(user: CurrentUser):
    ...     return user
"""

from solosuccess.auth.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from solosuccess.auth.dependencies import CurrentUser, get_current_user

__all__ = [
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "CurrentUser",
    "get_current_user",
]
