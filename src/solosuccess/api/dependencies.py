"""Shared FastAPI dependencies."""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.pagination import PaginationParams
from solosuccess.infrastructure.database import db


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits on success, rolls back on error."""
    async with db.session() as session:
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Pagination = Annotated[PaginationParams, Depends()]
