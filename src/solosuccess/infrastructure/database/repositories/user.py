from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.models.user import User
from solosuccess.infrastructure.database.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup of a live (not soft-deleted) user."""
        query = select(User).where(func.lower(User.email) == email.lower())
        query = self._exclude_deleted(query)
        result = await self.session.execute(query)
        return result.scalars().first()
