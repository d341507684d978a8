from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.models.conversation import Conversation
from solosuccess.infrastructure.database.repositories.base import OwnedRepository


class ConversationRepository(OwnedRepository[Conversation]):
    def __init__(self, session: AsyncSession):
        super().__init__(Conversation, session)

    async def recent(
        self,
        user_id: UUID,
        limit: int = 20,
        agent_id: Optional[str] = None,
    ) -> Sequence[Conversation]:
        """Newest activity first; conversations without messages sort by creation."""
        query = self.apply_filters(self.for_user(user_id), {"agent_id": agent_id})
        query = query.order_by(
            desc(Conversation.last_message_at).nulls_last(),
            desc(Conversation.created_at),
        ).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()
