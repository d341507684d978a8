"""Chat conversation model."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import Column, JSON, Index
from sqlmodel import Field

from solosuccess.infrastructure.database.base_model import BaseModel


class Conversation(BaseModel, table=True):
    """
    A chat thread between a user and one agent persona.

    `messages` holds the full transcript as a JSON list of
    ``{"role", "content", "timestamp"}`` objects.
    """

    __tablename__ = "conversations"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    agent_id: str = Field(max_length=32, nullable=False, index=True)
    title: Optional[str] = Field(default=None, max_length=255)
    messages: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    message_count: int = Field(default=0, nullable=False)
    last_message_at: Optional[datetime] = Field(default=None)

    __table_args__ = (
        Index('ix_conversations_user_last_message', 'user_id', 'last_message_at'),
    )
