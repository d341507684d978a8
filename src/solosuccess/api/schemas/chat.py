"""Chat agent and conversation schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AgentRead(BaseModel):
    id: str
    display_name: str
    role: str
    personality: str
    accent_color: str
    capabilities: list[str]


class ChatRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    agent_id: str = Field(..., min_length=1, max_length=32, examples=["blaze"])
    message: str = Field(..., min_length=1, max_length=10000)
    conversation_id: Optional[UUID] = None


class ChatResponse(BaseModel):
    conversation_id: UUID
    agent_id: str
    content: str
    model: Optional[str] = None
    usage: Optional[dict[str, Any]] = None
    created_at: datetime


class ChatMessage(BaseModel):
    role: str
    content: str
    timestamp: Optional[str] = None


class ConversationSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    agent_id: str
    title: Optional[str] = None
    message_count: int
    last_message_at: Optional[datetime] = None
    created_at: datetime


class ConversationRead(ConversationSummary):
    messages: list[ChatMessage]
