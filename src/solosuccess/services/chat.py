"""
Chat with agent personas.

A conversation stores its full transcript; only the newest
`chat_history_limit` messages are sent back to the model as context.
"""

import json
from typing import Any, AsyncIterator, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.agent.registry import agent_registry
from solosuccess.api.schemas.chat import ChatRequest
from solosuccess.config.settings import get_settings
from solosuccess.domain.exceptions import NotFound
from solosuccess.infrastructure.database import db, utcnow
from solosuccess.infrastructure.database.models.conversation import Conversation
from solosuccess.infrastructure.database.repositories import ConversationRepository
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.infrastructure.observability.metrics import (
    ACTIVE_STREAMS,
    CHAT_COMPLETIONS,
    CHAT_TOKENS_USED_TOTAL,
)
from solosuccess.interfaces import AgentInput, AgentOutput, IAgent

logger = get_logger(__name__)

TITLE_MAX_LENGTH = 60


def conversation_title(message: str) -> str:
    """First line of the opening message, shortened to fit a list row."""
    first_line = message.strip().splitlines()[0] if message.strip() else "New conversation"
    if len(first_line) <= TITLE_MAX_LENGTH:
        return first_line
    return first_line[:TITLE_MAX_LENGTH - 3].rstrip() + "..."


def get_agent(agent_id: str) -> IAgent:
    agent = agent_registry.get(agent_id)
    if agent is None:
        raise NotFound(
            f"Unknown agent: {agent_id}",
            details={"agent_id": agent_id},
            suggested_action="List available agents at /api/v1/chat/agents",
        )
    return agent


def _record_usage(agent_id: str, usage: Optional[dict[str, Any]]) -> None:
    if not usage:
        return
    for token_type in ("prompt_tokens", "completion_tokens"):
        if usage.get(token_type):
            CHAT_TOKENS_USED_TOTAL.labels(
                agent_id=agent_id, token_type=token_type.split("_")[0]
            ).inc(usage[token_type])


class ChatService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.conversations = ConversationRepository(session)

    async def get_conversation(self, user_id: UUID, conversation_id: UUID) -> Conversation:
        conversation = await self.conversations.get_owned(conversation_id, user_id)
        if conversation is None:
            raise NotFound(
                "Conversation not found", details={"conversation_id": str(conversation_id)}
            )
        return conversation

    async def list_conversations(
        self, user_id: UUID, agent_id: Optional[str] = None, limit: int = 20
    ) -> Sequence[Conversation]:
        return await self.conversations.recent(user_id, limit=limit, agent_id=agent_id)

    async def delete_conversation(self, user_id: UUID, conversation_id: UUID) -> None:
        conversation = await self.get_conversation(user_id, conversation_id)
        await self.conversations.delete_entity(conversation)

    async def open_conversation(self, user_id: UUID, request: ChatRequest) -> Conversation:
        """
        Load the requested conversation or start a new one.

        Raises:
            NotFound: If conversation_id is not one of the caller's conversations
        """
        if request.conversation_id is not None:
            return await self.get_conversation(user_id, request.conversation_id)

        return await self.conversations.create(
            Conversation(
                user_id=user_id,
                agent_id=request.agent_id.lower(),
                title=conversation_title(request.message),
            )
        )

    @staticmethod
    def build_input(conversation: Conversation, message: str) -> AgentInput:
        limit = get_settings().chat_history_limit
        history = list(conversation.messages or [])[-limit:] if limit > 0 else []
        return AgentInput(message=message, conversation_id=str(conversation.id), history=history)

    async def append_exchange(
        self, conversation: Conversation, user_message: str, reply: str
    ) -> Conversation:
        now = utcnow()
        timestamp = now.isoformat()
        messages = list(conversation.messages or [])
        messages.append({"role": "user", "content": user_message, "timestamp": timestamp})
        messages.append({"role": "assistant", "content": reply, "timestamp": timestamp})

        return await self.conversations.apply_update(
            conversation,
            messages=messages,
            message_count=len(messages),
            last_message_at=now,
        )

    async def send(self, user_id: UUID, request: ChatRequest) -> tuple[Conversation, AgentOutput]:
        """
        Send one message and store both sides of the exchange.

        Raises:
            NotFound: Unknown agent or conversation
            LLMUnavailable: OpenAI is not configured
            LLMError: The provider call failed
        """
        agent = get_agent(request.agent_id)
        conversation = await self.open_conversation(user_id, request)
        agent_input = self.build_input(conversation, request.message)

        try:
            output = await agent.invoke(agent_input)
        except Exception:
            CHAT_COMPLETIONS.labels(agent_id=agent.name, status="error").inc()
            raise

        CHAT_COMPLETIONS.labels(agent_id=agent.name, status="success").inc()
        _record_usage(agent.name, (output.metadata or {}).get("usage"))

        conversation = await self.append_exchange(conversation, request.message, output.content)
        logger.info(
            "Chat exchange completed",
            agent_id=agent.name,
            conversation_id=str(conversation.id),
            message_count=conversation.message_count,
        )
        return conversation, output


def sse_event(payload: Any) -> str:
    data = payload if isinstance(payload, str) else json.dumps(payload)
    return f"data: {data}\n\n"


async def stream_exchange(
    agent: IAgent, conversation_id: UUID, agent_input: AgentInput
) -> AsyncIterator[str]:
    """
    Relay an agent stream as Server-Sent Events.

    The reply is stored once the stream ends, in a session of its own since
    the request's session is already closed by then.
    """
    ACTIVE_STREAMS.inc()
    parts: list[str] = []
    failed = False
    try:
        async for chunk in agent.stream(agent_input):
            if chunk.type == "text":
                parts.append(chunk.content)
                yield sse_event({"content": chunk.content})
            elif chunk.type == "error":
                failed = True
                yield sse_event({"error": chunk.content or "AI service error"})

        reply = "".join(parts)
        if reply:
            async with db.session() as session:
                service = ChatService(session)
                conversation = await service.conversations.get(conversation_id)
                if conversation is not None:
                    await service.append_exchange(conversation, agent_input.message, reply)

        CHAT_COMPLETIONS.labels(agent_id=agent.name, status="error" if failed else "success").inc()
        logger.info(
            "Chat stream completed",
            agent_id=agent.name,
            conversation_id=str(conversation_id),
            failed=failed,
        )
        yield sse_event({"conversation_id": str(conversation_id)})
        yield sse_event("[DONE]")
    finally:
        ACTIVE_STREAMS.dec()
