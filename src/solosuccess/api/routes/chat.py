"""Chat with agent personas, plain and streamed."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, status
from fastapi.responses import StreamingResponse

from solosuccess.agent.openai_chat import PersonaChatAgent, get_openai_client
from solosuccess.agent.personas import list_personas
from solosuccess.api.dependencies import DbSession
from solosuccess.api.schemas.chat import (
    AgentRead,
    ChatRequest,
    ChatResponse,
    ConversationRead,
    ConversationSummary,
)
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.infrastructure.database import db
from solosuccess.services.chat import ChatService, get_agent, stream_exchange

router = APIRouter()


@router.get("/agents", response_model=list[AgentRead])
async def list_agents(user: CurrentUser):
    return [persona.public_dict() for persona in list_personas()]


@router.post(
    "",
    response_model=ChatResponse,
    responses={503: {"description": "AI service not configured"}},
)
async def send_message(data: ChatRequest, user: CurrentUser, session: DbSession):
    conversation, output = await ChatService(session).send(user.id, data)
    metadata = output.metadata or {}
    return ChatResponse(
        conversation_id=conversation.id,
        agent_id=conversation.agent_id,
        content=output.content,
        model=metadata.get("model"),
        usage=metadata.get("usage"),
        created_at=conversation.last_message_at or conversation.created_at,
    )


@router.post(
    "/stream",
    responses={
        200: {"content": {"text/event-stream": {}}},
        503: {"description": "AI service not configured"},
    },
)
async def stream_message(data: ChatRequest, user: CurrentUser):
    """
    Stream a reply as Server-Sent Events.

    Each event carries `{"content": ...}`; the stream ends with
    `{"conversation_id": ...}` and `[DONE]`.
    """
    agent = get_agent(data.agent_id)
    if isinstance(agent, PersonaChatAgent):
        # Fail with 503 now rather than after the 200 has been sent
        get_openai_client()

    async with db.session() as session:
        service = ChatService(session)
        conversation = await service.open_conversation(user.id, data)
        agent_input = service.build_input(conversation, data.message)
        conversation_id = conversation.id

    return StreamingResponse(
        stream_exchange(agent, conversation_id, agent_input),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/conversations", response_model=list[ConversationSummary])
async def list_conversations(
    user: CurrentUser,
    session: DbSession,
    agent_id: Optional[str] = None,
    limit: int = Query(default=20, ge=1, le=100),
):
    return await ChatService(session).list_conversations(user.id, agent_id=agent_id, limit=limit)


@router.get("/conversations/{conversation_id}", response_model=ConversationRead)
async def get_conversation(conversation_id: UUID, user: CurrentUser, session: DbSession):
    return await ChatService(session).get_conversation(user.id, conversation_id)


@router.delete("/conversations/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(conversation_id: UUID, user: CurrentUser, session: DbSession):
    await ChatService(session).delete_conversation(user.id, conversation_id)
