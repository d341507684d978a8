"""
OpenAI chat completions as IAgent.

One `PersonaChatAgent` exists per persona; all of them share a single
`AsyncOpenAI` client created on first use.
"""

from __future__ import annotations
from typing import Any, AsyncGenerator, Optional

from openai import AsyncOpenAI, APIError

from solosuccess.agent.personas import Persona
from solosuccess.config.settings import get_settings
from solosuccess.domain.exceptions import LLMError, LLMUnavailable
from solosuccess.interfaces.agent import IAgent, AgentInput, AgentOutput, StreamChunk
from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

_client: Optional[AsyncOpenAI] = None


def get_openai_client() -> AsyncOpenAI:
    """
    Shared AsyncOpenAI client.

    Raises:
        LLMUnavailable: If OPENAI_API_KEY is not configured
    """
    global _client

    if _client is None:
        settings = get_settings()
        if settings.openai_api_key is None:
            raise LLMUnavailable()

        client_kwargs: dict[str, Any] = {
            "api_key": settings.openai_api_key.get_secret_value(),
            "timeout": settings.openai_timeout,
        }
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        _client = AsyncOpenAI(**client_kwargs)

    return _client


def reset_openai_client() -> None:
    global _client
    _client = None


class PersonaChatAgent(IAgent):
    """Chat completions with a persona's system prompt and the conversation history."""

    def __init__(
        self,
        persona: Persona,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float = 0.7,
    ):
        settings = get_settings()
        self._persona = persona
        self._model = model or settings.openai_model
        self._max_tokens = max_tokens or settings.openai_max_tokens
        self._temperature = temperature

    @property
    def name(self) -> str:
        return self._persona.id

    @property
    def description(self) -> str:
        return self._persona.role

    @property
    def persona(self) -> Persona:
        return self._persona

    def _build_messages(self, input: AgentInput) -> list[dict[str, Any]]:
        messages = [{"role": "system", "content": self._persona.system_prompt}]
        messages.extend(
            {"role": m["role"], "content": m["content"]}
            for m in input.history
            if m.get("role") in ("user", "assistant")
        )
        messages.append({"role": "user", "content": input.message})
        return messages

    async def invoke(self, input: AgentInput) -> AgentOutput:
        client = get_openai_client()

        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=self._build_messages(input),
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except APIError as e:
            logger.error("Chat completion failed", agent_id=self.name, error=str(e))
            raise LLMError(details={"agent_id": self.name}) from e

        choice = response.choices[0]
        return AgentOutput(
            content=choice.message.content or "",
            metadata={
                "model": response.model,
                "usage": response.usage.model_dump() if response.usage else None,
                "finish_reason": choice.finish_reason,
            },
        )

    async def stream(self, input: AgentInput) -> AsyncGenerator[StreamChunk, None]:
        client = get_openai_client()

        try:
            stream = await client.chat.completions.create(
                model=self._model,
                messages=self._build_messages(input),
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta.content:
                    yield StreamChunk(type="text", content=delta.content)
        except APIError as e:
            logger.error("Chat stream failed", agent_id=self.name, error=str(e))
            yield StreamChunk(type="error", content="AI service error")
            return

        yield StreamChunk(type="done", metadata={"model": self._model})
