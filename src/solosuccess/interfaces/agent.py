# src/solosuccess/interfaces/agent.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, AsyncGenerator
from dataclasses import dataclass, field


@dataclass
class AgentInput:
    """Standard input to any chat agent."""
    message: str
    conversation_id: str | None = None
    history: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class AgentOutput:
    """Standard output from any chat agent."""
    content: str
    metadata: dict[str, Any] | None = None


@dataclass
class StreamChunk:
    """Chunk emitted during streaming."""
    type: str  # "text", "done", "error"
    content: str = ""
    metadata: dict[str, Any] | None = None


class IAgent(ABC):
    """
    Interface for a chat agent.

    Example:
        class EchoBackAgent(IAgent):
            async def invoke(self, input: AgentInput) -> AgentOutput:
                return AgentOutput(content=input.message)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this agent."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description."""
        pass

    @abstractmethod
    async def invoke(self, input: AgentInput) -> AgentOutput:
        """
        Produce a complete reply.

        Args:
            input: Standardized agent input

        Returns:
            Standardized agent output
        """
        pass

    @abstractmethod
    async def stream(self, input: AgentInput) -> AsyncGenerator[StreamChunk, None]:
        """
        Produce a reply incrementally.

        Yields:
            StreamChunk for each piece of output
        """
        pass
