# src/solosuccess/interfaces/__init__.py
from .agent import IAgent, AgentInput, AgentOutput, StreamChunk

__all__ = [
    "IAgent",
    "AgentInput",
    "AgentOutput",
    "StreamChunk",
]
