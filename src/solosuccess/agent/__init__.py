from .personas import Persona, PERSONAS, get_persona, list_personas
from .registry import AgentRegistry, agent_registry

__all__ = [
    "Persona",
    "PERSONAS",
    "get_persona",
    "list_personas",
    "AgentRegistry",
    "agent_registry",
]
