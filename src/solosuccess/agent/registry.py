"""
Agent registry for chat agents.

Populated with one `PersonaChatAgent` per persona. Tests register their own
IAgent under a persona id to replace the OpenAI-backed one.
"""
from solosuccess.agent.openai_chat import PersonaChatAgent
from solosuccess.agent.personas import list_personas
from solosuccess.interfaces import IAgent


class AgentRegistry:
    """
    Registry for agent implementations, keyed by agent name.

    Example:
        >>> registry.register(MyAgent())
        >>> agent = registry.get("my_agent")
    """

    def __init__(self):
        self._agents: dict[str, IAgent] = {}

    def register(self, agent: IAgent) -> None:
        self._agents[agent.name] = agent

    def unregister(self, name: str) -> None:
        self._agents.pop(name, None)

    def get(self, name: str) -> IAgent | None:
        return self._agents.get(name.lower())

    def list(self) -> list[IAgent]:
        return list(self._agents.values())

    def register_personas(self) -> None:
        """(Re)register the OpenAI-backed agent for every persona."""
        for persona in list_personas():
            self.register(PersonaChatAgent(persona))


agent_registry = AgentRegistry()
agent_registry.register_personas()
