"""Unit tests for chat helpers and the agent registry."""

import json

import pytest

from solosuccess.agent.openai_chat import PersonaChatAgent
from solosuccess.agent.personas import list_personas
from solosuccess.agent.registry import agent_registry
from solosuccess.domain.exceptions import NotFound
from solosuccess.services.chat import TITLE_MAX_LENGTH, conversation_title, get_agent, sse_event


class TestConversationTitle:

    def test_short_message_used_as_is(self):
        assert conversation_title("Plan my launch week") == "Plan my launch week"

    def test_first_line_only(self):
        assert conversation_title("  Pricing ideas\nfor the new plan") == "Pricing ideas"

    def test_long_message_truncated(self):
        title = conversation_title("word " * 40)

        assert len(title) <= TITLE_MAX_LENGTH
        assert title.endswith("...")

    def test_blank_message(self):
        assert conversation_title("   ") == "New conversation"


class TestSseEvent:

    def test_json_payload(self):
        event = sse_event({"content": "Hi"})

        assert event.startswith("data: ")
        assert event.endswith("\n\n")
        assert json.loads(event[len("data: "):]) == {"content": "Hi"}

    def test_raw_string(self):
        assert sse_event("[DONE]") == "data: [DONE]\n\n"


class TestAgentRegistry:

    def test_every_persona_registered(self):
        names = {agent.name for agent in agent_registry.list()}

        assert {persona.id for persona in list_personas()} <= names

    def test_persona_agents_use_openai(self):
        assert isinstance(get_agent("blaze"), PersonaChatAgent)

    def test_unknown_agent(self):
        with pytest.raises(NotFound):
            get_agent("nobody")

    def test_personas_expose_public_fields(self):
        persona = list_personas()[0]

        assert set(persona.public_dict()) == {
            "id",
            "display_name",
            "role",
            "personality",
            "accent_color",
            "capabilities",
        }
