"""Tests for routerproxy.models and the fixed prompts."""

import pytest
from pydantic import ValidationError

from routerproxy.models import ChatMessage, ResponseSchema, Role
from routerproxy.prompts import CONTENT_IDEA_PROMPT, WEATHER_SCHEMA


def test_chat_message_is_frozen():
    msg = ChatMessage.user("hi")
    with pytest.raises(ValidationError):
        msg.content = "changed"


def test_chat_message_roles():
    assert ChatMessage.user("a").role == "user"
    assert ChatMessage.assistant("b").model_dump() == {"role": "assistant", "content": "b"}
    assert ChatMessage(role=Role.SYSTEM, content="c").role == "system"


def test_chat_message_rejects_unknown_role():
    with pytest.raises(ValidationError):
        ChatMessage(role="tool", content="x")


def test_weather_schema_wire_form():
    payload = WEATHER_SCHEMA.to_payload()

    assert payload["name"] == "weather"
    assert payload["strict"] is True
    assert payload["schema"]["type"] == "object"
    assert payload["schema"]["additionalProperties"] is False
    assert payload["schema"]["properties"]["temperature"] == {
        "type": "number",
        "description": "Temperature in Celsius",
    }


def test_schema_keeps_extra_property_keys():
    schema = ResponseSchema.model_validate(
        {
            "name": "tags",
            "schema": {
                "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
                "required": ["tags"],
            },
        }
    )
    prop = schema.to_payload()["schema"]["properties"]["tags"]
    assert prop["items"] == {"type": "string"}


def test_content_idea_prompt_embeds_schema():
    assert CONTENT_IDEA_PROMPT.startswith('Expand the niche "Beginner-friendly personal finance"')
    assert '"required":["response_message","title","ideas","follow_up_question"]' in CONTENT_IDEA_PROMPT
    assert CONTENT_IDEA_PROMPT.endswith("The response must be valid JSON that can be parsed directly.")
