"""
Shared Pydantic models for the OpenRouter gateway.

Defines the data structures passed to and from the gateway:
  - ChatMessage: One immutable conversation turn
  - ResponseSchema: A JSON-Schema `response_format` hint
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, enum.Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """A single conversation turn. Lists of these are kept in chronological order."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> ChatMessage:
        return cls(role=Role.ASSISTANT, content=content)


class SchemaProperty(BaseModel):
    """One field of a structured response. Extra JSON-Schema keys are kept."""

    model_config = ConfigDict(extra="allow")

    type: str
    description: str = ""


class JsonSchemaBody(BaseModel):
    """The `schema` part of a ResponseSchema."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = "object"
    properties: dict[str, SchemaProperty] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    additional_properties: bool = Field(default=False, alias="additionalProperties")


class ResponseSchema(BaseModel):
    """
    Structured-output constraint sent as `response_format.json_schema`.

    Used only as an outbound hint; replies are not validated against it.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    strict: bool = True
    schema_: JsonSchemaBody = Field(alias="schema")

    def to_payload(self) -> dict[str, Any]:
        """Wire form, e.g. {"name": ..., "strict": true, "schema": {...}}."""
        return self.model_dump(by_alias=True, exclude_none=True)
