"""
API Response Models — Schema-first Pydantic models.

These models define the exact JSON shape returned by each route and
feed the auto-generated OpenAPI docs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from routerproxy.connectors.base_connector import ConnectorInfo
from routerproxy.models import ChatMessage


class GenerateResponse(BaseModel):
    response: Any = Field(description="Raw OpenRouter chat-completion body, as decoded")


class EndpointResponse(BaseModel):
    response: str = Field(description="Assistant reply text")
    success: bool = True


class CreditsResponse(BaseModel):
    credits: Any


class ProvidersResponse(BaseModel):
    providers: Any


class StructuredDataResponse(BaseModel):
    data: Any = Field(description="JSON value parsed from the model reply")


class ChatHistoryResponse(BaseModel):
    messages: list[ChatMessage] = Field(
        description="The conversation followed by the assistant reply"
    )


class StructuredChatHistoryResponse(BaseModel):
    messages: list[ChatMessage]
    structured_response: Any


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
    platform: str
    model: str
    connectors: list[ConnectorInfo]
