"""
OpenRouter Routes — Thin controllers in front of the completion gateway.

Each handler validates its input, makes one gateway call and shapes
the JSON reply. Failures are raised as typed errors and rendered by
the global handler as `{"error": ..., "details": ...}`.

Endpoint summary:
  POST /generate, /openrouter/generate      — Raw chat-completion body
  POST /openrouter/endpoint                 — Reply text only
  GET  /openrouter/credits                  — Account credits
  GET  /openrouter/providers                — Provider listing
  GET  /openrouter/structured               — Weather JSON via json_schema
  GET  /openrouter/chat-history             — Multi-turn reply
  GET  /openrouter/structured-chat-history  — Multi-turn weather JSON
  GET  /openrouter/structured-prompt        — JSON requested inside the prompt
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import structlog
from fastapi import APIRouter, Depends, Request

from routerproxy.api.models import (
    ChatHistoryResponse,
    CreditsResponse,
    EndpointResponse,
    ErrorResponse,
    GenerateResponse,
    ProvidersResponse,
    StructuredChatHistoryResponse,
    StructuredDataResponse,
)
from routerproxy.config import ProxySettings, get_settings
from routerproxy.connectors import AsyncOpenRouterClient, get_openrouter_connector
from routerproxy.errors import (
    MessageRequiredError,
    RouterProxyError,
    StructuredOutputParseError,
    UpstreamError,
)
from routerproxy.json_utils import extract_json
from routerproxy.models import ChatMessage
from routerproxy import prompts

logger = structlog.get_logger(__name__)

router = APIRouter(
    tags=["OpenRouter"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Dependencies & helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


async def require_message(request: Request) -> str:
    """Read `message` from the JSON body. Missing, empty or unreadable → 400."""
    try:
        body = await request.json()
    except ValueError:
        body = None

    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str) or not message:
        raise MessageRequiredError()
    return message


def get_gateway() -> AsyncOpenRouterClient:
    return get_openrouter_connector().client


@contextmanager
def _upstream_guard(message: str) -> Iterator[None]:
    """Turn any unexpected exception into an UpstreamError carrying its text."""
    try:
        yield
    except RouterProxyError:
        raise
    except Exception as e:
        logger.error("route_unexpected_error", error=str(e), exc_info=True)
        raise UpstreamError(message, detail=str(e)) from e


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Message routes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@router.post("/generate", response_model=GenerateResponse)
@router.post("/openrouter/generate", response_model=GenerateResponse)
async def generate(
    message: str = Depends(require_message),
    gateway: AsyncOpenRouterClient = Depends(get_gateway),
    settings: ProxySettings = Depends(get_settings),
):
    """Forward one user message and return the full chat-completion body."""
    error = "An error occurred while processing the request"
    with _upstream_guard(error):
        body = await gateway.complete(
            [ChatMessage.user(message)],
            max_tokens=settings.openrouter_generate_max_tokens,
        )
    if body is None:
        raise UpstreamError(error, detail="OpenRouter returned no usable response")
    return {"response": body}


@router.post("/openrouter/endpoint", response_model=EndpointResponse)
async def generate_with_endpoint(
    message: str = Depends(require_message),
    gateway: AsyncOpenRouterClient = Depends(get_gateway),
):
    """Forward one user message and return just the reply text."""
    with _upstream_guard("An error occurred while processing the request"):
        reply = await gateway.send_message(message)
    if not reply:
        raise UpstreamError("Failed to get a valid response from OpenRouter")
    return {"response": reply, "success": True}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Account routes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@router.get("/openrouter/credits", response_model=CreditsResponse)
async def get_credits(gateway: AsyncOpenRouterClient = Depends(get_gateway)):
    with _upstream_guard("An unexpected error occurred"):
        credits = await gateway.get_account_credits()
    if credits is None:
        raise UpstreamError("Failed to fetch credits")
    return {"credits": credits}


@router.get("/openrouter/providers", response_model=ProvidersResponse)
async def get_providers(gateway: AsyncOpenRouterClient = Depends(get_gateway)):
    with _upstream_guard("An error occurred"):
        providers = await gateway.list_providers()
    if providers is None:
        raise UpstreamError("Failed to fetch providers")
    return {"providers": providers}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Structured output & history routes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@router.get("/openrouter/structured", response_model=StructuredDataResponse)
async def get_structured_output(gateway: AsyncOpenRouterClient = Depends(get_gateway)):
    """Ask for the London weather constrained to the weather schema."""
    with _upstream_guard("An error occurred"):
        data = await gateway.send_structured(prompts.WEATHER_PROMPT, prompts.WEATHER_SCHEMA)
    if data is None:
        raise UpstreamError("Failed to fetch structured data")
    return {"data": data}


@router.get("/openrouter/chat-history", response_model=ChatHistoryResponse)
async def multi_turn_chat(gateway: AsyncOpenRouterClient = Depends(get_gateway)):
    """Continue a fixed conversation and return it with the new reply appended."""
    history = list(prompts.JAVASCRIPT_HISTORY)
    with _upstream_guard("An error occurred"):
        reply = await gateway.send_history(history)
    if not reply:
        raise UpstreamError("Failed to get model response")
    return {"messages": [*history, ChatMessage.assistant(reply)]}


@router.get(
    "/openrouter/structured-chat-history", response_model=StructuredChatHistoryResponse
)
async def structured_multi_turn_chat(
    gateway: AsyncOpenRouterClient = Depends(get_gateway),
):
    """Continue a fixed trip-planning conversation, answering with weather JSON."""
    history = list(prompts.LONDON_TRIP_HISTORY)
    with _upstream_guard("An error occurred"):
        data = await gateway.send_structured_history(history, prompts.WEATHER_SCHEMA)
    if data is None:
        raise UpstreamError("Failed to fetch structured weather data")
    return {"messages": history, "structured_response": data}


@router.get("/openrouter/structured-prompt", response_model=StructuredDataResponse)
async def structured_output_with_prompt(
    gateway: AsyncOpenRouterClient = Depends(get_gateway),
    settings: ProxySettings = Depends(get_settings),
):
    """
    Request JSON through the prompt alone (no response_format) and
    repair the reply locally. Parse failures get their own error.
    """
    with _upstream_guard("An error occurred"):
        raw = await gateway.send_message(
            prompts.CONTENT_IDEA_PROMPT,
            max_tokens=settings.openrouter_generate_max_tokens,
        )
    logger.info("structured_prompt_raw_reply", raw=raw)
    if not raw:
        raise UpstreamError("Failed to generate response")

    data = extract_json(raw)
    if data is None:
        raise StructuredOutputParseError()
    return {"data": data}
