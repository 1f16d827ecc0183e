"""
OpenRouterConnector — Async OpenRouter chat-completion gateway.

Wraps the OpenRouter REST API as a service connector. Provides plain
and schema-constrained completions (single turn or full history),
account credits, and the provider listing.

Failure policy: no operation raises for an upstream problem. A non-2xx
status, a transport exception, an undecodable body or a missing
`choices[0].message.content` is logged and collapses to None. Callers
must treat None as an opaque failure. Nothing is retried.

Usage:
    from routerproxy.connectors import get_openrouter_connector
    gateway = get_openrouter_connector().client
    reply = await gateway.send_message("Hello!")
"""

from __future__ import annotations

import time
from functools import lru_cache
from typing import Any, Iterable, Mapping

import httpx
import structlog

from routerproxy.config import OpenRouterConfig, get_settings
from routerproxy.connectors.base_connector import BaseConnector
from routerproxy.json_utils import extract_json
from routerproxy.models import ChatMessage, ResponseSchema
from routerproxy.observability import trace_upstream_call

logger = structlog.get_logger(__name__)

MessageLike = ChatMessage | Mapping[str, str]
SchemaLike = ResponseSchema | Mapping[str, Any]


def _serialize_messages(messages: Iterable[MessageLike]) -> list[dict[str, str]]:
    """Wire form of a conversation. Order is preserved as given."""
    out = []
    for m in messages:
        if isinstance(m, ChatMessage):
            out.append(m.model_dump())
        else:
            out.append({"role": m["role"], "content": m["content"]})
    return out


def _schema_format(schema: SchemaLike) -> dict[str, Any]:
    payload = schema.to_payload() if isinstance(schema, ResponseSchema) else dict(schema)
    return {"type": "json_schema", "json_schema": payload}


# ── Async OpenRouter Client ───────────────────────────────────────────


class AsyncOpenRouterClient:
    """
    Async OpenRouter API client.

    Features:
    - One shared httpx.AsyncClient per process, explicit timeout
    - Bearer authorization on every call except the provider listing
    - One span + Prometheus sample per upstream call
    - Structured logging of every failure with status/body or exception
    """

    def __init__(
        self,
        config: OpenRouterConfig,
        log: Any = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._config = config
        self._log = log or logger
        self._client = http_client or httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(config.timeout_s, connect=10.0),
        )

    @property
    def config(self) -> OpenRouterConfig:
        return self._config

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._config.api_key}"}

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        authenticated: bool = True,
        **kwargs,
    ) -> Any | None:
        """Execute one API request. Returns the decoded body, or None on any failure."""
        headers = self._auth_headers() if authenticated else {}

        with trace_upstream_call(operation, method=method) as call:
            start = time.monotonic()
            try:
                resp = await self._client.request(method, url, headers=headers, **kwargs)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                call.mark("transport_error")
                self._log.error(
                    "openrouter_request_exception",
                    operation=operation,
                    error=str(e) or e.__class__.__name__,
                )
                return None

            latency_ms = round((time.monotonic() - start) * 1000)

            if not resp.is_success:
                call.mark("http_error")
                self._log.error(
                    "openrouter_request_failed",
                    operation=operation,
                    status=resp.status_code,
                    body=resp.text,
                    latency_ms=latency_ms,
                )
                return None

            try:
                data = resp.json()
            except ValueError as e:
                call.mark("invalid_body")
                self._log.error(
                    "openrouter_invalid_body",
                    operation=operation,
                    status=resp.status_code,
                    body=resp.text,
                    error=str(e),
                )
                return None

            self._log.debug(
                "openrouter_request",
                operation=operation,
                method=method,
                status=resp.status_code,
                latency_ms=latency_ms,
            )
            return data

    def _extract_content(self, operation: str, body: Any) -> str | None:
        """Pull `choices[0].message.content` out of a completion body."""
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            self._log.error("openrouter_missing_content", operation=operation, body=body)
            return None
        if not isinstance(content, str):
            self._log.error("openrouter_missing_content", operation=operation, body=body)
            return None
        return content

    async def _chat_content(
        self,
        operation: str,
        messages: Iterable[MessageLike],
        *,
        max_tokens: int | None = None,
        schema: SchemaLike | None = None,
    ) -> str | None:
        body = await self.complete(
            messages,
            max_tokens=max_tokens,
            response_format=_schema_format(schema) if schema is not None else None,
            operation=operation,
        )
        if body is None:
            return None
        return self._extract_content(operation, body)

    # ── Operations ────────────────────────────────────────────────────

    async def complete(
        self,
        messages: Iterable[MessageLike],
        *,
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
        operation: str = "complete",
    ) -> dict[str, Any] | None:
        """
        POST a chat completion and return the full response body.

        Args:
            messages: Conversation turns, sent in the given order.
            max_tokens: Token limit; omitted from the payload when None.
            response_format: Optional `response_format` object.
        """
        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": _serialize_messages(messages),
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if response_format is not None:
            payload["response_format"] = response_format

        return await self._request(operation, "POST", self._config.base_url, json=payload)

    async def send_message(self, text: str, *, max_tokens: int | None = None) -> str | None:
        """Send one user turn; return the reply text."""
        return await self._chat_content(
            "send_message",
            [ChatMessage.user(text)],
            max_tokens=max_tokens if max_tokens is not None else self._config.max_tokens,
        )

    async def send_structured(self, text: str, schema: SchemaLike) -> Any | None:
        """Send one user turn constrained to `schema`; return the parsed JSON reply."""
        content = await self._chat_content(
            "send_structured", [ChatMessage.user(text)], schema=schema
        )
        if content is None:
            return None
        return extract_json(content, self._log)

    async def send_history(self, messages: Iterable[MessageLike]) -> str | None:
        """Send a whole conversation as-is; return the reply text."""
        return await self._chat_content("send_history", messages)

    async def send_structured_history(
        self, messages: Iterable[MessageLike], schema: SchemaLike
    ) -> Any | None:
        """Send a whole conversation constrained to `schema`; return the parsed JSON reply."""
        content = await self._chat_content(
            "send_structured_history", messages, schema=schema
        )
        if content is None:
            return None
        return extract_json(content, self._log)

    async def get_account_credits(self) -> Any | None:
        """Authenticated GET of the credits endpoint; body returned verbatim."""
        return await self._request("get_account_credits", "GET", self._config.credits_url)

    async def list_providers(self) -> Any | None:
        """Unauthenticated GET of the providers endpoint; body returned verbatim."""
        return await self._request(
            "list_providers", "GET", self._config.providers_url, authenticated=False
        )

    async def close(self):
        """Close the underlying connection pool."""
        await self._client.aclose()


# ── Connector ────────────────────────────────────────────────────────


class OpenRouterConnector(BaseConnector):
    """
    OpenRouter integration block — chat completions, credits, providers.

    Provides an async-only client via `self.client`.
    """

    @property
    def name(self) -> str:
        return "openrouter"

    @property
    def description(self) -> str:
        return "Forward chat completions to OpenRouter"

    def __init__(self, config: OpenRouterConfig | None = None):
        self._config = config
        self._client: AsyncOpenRouterClient | None = None

    @property
    def config(self) -> OpenRouterConfig:
        if self._config is None:
            self._config = get_settings().openrouter_config()
        return self._config

    @property
    def client(self) -> AsyncOpenRouterClient:
        """Get the async OpenRouter client. Lazy-initializes on first access."""
        if self._client is None:
            if not self.config.api_key:
                logger.warning("openrouter_api_key_missing")
            self._client = AsyncOpenRouterClient(self.config)
        return self._client

    async def setup(self) -> None:
        """Pre-initialize the client."""
        _ = self.client

    async def teardown(self) -> None:
        """Close the connection pool."""
        if self._client:
            await self._client.close()
            self._client = None

    async def health_check(self) -> bool:
        """Healthy when an API key is configured. No upstream call is made."""
        return bool(self.config.api_key)


@lru_cache
def get_openrouter_connector() -> OpenRouterConnector:
    """Process-wide connector singleton."""
    return OpenRouterConnector()
