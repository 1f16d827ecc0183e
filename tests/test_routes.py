"""
OpenRouter route tests — HTTP contract verification.

Tests the routes with FastAPI TestClient and a mocked gateway
(dependency override), so no request ever leaves the process.
Covers input validation, success bodies, and the flat error body
for upstream and parsing failures.
"""

import httpx
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from routerproxy.api.routes import get_gateway
from routerproxy.config import OpenRouterConfig
from routerproxy.connectors import AsyncOpenRouterClient
from routerproxy.prompts import JAVASCRIPT_HISTORY, LONDON_TRIP_HISTORY, WEATHER_SCHEMA

WEATHER = {"location": "London", "temperature": 14, "conditions": "Cloudy"}


@pytest.fixture
def gateway():
    return AsyncMock(spec=AsyncOpenRouterClient)


@pytest.fixture
def client(gateway):
    from app import app

    app.dependency_overrides[get_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── Input validation ─────────────────────────────────────────────────


@pytest.mark.parametrize("path", ["/generate", "/openrouter/generate", "/openrouter/endpoint"])
class TestMessageRequired:
    def test_empty_body(self, client, gateway, path):
        response = client.post(path)

        assert response.status_code == 400
        assert response.json() == {"error": "Message is required"}
        gateway.complete.assert_not_called()
        gateway.send_message.assert_not_called()

    def test_missing_field(self, client, gateway, path):
        response = client.post(path, json={"text": "hello"})
        assert response.status_code == 400
        assert response.json() == {"error": "Message is required"}

    def test_empty_message(self, client, gateway, path):
        response = client.post(path, json={"message": ""})
        assert response.status_code == 400

    def test_invalid_json(self, client, gateway, path):
        response = client.post(
            path, content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        gateway.complete.assert_not_called()


# ── /generate ────────────────────────────────────────────────────────


@pytest.mark.parametrize("path", ["/generate", "/openrouter/generate"])
def test_generate_returns_completion_body(client, gateway, path):
    body = {"id": "gen-1", "choices": [{"message": {"role": "assistant", "content": "Hi!"}}]}
    gateway.complete.return_value = body

    response = client.post(path, json={"message": "Hello"})

    assert response.status_code == 200
    assert response.json() == {"response": body}
    messages = gateway.complete.call_args.args[0]
    assert [m.model_dump() for m in messages] == [{"role": "user", "content": "Hello"}]
    assert gateway.complete.call_args.kwargs["max_tokens"] == 2000


def test_generate_upstream_failure(client, gateway):
    gateway.complete.return_value = None

    response = client.post("/generate", json={"message": "Hello"})

    assert response.status_code == 500
    assert response.json()["error"] == "An error occurred while processing the request"
    assert "details" in response.json()


def test_generate_unexpected_exception_carries_details(client, gateway):
    gateway.complete.side_effect = RuntimeError("kaput")

    response = client.post("/generate", json={"message": "Hello"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "An error occurred while processing the request",
        "details": "kaput",
    }


def test_generate_passes_through_non_object_body():
    """A 200 upstream body that is a JSON array is still relayed as JSON."""
    from app import app

    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[1, 2]))
    config = OpenRouterConfig(
        api_key="k",
        model="m",
        max_tokens=100,
        base_url="https://openrouter.test/chat/completions",
        credits_url="https://openrouter.test/credits",
        providers_url="https://openrouter.test/providers",
    )
    gateway = AsyncOpenRouterClient(config, http_client=httpx.AsyncClient(transport=transport))
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        response = TestClient(app).post("/generate", json={"message": "Hello"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"response": [1, 2]}


def test_unhandled_exception_renders_json_error():
    from app import app

    def broken_gateway():
        raise RuntimeError("gateway wiring failed")

    app.dependency_overrides[get_gateway] = broken_gateway
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/openrouter/credits")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {
        "error": "An unexpected error occurred",
        "details": "gateway wiring failed",
    }


# ── /openrouter/endpoint ─────────────────────────────────────────────


def test_endpoint_returns_reply_text(client, gateway):
    gateway.send_message.return_value = "hello"

    response = client.post("/openrouter/endpoint", json={"message": "Say hello"})

    assert response.status_code == 200
    assert response.json() == {"response": "hello", "success": True}
    gateway.send_message.assert_awaited_once_with("Say hello")


def test_endpoint_failure(client, gateway):
    gateway.send_message.return_value = None

    response = client.post("/openrouter/endpoint", json={"message": "Say hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to get a valid response from OpenRouter"}


# ── Credits & providers ──────────────────────────────────────────────


def test_credits(client, gateway):
    gateway.get_account_credits.return_value = {"data": {"total_credits": 5}}

    response = client.get("/openrouter/credits")

    assert response.status_code == 200
    assert response.json() == {"credits": {"data": {"total_credits": 5}}}


@pytest.mark.parametrize("body", [{}, []])
def test_empty_credits_body_is_relayed(client, gateway, body):
    gateway.get_account_credits.return_value = body

    response = client.get("/openrouter/credits")

    assert response.status_code == 200
    assert response.json() == {"credits": body}


def test_credits_failure(client, gateway):
    gateway.get_account_credits.return_value = None

    response = client.get("/openrouter/credits")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch credits"}


def test_providers(client, gateway):
    gateway.list_providers.return_value = {"data": [{"slug": "openai"}]}

    response = client.get("/openrouter/providers")

    assert response.status_code == 200
    assert response.json() == {"providers": {"data": [{"slug": "openai"}]}}


def test_providers_failure(client, gateway):
    gateway.list_providers.return_value = None

    response = client.get("/openrouter/providers")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch providers"}


# ── Structured output & history ──────────────────────────────────────


def test_structured_uses_weather_schema(client, gateway):
    gateway.send_structured.return_value = WEATHER

    response = client.get("/openrouter/structured")

    assert response.status_code == 200
    assert response.json() == {"data": WEATHER}
    assert gateway.send_structured.call_args.args[1] is WEATHER_SCHEMA


def test_structured_failure(client, gateway):
    gateway.send_structured.return_value = None

    response = client.get("/openrouter/structured")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch structured data"}


def test_chat_history_appends_reply(client, gateway):
    gateway.send_history.return_value = "Variables store values."

    response = client.get("/openrouter/chat-history")

    assert response.status_code == 200
    messages = response.json()["messages"]
    assert len(messages) == len(JAVASCRIPT_HISTORY) + 1
    assert messages[0] == {"role": "user", "content": "What is JavaScript?"}
    assert messages[-1] == {"role": "assistant", "content": "Variables store values."}


def test_chat_history_failure(client, gateway):
    gateway.send_history.return_value = None

    response = client.get("/openrouter/chat-history")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to get model response"}


def test_structured_chat_history(client, gateway):
    gateway.send_structured_history.return_value = WEATHER

    response = client.get("/openrouter/structured-chat-history")

    assert response.status_code == 200
    body = response.json()
    assert body["structured_response"] == WEATHER
    assert len(body["messages"]) == len(LONDON_TRIP_HISTORY)


def test_structured_prompt_repairs_fenced_reply(client, gateway):
    gateway.send_message.return_value = '```json\n{"title": "Budgeting 101", "ideas": []}\n```'

    response = client.get("/openrouter/structured-prompt")

    assert response.status_code == 200
    assert response.json() == {"data": {"title": "Budgeting 101", "ideas": []}}
    prompt = gateway.send_message.call_args.args[0]
    assert "strictly follows this exact schema" in prompt
    assert '"follow_up_question"' in prompt


def test_structured_prompt_parse_failure(client, gateway):
    gateway.send_message.return_value = "Here are some thoughts, but no JSON."

    response = client.get("/openrouter/structured-prompt")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to parse structured JSON"}


@pytest.mark.parametrize("reply", ["42", "\"just a string\"", "true"])
def test_structured_prompt_scalar_reply_is_parse_failure(client, gateway, reply):
    gateway.send_message.return_value = reply

    response = client.get("/openrouter/structured-prompt")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to parse structured JSON"}


def test_structured_prompt_upstream_failure(client, gateway):
    gateway.send_message.return_value = None

    response = client.get("/openrouter/structured-prompt")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate response"}


# ── System ───────────────────────────────────────────────────────────


def test_health_reports_connector(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["platform"] == "RouterProxy"
    assert body["connectors"][0]["name"] == "openrouter"


def test_root(client):
    assert client.get("/").json()["status"] == "online"


def test_metrics(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "routerproxy_upstream_calls_total" in response.text


def test_request_id_is_echoed(client, gateway):
    gateway.list_providers.return_value = {"data": []}

    response = client.get("/openrouter/providers", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
