"""Tests for the routerproxy CLI — gateway is replaced with a fake."""

import json

import pytest

from routerproxy import cli


class FakeGateway:
    reply = "Hello from the model"
    structured = {"location": "London", "temperature": 10, "conditions": "Rain"}
    credits = {"data": {"total_credits": 3}}
    providers = {"data": [{"slug": "openai"}]}
    instances: list = []

    def __init__(self, config):
        self.config = config
        self.closed = False
        self.calls = []
        FakeGateway.instances.append(self)

    async def send_message(self, text):
        self.calls.append(("send_message", text))
        return self.reply

    async def send_structured(self, text, schema):
        self.calls.append(("send_structured", text, schema))
        return self.structured

    async def get_account_credits(self):
        return self.credits

    async def list_providers(self):
        return self.providers

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_gateway(monkeypatch):
    FakeGateway.instances = []
    monkeypatch.setattr(cli, "AsyncOpenRouterClient", FakeGateway)
    return FakeGateway


def test_ask_prints_reply(fake_gateway, capsys):
    assert cli.main(["ask", "Say hi"]) == 0

    assert capsys.readouterr().out.strip() == "Hello from the model"
    gateway = fake_gateway.instances[0]
    assert gateway.calls == [("send_message", "Say hi")]
    assert gateway.closed is True


def test_ask_with_schema_file(fake_gateway, capsys, tmp_path):
    schema = {"name": "weather", "strict": True, "schema": {"type": "object"}}
    path = tmp_path / "weather.json"
    path.write_text(json.dumps(schema), encoding="utf-8")

    assert cli.main(["ask", "Weather?", "--schema", str(path)]) == 0

    assert json.loads(capsys.readouterr().out) == FakeGateway.structured
    assert fake_gateway.instances[0].calls == [("send_structured", "Weather?", schema)]


def test_ask_failure_exits_nonzero(fake_gateway, capsys, monkeypatch):
    monkeypatch.setattr(FakeGateway, "reply", None)

    assert cli.main(["ask", "Say hi"]) == 1
    assert "no reply from OpenRouter" in capsys.readouterr().err


def test_credits(fake_gateway, capsys):
    assert cli.main(["credits"]) == 0
    assert json.loads(capsys.readouterr().out) == {"data": {"total_credits": 3}}


def test_providers_failure(fake_gateway, capsys, monkeypatch):
    monkeypatch.setattr(FakeGateway, "providers", None)

    assert cli.main(["providers"]) == 1
    assert "failed to fetch providers" in capsys.readouterr().err


def test_gateway_uses_settings(fake_gateway, monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "cli-key")

    cli.main(["credits"])

    assert fake_gateway.instances[0].config.api_key == "cli-key"


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])
