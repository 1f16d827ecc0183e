import pytest
from opentelemetry import trace

from routerproxy.config import OpenRouterConfig, get_settings


@pytest.fixture(autouse=True)
def disable_tracing():
    """Install a silent tracer provider so spans never print to pytest stdout."""
    from opentelemetry.sdk.trace import TracerProvider
    trace.set_tracer_provider(TracerProvider())
    yield


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep a developer's .env / OPENROUTER_* variables out of the tests."""
    for key in (
        "OPENROUTER_API_KEY",
        "OPENROUTER_MODEL",
        "OPENROUTER_MAX_TOKENS",
        "OPENROUTER_BASE_URL",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def openrouter_config() -> OpenRouterConfig:
    return OpenRouterConfig(
        api_key="test-key",
        model="test/model",
        max_tokens=100,
        base_url="https://openrouter.test/api/v1/chat/completions",
        credits_url="https://openrouter.test/api/v1/credits",
        providers_url="https://openrouter.test/api/v1/providers",
        timeout_s=5.0,
    )
