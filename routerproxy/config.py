"""
Service Configuration — Process-wide settings loaded once at startup.

The settings manage:
  - Service-level settings (port, environment, log level)
  - OpenRouter credentials, model and endpoint URLs

Everything is read from environment variables (or `.env`) and is
immutable afterwards. The gateway never reads the environment itself;
it receives an `OpenRouterConfig` built from these settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class OpenRouterConfig:
    """Immutable gateway configuration."""

    api_key: str
    model: str
    max_tokens: int
    base_url: str
    credits_url: str
    providers_url: str
    timeout_s: float = 60.0


class ProxySettings(BaseSettings):
    """Service-wide settings."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Service ──────────────────────────────────────────────────────
    environment: Literal["development", "staging", "production"] = "development"
    port: int = 8080
    log_level: str = "INFO"
    log_json: bool = False

    # ── OpenRouter ───────────────────────────────────────────────────
    openrouter_api_key: str = ""
    openrouter_model: str = "deepseek/deepseek-chat-v3-0324:free"
    openrouter_max_tokens: int = 100
    openrouter_generate_max_tokens: int = 2000
    openrouter_base_url: str = "https://openrouter.ai/api/v1/chat/completions"
    openrouter_credits_url: str = "https://openrouter.ai/api/v1/credits"
    openrouter_providers_url: str = "https://openrouter.ai/api/v1/providers"
    openrouter_timeout_s: float = 60.0

    def openrouter_config(self) -> OpenRouterConfig:
        return OpenRouterConfig(
            api_key=self.openrouter_api_key,
            model=self.openrouter_model,
            max_tokens=self.openrouter_max_tokens,
            base_url=self.openrouter_base_url,
            credits_url=self.openrouter_credits_url,
            providers_url=self.openrouter_providers_url,
            timeout_s=self.openrouter_timeout_s,
        )


@lru_cache
def get_settings() -> ProxySettings:
    """Singleton accessor — parsed once, cached forever."""
    return ProxySettings()
