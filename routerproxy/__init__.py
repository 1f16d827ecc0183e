"""
RouterProxy — OpenRouter chat-completion gateway.

Provides the completion gateway, the JSON extractor for model output,
and the shared configuration, logging and error types used by the
HTTP service in `app.py`.
"""

from routerproxy.config import OpenRouterConfig, ProxySettings, get_settings
from routerproxy.connectors import (
    AsyncOpenRouterClient,
    OpenRouterConnector,
    get_openrouter_connector,
)
from routerproxy.json_utils import extract_json
from routerproxy.models import ChatMessage, ResponseSchema, Role

__all__ = [
    # Configuration
    "OpenRouterConfig",
    "ProxySettings",
    "get_settings",
    # Gateway
    "AsyncOpenRouterClient",
    "OpenRouterConnector",
    "get_openrouter_connector",
    # Data model
    "ChatMessage",
    "ResponseSchema",
    "Role",
    # Output repair
    "extract_json",
]
