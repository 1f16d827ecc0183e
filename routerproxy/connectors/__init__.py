"""
Connectors — Outbound integration blocks.

Usage:
    from routerproxy.connectors import get_openrouter_connector

    gateway = get_openrouter_connector().client
"""

from routerproxy.connectors.base_connector import BaseConnector, ConnectorInfo
from routerproxy.connectors.openrouter_connector import (
    AsyncOpenRouterClient,
    OpenRouterConnector,
    get_openrouter_connector,
)

__all__ = [
    "BaseConnector",
    "ConnectorInfo",
    "AsyncOpenRouterClient",
    "OpenRouterConnector",
    "get_openrouter_connector",
]
