"""
BaseConnector — Abstract base class for outbound integrations.

A connector owns the lifecycle of one external service client:
it is set up once at application startup, torn down at shutdown,
and reports its health to `/health`.

Usage:
    class MyConnector(BaseConnector):
        name = "my_service"
        description = "Connects to My Service API"

        async def setup(self) -> None:
            self._client = MyServiceClient()
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel


class ConnectorInfo(BaseModel):
    """Summary info for the health endpoint."""

    name: str
    description: str
    healthy: bool = True


class BaseConnector(ABC):
    """
    Abstract base class for integration connectors.

    Subclasses MUST define:
      - name: str — Unique identifier (e.g. "openrouter")
      - description: str — What this connector does

    Subclasses MAY override:
      - setup(): One-time initialization (client creation)
      - teardown(): Cleanup (close connections)
      - health_check(): Verify the connector is usable
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique connector identifier (e.g. 'openrouter')."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this connector does."""
        ...

    # ── Lifecycle Hooks ──────────────────────────────────────────────

    async def setup(self) -> None:
        """Called once at startup. Override for initialization."""
        pass

    async def teardown(self) -> None:
        """Called when the service shuts down. Override for cleanup."""
        pass

    async def health_check(self) -> bool:
        """Check if the connector is healthy and ready to use."""
        return True

    # ── Info ──────────────────────────────────────────────────────────

    async def get_info(self) -> ConnectorInfo:
        """Return summary info for this connector."""
        return ConnectorInfo(
            name=self.name,
            description=self.description,
            healthy=await self.health_check(),
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
