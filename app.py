"""
RouterProxy — OpenRouter chat-completion proxy.

Single entry point for the service. The app:
  - Sets up structured logging and tracing
  - Creates the shared OpenRouter client at startup, closes it at shutdown
  - Mounts the OpenRouter routes and the system routes (/health, /metrics)

Run with:
  uvicorn app:app --reload --port 8080
"""

import os

import structlog
import uvicorn

from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware

from routerproxy.version import VERSION, APP_NAME
from routerproxy.config import get_settings
from routerproxy.connectors import get_openrouter_connector
from routerproxy.errors import RouterProxyError
from routerproxy.logging import setup_logging
from routerproxy.api.errors import routerproxy_error_handler, unhandled_error_handler
from routerproxy.api.middleware import otel_tracing_middleware
from routerproxy.api.routes import router as openrouter_router
from routerproxy.api.system import router as system_router

logger = structlog.get_logger(__name__)

settings = get_settings()
setup_logging(settings.log_level, json_output=settings.log_json)


# ── Lifespan ─────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Service lifespan — set up the OpenRouter connector, tear it down on exit."""
    connector = get_openrouter_connector()
    await connector.setup()

    logger.info(
        "service_ready",
        version=VERSION,
        platform=APP_NAME,
        model=connector.config.model,
        api_key_configured=await connector.health_check(),
    )

    yield

    logger.info("service_shutting_down")
    await connector.teardown()
    logger.info("service_shutdown_complete")


API_DESCRIPTION = """\
## RouterProxy API

A thin backend that forwards chat-completion requests to OpenRouter,
optionally constraining the reply to a JSON Schema.

### Error Format

All errors return a flat JSON body:

```json
{"error": "Failed to fetch credits", "details": "optional exception text"}
```

Missing `message` on the POST routes → **400** `{"error": "Message is required"}`.
Every upstream or parsing failure → **500**. Nothing is retried.
"""

# ── FastAPI App ───────────────────────────────────────────────────────
app = FastAPI(
    title="RouterProxy — OpenRouter Gateway",
    description=API_DESCRIPTION,
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ─────────────────────────────────────────────────────────────
# Disabled by default. Opt-in via API_CORS_ORIGINS="https://app.example.com".
cors_origins_str = os.getenv("API_CORS_ORIGINS", "")
allowed_origins = [
    origin.strip() for origin in cors_origins_str.split(",") if origin.strip()
]

if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register global exception handlers
app.add_exception_handler(RouterProxyError, routerproxy_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.include_router(system_router)
app.include_router(openrouter_router)

# ── Middlewares ───────────────────────────────────────────
app.add_middleware(BaseHTTPMiddleware, dispatch=otel_tracing_middleware)


if __name__ == "__main__":
    uvicorn.run("app:app", host="0.0.0.0", port=settings.port, reload=True)
