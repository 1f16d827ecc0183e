from fastapi import APIRouter, Response

from routerproxy.api.models import HealthResponse
from routerproxy.config import get_settings
from routerproxy.connectors import get_openrouter_connector
from routerproxy.observability import get_metrics, get_metrics_content_type
from routerproxy.version import VERSION, APP_NAME

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health():
    connector = get_openrouter_connector()
    info = await connector.get_info()

    return HealthResponse(
        status="healthy" if info.healthy else "degraded",
        version=VERSION,
        platform=APP_NAME,
        model=get_settings().openrouter_model,
        connectors=[info],
    )


@router.get("/")
async def root():
    return {
        "api": "RouterProxy API",
        "version": VERSION,
        "status": "online",
    }


@router.get("/metrics")
async def metrics():
    return Response(content=get_metrics(), media_type=get_metrics_content_type())
