from fastapi import Request
from fastapi.responses import JSONResponse
import structlog

from routerproxy.errors import RouterProxyError, UpstreamError

logger = structlog.get_logger(__name__)


async def routerproxy_error_handler(request: Request, exc: RouterProxyError) -> JSONResponse:
    """
    Global exception handler for the RouterProxy service.
    Converts typed exceptions into `{"error": ..., "details": ...}` responses.
    """
    error_data = exc.to_dict()

    # Logged here so every handled API error is visible in structured logs.
    logger.warning(
        "api_error_handled",
        path=request.url.path,
        error_code=error_data.get("error_code"),
        message=error_data.get("message"),
        status_code=exc.http_status,
        detail=error_data.get("detail"),
    )

    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler: anything that escaped the typed errors still
    leaves as a JSON `{"error": ..., "details": ...}` body.
    """
    logger.error(
        "api_unhandled_error",
        path=request.url.path,
        error=str(exc),
        exc_type=exc.__class__.__name__,
        exc_info=exc,
    )
    error = UpstreamError("An unexpected error occurred", detail=str(exc) or exc.__class__.__name__)
    return JSONResponse(status_code=error.http_status, content=error.to_response())
