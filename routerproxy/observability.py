"""
Service-level observability — OpenTelemetry tracing + Prometheus metrics.

Provides:
- Distributed tracing with one span per upstream OpenRouter call
- Upstream call counters and latency histograms
- Prometheus scraping utilities
"""

import os
import time
import structlog
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

logger = structlog.get_logger(__name__)

# ── OpenTelemetry Setup ──────────────────────────────────────────────

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str | None = None,
    console_export: bool | None = None,
) -> trace.Tracer:
    """
    Initialize OpenTelemetry tracing.

    Args:
        service_name: Name of the service (appears in traces).
                      Defaults to K_SERVICE env var or APP_NAME.
        console_export: Print finished spans to stdout. Defaults to the
                        OTEL_CONSOLE_EXPORT env var ("1"/"true").
    """
    global _tracer

    from routerproxy.version import APP_NAME, VERSION

    if service_name is None:
        service_name = os.getenv("K_SERVICE", APP_NAME.lower())
    if console_export is None:
        console_export = os.getenv("OTEL_CONSOLE_EXPORT", "").lower() in ("1", "true")

    resource = Resource.create(
        {"service.name": service_name, "service.version": VERSION}
    )
    provider = TracerProvider(resource=resource)
    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(__name__)
    logger.info("otel_tracing_initialized", service=service_name, console=console_export)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get or initialize the tracer."""
    global _tracer
    if _tracer is None:
        _tracer = setup_tracing()
    return _tracer


# ── Upstream Metrics ─────────────────────────────────────────────────

UPSTREAM_CALLS = Counter(
    "upstream_calls_total",
    "Total OpenRouter calls per operation",
    ["operation", "status"],
    namespace="routerproxy",
)

UPSTREAM_LATENCY = Histogram(
    "upstream_latency_seconds",
    "OpenRouter call latency per operation",
    ["operation"],
    buckets=[0.1, 0.5, 1, 2, 5, 10, 30, 60],
    namespace="routerproxy",
)


@dataclass
class UpstreamCall:
    """Handle yielded by `trace_upstream_call`; records the call outcome."""

    span: trace.Span
    status: str = "success"

    def mark(self, status: str) -> None:
        self.status = status
        self.span.set_attribute("upstream.status", status)


@contextmanager
def trace_upstream_call(operation: str, **attributes) -> Generator[UpstreamCall, None, None]:
    """
    Context manager to trace and time one upstream call.

    Usage:
        with trace_upstream_call("send_message", model=model) as call:
            resp = await client.request(...)
            if not resp.is_success:
                call.mark("http_error")
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(
        f"openrouter.{operation}",
        attributes={
            "upstream.operation": operation,
            **{f"upstream.{k}": str(v) for k, v in attributes.items()},
        },
    ) as span:
        call = UpstreamCall(span=span)
        start = time.monotonic()
        try:
            yield call
        except Exception as e:
            call.mark("error")
            span.record_exception(e)
            raise
        finally:
            elapsed = time.monotonic() - start
            span.set_attribute("upstream.latency_ms", round(elapsed * 1000))
            UPSTREAM_CALLS.labels(operation=operation, status=call.status).inc()
            UPSTREAM_LATENCY.labels(operation=operation).observe(elapsed)


# ── Prometheus Scraping ──────────────────────────────────────────────


def get_metrics() -> bytes:
    """Generate Prometheus metrics for scraping."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Content type for Prometheus metrics response."""
    return CONTENT_TYPE_LATEST
