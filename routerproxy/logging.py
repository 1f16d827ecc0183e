"""
Centralized structured logging configuration.
Import and call `setup_logging()` once at application startup.
"""

import logging

import structlog


def resolve_level(level: str | int) -> int:
    """Accept either a numeric level or a name such as "INFO"."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: str | int = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Minimum log level, numeric (10=DEBUG, 20=INFO) or by name.
        json_output: If True, emit machine-readable JSON logs (for production).
                     If False, emit human-readable colored console logs.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )
