"""structlog setup for the forum API.

Every event carries the service name and environment, plus whatever the
request middleware binds (``request_id``, ``method``, ``path``). Libraries
listed in ``quiet_loggers`` are held at WARNING so SQL echo and the
uvicorn access log do not drown the application events.
"""

import logging
import sys

import structlog

from forum.config import Settings

SERVICE_NAME = "forum-api"


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: Settings) -> None:
    """Configure structlog and the stdlib root logger from settings."""
    level = _resolve_level(settings.log_level)
    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer() if settings.log_format == "console" else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME, environment=settings.environment)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for name in settings.quiet_loggers:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
