"""
structlog setup for Taskboard.

Development gets a readable console; production writes one JSON object per
line. Credentials never reach a log line: any event key that looks like a
password or token is masked before rendering.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

from app.core.settings import settings

SECRET_KEYS = frozenset(
    {"password", "old_password", "new_password", "hashed_password", "access_token", "token", "authorization"}
)
REDACTED = "***"

# Libraries whose INFO output drowns out request and domain events
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "alembic.runtime.migration")


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    for key in event_dict.keys() & SECRET_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def _renderer() -> list[Processor]:
    if settings.app_debug:
        return [structlog.dev.ConsoleRenderer(colors=not settings.testing)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging() -> None:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        *_renderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=not settings.testing,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.app_debug else logging.INFO,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """
    >>> logger = get_logger(__name__)
    >>> logger.info("member_added", project_id=7, user_id="...")
    """
    return structlog.get_logger(name)
