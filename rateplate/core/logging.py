from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from rateplate.core.config import Settings, get_settings

_CONFIGURED = False

# Libraries that are chatty at INFO once a root handler exists
_QUIET_LOGGERS = ("sqlalchemy.engine", "passlib", "uvicorn.access")


def _add_service(service_name: str):
    def processor(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog once for the process.

    Events are rendered as JSON lines on stdout unless ``LOG_JSON`` is off,
    in which case the human-readable console renderer is used.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_service(settings.app_name),
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.dict_tracebacks if settings.log_json else _passthrough,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True


def _passthrough(logger: Any, method_name: str, event_dict: dict) -> dict:
    # ConsoleRenderer formats exc_info itself
    return event_dict
