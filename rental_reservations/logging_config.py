from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping, Optional, cast

import structlog

from rental_reservations.config import LOG_LEVEL

# Type alias for structlog processor
Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]

SERVICE_NAME = "rental-reservations"


def add_service_name(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Tag every event with the service name for log aggregation."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(level: str = LOG_LEVEL, json_logs: Optional[bool] = None) -> None:
    """
    Configure structured logging globally using structlog.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ...)
        json_logs: Force JSON (True) or console (False) output. By default
            DEBUG gets the human-readable console renderer and every other
            level gets JSON.
    """
    level = level.upper()
    if json_logs is None:
        json_logs = level != "DEBUG"

    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s:%(lineno)d: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        level=level,
    )

    # Gateway HTTP calls and SQL statements are already covered by our own events
    for noisy_logger in ["urllib3", "requests", "sqlalchemy.engine", "uvicorn.access"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        processors.append(cast(Processor, structlog.processors.JSONRenderer()))
    else:
        processors.append(cast(Processor, structlog.dev.ConsoleRenderer(colors=True)))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
