"""
structlog setup shared by the API process and the maintenance scripts.

Every event carries the service name, the request id bound by the
middleware and, once authenticated, the acting user id. Identity and tax
fields (document numbers, TINs, device tokens) are masked before
rendering so they never reach the log pipeline.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping, cast

import structlog

from homestay.config import LOG_FORMAT, LOG_LEVEL

Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]

SERVICE_NAME = "homestay-api"

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "current_password",
        "new_password",
        "reset_token",
        "token",
        "access_token",
        "device_token",
        "tax_id",
        "ssn",
        "document_number",
        "bank_account",
    }
)

QUIET_LOGGERS = ("urllib3", "requests", "sqlalchemy.engine", "uvicorn.access", "alembic")


def mask_sensitive(
    _: Any, __: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Replace values of sensitive keys, keeping the last four characters."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        value = str(event_dict[key])
        event_dict[key] = f"***{value[-4:]}" if len(value) > 8 else "***"
    return event_dict


def add_service(_: Any, __: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Minimum level name, e.g. INFO
        fmt: "json" renders one JSON object per line; anything else uses
            the coloured console renderer
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=level,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer = cast(
        Processor,
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service,
            structlog.processors.add_log_level,
            mask_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
