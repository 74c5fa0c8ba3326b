"""structlog configuration for profilectl.

All records, from structlog loggers and stdlib ``logging`` alike, go to
stderr through one processor chain. That chain merges the operation
context bound by :func:`profilectl.services.telemetry.traced` (``op``,
``user_id``, ``email``) and masks the email address before rendering.

Output is a console renderer by default, or JSON lines with ``--log-json``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

APP_LOGGER = "profilectl"

# Kept at WARNING even in verbose mode.
_QUIET_LOGGERS = ("sqlalchemy", "pluggy")


def mask_email(value: str) -> str:
    """``alice@mail.org`` -> ``a***@mail.org``; non-addresses become ``***``."""
    local, sep, domain = value.partition("@")
    if not sep or not local:
        return "***"
    return f"{local[0]}***@{domain}"


def mask_email_addresses(
    _logger: Any,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """structlog processor hiding user email addresses in log output."""
    value = event_dict.get("email")
    if isinstance(value, str):
        event_dict["email"] = mask_email(value)
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        mask_email_addresses,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib logging to stderr.

    Args:
        verbose: DEBUG for profilectl loggers; WARNING otherwise.
        log_json: Render JSON lines instead of console output.
    """
    shared = _shared_processors()
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
