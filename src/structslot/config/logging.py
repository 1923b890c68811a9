"""structlog configuration for structslot.

Two output modes:
- Human (default): console renderer to stderr, colored on a TTY
- JSON (--log-json): Structured JSON lines to stderr

Library modules log through ``logging.getLogger(__name__)``; this module
routes those records through structlog's ``ProcessorFormatter`` and tags
every structslot event with the package layer that emitted it
(``component="domain"``, ``component="plugins"``, ...).
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

LOGGER_NAME = "structslot"

# Third-party loggers that stay at WARNING even in verbose mode.
QUIET_LOGGERS = ("pluggy",)


def add_component(
    _logger: Any, _method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Add the structslot subpackage a record came from.

    Must run after ``add_logger_name``. Records from other loggers pass
    through untouched.
    """
    name = event_dict.get("logger")
    if isinstance(name, str) and name.startswith(f"{LOGGER_NAME}."):
        event_dict.setdefault("component", name.split(".")[1])
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_component,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Only the ``structslot`` logger follows *verbose*; the root logger and
    :data:`QUIET_LOGGERS` stay at WARNING so debug chatter from other
    libraries never reaches the handler.

    Args:
        verbose: Enable DEBUG-level output for structslot. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
