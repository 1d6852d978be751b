"""Structured logging via structlog.

Configured once from ``create_app()``. Detection and store modules log
through ``logging.getLogger(__name__)``; the stdlib bridge routes those
records to stdout alongside structlog's own output.

Renderer selection:
  debug=True  - ``ConsoleRenderer`` for local development.
  debug=False - ``JSONRenderer`` for machine-parseable logs.

Every line emitted inside a request carries that request's ``request_id``
(see ``quickcmd.api.middleware``).
"""

from __future__ import annotations

import logging
import sys

import structlog

from quickcmd.api.middleware import get_request_id


def _inject_request_id(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: add the current request ID when there is one."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def configure_structlog(debug: bool = True) -> None:
    """Configure structlog for the application lifetime. Safe to call twice."""
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_request_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
