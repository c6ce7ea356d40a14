"""Structured logging configuration using *structlog*."""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(level: str = "INFO", *, json_output: bool | None = None) -> None:
    """Configure *structlog* for the notifier.

    Delivery failures are only ever visible in these logs, so tracebacks
    attached with ``exc_info`` are rendered in both output modes.  JSON is
    used whenever stderr is not a terminal unless *json_output* says otherwise.
    """
    if json_output is None:
        json_output = not sys.stderr.isatty()

    processors: list = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level, logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
