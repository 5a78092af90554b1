"""Structured logging configuration using structlog.

Console output for interactive use, JSON output when the CLI runs in a
pipeline or cron job. Modules obtain their logger through get_logger().
"""

import logging
import sys

import structlog


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog processors and the output format.

    Args:
        json_output: If True, render JSON lines. If False, console format.
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # Logs go to stderr so that `--json` output on stdout stays parseable
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger bound with the module name."""
    return structlog.get_logger(name)
