"""Structured logging for the SRS core using structlog.

The core components log warnings for recoverable data problems (skipped or
truncated meeting entries, transcript rows left out of aggregation) and debug
events for completed calculations. Console output is used for development,
JSON for production. Logs are written to stderr so the CLI can keep stdout
for its JSON payload.
"""

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from src.srs.config import SRSConfig


def setup_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog processors and renderer.

    Args:
        json_output: If True, render JSON lines. If False, console format.
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream, stderr by default.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    out = stream if stream is not None else sys.stderr

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
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=False,
    )

    # Route stdlib logging (pydantic, third-party code) to the same stream
    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(out)]
    root.setLevel(numeric_level)


def setup_logging_from_config(config: "SRSConfig") -> None:
    """Configure logging from the log_json / log_level settings."""
    setup_logging(json_output=config.log_json, log_level=config.log_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance bound with the module name.

    Args:
        name: Logger name (typically __name__ from calling module).
    """
    return structlog.get_logger(name)
