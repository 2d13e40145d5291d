"""Structured logging configuration using structlog.

Logs go to stderr so stdout stays clean when the CLI is piped; the JSON
documents themselves are written to files. Events are snake_case with
key/value context (strategy=, source=, days=), and a run binds the calendar
URL once so each event of that run carries it.
"""

import logging
import sys

import structlog

from src.pool_times.config import ScraperConfig, get_config

# Chatty under asyncio + Playwright; only surfaced when debugging
_QUIET_LOGGERS = ("asyncio", "playwright")


def setup_logging(
    json_output: bool | None = None,
    log_level: str | None = None,
    config: ScraperConfig | None = None,
) -> None:
    """Configure structlog with appropriate processors and output format.

    Args:
        json_output: If True, output JSON (production). If False, console format (dev).
            Defaults to config.log_json.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to config.log_level.
        config: Settings to read the defaults from. Defaults to get_config().
    """
    config = config or get_config()
    if json_output is None:
        json_output = config.log_json
    numeric_level = getattr(
        logging, (log_level or config.log_level).upper(), logging.INFO
    )

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

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(sys.stderr)]
    root.setLevel(numeric_level)

    quiet_level = (
        numeric_level if numeric_level <= logging.DEBUG else max(numeric_level, logging.WARNING)
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def bind_run_context(url: str, **context) -> None:
    """Start a new scrape run: drop any previous run's context, bind this one."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(url=url, **context)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance bound with the module name.

    Args:
        name: Logger name (typically __name__ from calling module).

    Returns:
        Configured structlog logger with module name context.
    """
    return structlog.get_logger(name)
