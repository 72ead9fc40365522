"""Logging configuration for bootwatch-cli.

Diagnostics go through structlog to stderr (or a file), human-readable by
default and JSON on request. Status lines meant for the user are written
with click.echo and never pass through here.
"""

import logging
import sys
from pathlib import Path

import structlog

VERBOSITY_LEVELS = ("warning", "info", "debug")


def level_from_verbosity(verbose: int, default: str = "warning") -> str:
    """Map a -v count to a log level name.

    Args:
        verbose: Number of -v flags given
        default: Level used when no flag is given

    Returns:
        Log level name
    """
    if verbose <= 0:
        return default
    return VERBOSITY_LEVELS[min(verbose, len(VERBOSITY_LEVELS) - 1)]


def configure_logging(
    level: str = "warning",
    log_file: str | Path | None = None,
    json_output: bool = False,
) -> None:
    """Configure standard logging and structlog.

    Called once per CLI invocation.

    Args:
        level: Log level (debug, info, warning, error, critical)
        log_file: Optional path to a log file instead of stderr
        json_output: If True, render JSON lines
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(str(log_file))
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        format="%(message)s",
        force=True,
    )

    # The kubernetes client logs every request at debug level
    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
