"""Structured logging configuration for Passage Graph.

Console logging only, controlled by the CLI's -v flag or the
PASSAGE_GRAPH_LOG_VERBOSITY setting.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from structlog.typing import Processor

_configured = False


def configure_logging(verbosity: int = 0) -> None:
    """Configure logging for Passage Graph.

    Args:
        verbosity: 0=WARNING (default), 1=INFO, 2+=DEBUG
    """
    global _configured

    levels = {0: logging.WARNING, 1: logging.INFO}
    level = levels.get(verbosity, logging.DEBUG)

    console = Console(stderr=True)
    console_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
        level=level,
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[console_handler],
        force=True,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a structured logger instance.

    Automatically configures logging if not already done.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound logger instance.
    """
    if not _configured:
        from passage_graph.config import get_settings

        configure_logging(get_settings().log_verbosity)

    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger
