"""structlog setup for riskwatch.

Events are keyed by name (``weight_sum_mismatch``, ``portfolio_skipped``) with
their fields as keyword arguments, rendered to the console with an ISO
timestamp and the level. Records below ``settings.log_level`` are dropped.
"""

import logging

import structlog

from riskwatch.core.config import settings

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Install the riskwatch processor chain; later calls are no-ops.

    Args:
        level: Minimum level name such as "DEBUG" or "WARNING". Falls back to
            ``settings.log_level``, and to INFO for unknown names.
    """
    global _configured
    if _configured:
        return

    min_level = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(min_level, int):
        min_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for a riskwatch component, tagged with ``logger_name``.

    Configures logging on first use, so services embedding the monitor get
    the level from settings without calling configure_logging() themselves.
    """
    configure_logging()
    return structlog.get_logger(logger_name=name)
