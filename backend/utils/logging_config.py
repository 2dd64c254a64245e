"""
Logging configuration shared by scripts.

Routes stdlib logging through structlog: JSON lines by default,
human-readable console output when the level is DEBUG.
"""

import logging

import structlog

from core.config import get_settings


def configure_logging(log_level: str | None = None) -> None:
    """
    Configure structlog and the root stdlib logger.

    Parameters
    ----------
    log_level : str, optional
        Level name (DEBUG, INFO, ...); defaults to ``Settings.log_level``
    """
    level_name = (log_level or get_settings().log_level).upper()
    level = getattr(logging, level_name)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
            if level_name != "DEBUG"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
    )
