"""Logging configuration.

Single entry point for structured logging. Modules log through
``structlog.get_logger(__name__)``; this sets up the processors and the
stdlib handler underneath.

Environment:
    BLISS_LOG_LEVEL   DEBUG | INFO | WARNING | ERROR (default: WARNING)
    BLISS_LOG_FORMAT  console | json (default: console)
"""

import logging
import os
import sys
from typing import Literal

import structlog
from structlog.types import Processor

_configured = False


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
    format: Literal["json", "console"] | None = None,
    force: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger.

    Called once at startup (CLI entry). Later calls are no-ops unless
    ``force`` is set.
    """
    global _configured

    if _configured and not force:
        return

    log_level = (level or os.environ.get("BLISS_LOG_LEVEL", "WARNING")).upper()
    log_format = (format or os.environ.get("BLISS_LOG_FORMAT", "console")).lower()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level, logging.WARNING),
        force=True,
    )
    logging.getLogger("bliss").setLevel(getattr(logging, log_level, logging.WARNING))

    _configured = True


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured
