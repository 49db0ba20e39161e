"""
Structured logging with structlog.
JSON by default; set LOG_JSON=false for human-readable console output.
"""

import logging
import structlog
from crewcharge.config import settings

_configured = False


def configure_logging(force: bool = False):
    global _configured
    if _configured and not force:
        return
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s")
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.LOG_JSON
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
    _configured = True


def get_logger():
    return structlog.get_logger(settings.SERVICE_NAME)
