"""
Logging Configuration

structlog on top of the stdlib logging tree. Application events and stdlib
records (uvicorn, SQLAlchemy) share one processor chain and leave through a
single stdout handler, rendered as JSON lines or as console text.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level

from bizdash.config.settings import Settings, get_settings

SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _service_context(app_name: str, environment: str):
    """Build a processor stamping every event with the service identity."""
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("env", environment)
        return event_dict

    return processor


def _shared_processors(settings: Settings) -> List:
    return [
        structlog.contextvars.merge_contextvars,
        _service_context(settings.app_name, settings.app_env),
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def resolve_logging(settings: Settings, log_level: Optional[str] = None):
    """
    Effective (level name, format) for the given settings.

    Debug mode forces DEBUG and console output unless a level is passed
    explicitly.
    """
    if settings.debug:
        return (log_level or "DEBUG").upper(), "text"
    return (log_level or settings.monitoring.log_level).upper(), settings.monitoring.log_format


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()
    level, log_format = resolve_logging(settings, log_level)
    numeric_level = getattr(logging, level, logging.INFO)
    processors = _shared_processors(settings)

    structlog.configure(
        processors=processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer(colors=True)
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(ProcessorFormatter(processor=renderer, foreign_pre_chain=processors))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.setLevel(numeric_level)
        server_logger.propagate = False

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level,
        format=log_format,
        debug=settings.debug,
        environment=settings.app_env,
    )
