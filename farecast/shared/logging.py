"""
Logging Configuration - Shared Layer

Structured logging for batch runs. Standard library handlers do the I/O,
structlog renders every record (including those emitted through plain
``logging`` calls) so route keys and stage names end up as fields.
"""

import logging
import os
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import Processor

from farecast.shared.consts import EnumEnvironment


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def configure_logging(
    level: Optional[str] = None,
    file_path: Optional[str] = None,
    environment: str = "development",
) -> None:
    """
    Configure stdlib logging and structlog together.

    Call once at startup; ``update_logging_from_settings`` re-applies the
    configuration when the full settings object is available.

    Args:
        level: Log level name, falls back to ``LOG_LEVEL`` then INFO.
        file_path: Optional log file, falls back to ``LOG_FILE_PATH``.
        environment: JSON output is used in production, console otherwise.
    """
    log_level = level or os.environ.get("LOG_LEVEL") or "INFO"
    log_file = file_path or os.environ.get("LOG_FILE_PATH")
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    renderer: Processor
    if environment.lower() == EnumEnvironment.PRODUCTION.value:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_shared_processors(),
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = _build_handlers(log_file)
    for handler in handlers:
        handler.setFormatter(formatter)
    root_logger.handlers = handlers
    root_logger.setLevel(numeric_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    get_logger(__name__).info(
        "logging.configured", level=log_level.upper(), file_path=log_file
    )


def update_logging_from_settings(settings: Any) -> None:
    """
    Reconfigure logging from the application settings object.

    Args:
        settings: Object exposing ``logging.level``, ``logging.file_path``
            and ``environment`` (enums or plain strings).
    """
    level = getattr(settings.logging.level, "value", settings.logging.level)
    environment = getattr(settings.environment, "value", settings.environment)
    configure_logging(
        level=level,
        file_path=settings.logging.file_path,
        environment=environment,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger configured for the project."""
    return structlog.get_logger(name)
