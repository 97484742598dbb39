"""
Shared module - Cross-cutting concerns / Shared Layer

This module provides constants, enums and the logging bootstrap used
across every layer of the application. It must not depend on the
Domain, Application or Infrastructure layers.
"""

from .consts import (
    DEFAULT_SEASONAL_PERIOD,
    EnumEnvironment,
    EnumLogLevel,
    ObservationKind,
)
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "DEFAULT_SEASONAL_PERIOD",
    "EnumEnvironment",
    "EnumLogLevel",
    "ObservationKind",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
