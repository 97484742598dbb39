"""
Main module - Main/Composition Root Layer

Wires settings, infrastructure and use cases together.

Its primary responsibilities include:
- Loading settings from the environment
- Configuring dependencies and services (Composition Root)
- Managing the database lifecycle around a batch run
"""

from .config import AppSettings, get_settings
from .container import AppContainer, app_lifespan, get_container, init_container

__all__ = [
    "AppSettings",
    "get_settings",
    "AppContainer",
    "app_lifespan",
    "init_container",
    "get_container",
]
