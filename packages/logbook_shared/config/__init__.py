"""Public API for shared logbook configuration utilities."""

from .loader import CONFIG_PATH_ENV, load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ComponentsSettings,
    LoggingSettings,
    LogbookSettings,
    resolve_component_settings,
)

__all__ = [
    "CONFIG_PATH_ENV",
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "LoggingSettings",
    "LogbookSettings",
    "load_settings",
    "resolve_component_settings",
]
