"""Settings loading with a caller-selectable YAML file.

Precedence is always: keyword overrides, then ``LOGBOOK_`` environment
variables (``__`` separates nesting levels, so
``LOGBOOK_LOGGING__LEVEL=DEBUG`` sets ``logging.level``), then the YAML file,
then model defaults.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic_settings import SettingsConfigDict

from .models import DEFAULT_CONFIG_PATH, LogbookSettings

CONFIG_PATH_ENV = "LOGBOOK_CONFIG_PATH"


def load_settings(
    *,
    config_path: str | Path | None = None,
    **overrides: Any,
) -> LogbookSettings:
    """Load settings, reading YAML from ``config_path`` or ``LOGBOOK_CONFIG_PATH``."""
    resolved_path = _resolve_config_path(config_path)
    if resolved_path == DEFAULT_CONFIG_PATH:
        return LogbookSettings(**overrides)

    class _PathBoundSettings(LogbookSettings):
        model_config = SettingsConfigDict(yaml_file=resolved_path)

    return _PathBoundSettings(**overrides)


def _resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is not None:
        return Path(config_path).expanduser()
    from_env = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if from_env:
        return Path(from_env).expanduser()
    return DEFAULT_CONFIG_PATH
