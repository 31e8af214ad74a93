# src/goaltrack/config/__init__.py
"""
Configuration module for the goaltrack library.

Settings are Pydantic models with defaults for everything, loadable from a
TOML file or a plain dictionary.

Configuration files:
    - Custom config: passed as ``config_path`` to ``load_config`` or ``--config`` on the CLI
"""

from .models import (
    GoalTrackConfig,
    LoggingConfig,
    StorageConfig,
    load_config,
)

__all__ = [
    "GoalTrackConfig",
    "LoggingConfig",
    "StorageConfig",
    "load_config",
]
