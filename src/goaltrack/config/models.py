# src/goaltrack/config/models.py
"""
Pydantic models for goaltrack configuration.

The configuration hierarchy:
    GoalTrackConfig (root)
    ├── StorageConfig   - Record storage backend and size limits
    └── LoggingConfig   - Console/file logging settings

Usage:
    >>> from goaltrack.config import load_config
    >>> config = load_config()  # All defaults
    >>> config.storage.backend
    'memory'

    >>> config = load_config(config_dict={"storage": {"backend": "json", "path": "/tmp/gt"}})
    >>> config.storage.goals_file.name
    'goals.json'
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ConfigError
from ..storage.base import DEFAULT_MAX_KEY_SIZE, DEFAULT_MAX_VALUE_SIZE

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================


class StorageConfig(BaseModel):
    """
    Record storage settings.

    Examples:
        >>> StorageConfig().backend
        'memory'
        >>> StorageConfig().max_key_size
        44
    """

    backend: Literal["memory", "json"] = Field(
        default="memory",
        description="Storage backend: 'memory' (volatile) or 'json' (one file per collection)",
    )
    path: str = Field(
        default="~/.local/share/goaltrack",
        validate_default=True,
        description=(
            "Directory holding goals.json and milestones.json for the json backend. "
            "Tilde and environment variable expansion is applied."
        ),
    )
    max_key_size: int = Field(
        default=DEFAULT_MAX_KEY_SIZE,
        ge=1,
        description="Maximum record id length in bytes",
    )
    max_value_size: int = Field(
        default=DEFAULT_MAX_VALUE_SIZE,
        ge=1,
        description="Maximum encoded record size in bytes",
    )

    @field_validator("backend", mode="before")
    @classmethod
    def normalize_backend(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ and environment variables in path."""
        return os.path.expanduser(os.path.expandvars(v))

    @property
    def goals_file(self) -> Path:
        return Path(self.path) / "goals.json"

    @property
    def milestones_file(self) -> Path:
        return Path(self.path) / "milestones.json"


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================


class LoggingConfig(BaseModel):
    """
    Logging settings, passed as a dict to ``configure_logging``.

    Console output is silent by default: only records logged through
    ``log_display`` reach stderr unless ``console_enabled`` is set.
    """

    console_enabled: bool = False
    console_level: str = "WARNING"
    file_enabled: bool = False
    file_level: str = "DEBUG"
    file_directory: str = "~/.local/share/goaltrack/logs"
    file_mode: Literal["per_run", "single"] = "per_run"
    rotation_max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    rotation_backup_count: int = Field(default=5, ge=0)
    display_min_level: str = "INFO"
    components: dict[str, str] = Field(default_factory=lambda: {"goaltrack": "INFO"})

    @field_validator("console_level", "file_level", "display_min_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


# =============================================================================
# ROOT CONFIGURATION
# =============================================================================


class GoalTrackConfig(BaseModel):
    """Root configuration aggregating storage and logging settings."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# HELPER: LOAD FROM TOML DICT
# =============================================================================


def load_config(
    config_dict: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> GoalTrackConfig:
    """
    Load goaltrack configuration from a dictionary or TOML file.

    Args:
        config_dict: Pre-parsed configuration dictionary. If provided, it
            takes precedence over ``config_path``; its ``"goaltrack"`` key is
            extracted if present.
        config_path: Path to a TOML file. If provided, reads and parses it,
            then uses its ``[goaltrack]`` table, or the whole document when
            there is none.

    Returns:
        Validated GoalTrackConfig instance with defaults for any unspecified
        settings.

    Raises:
        ConfigError: If the file is missing or unreadable, or validation fails.

    Examples:
        >>> load_config().storage.backend
        'memory'

        >>> config = load_config(config_dict={"goaltrack": {"storage": {"max_key_size": 64}}})
        >>> config.storage.max_key_size
        64
    """
    data: Mapping[str, Any] = {}

    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        data = raw.get("goaltrack", raw)

    if config_dict is not None:
        # If the dict has a "goaltrack" key, extract it
        if "goaltrack" in config_dict:
            data = config_dict["goaltrack"]
        else:
            data = config_dict

    try:
        return GoalTrackConfig(**data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid goaltrack configuration: {e}") from e
