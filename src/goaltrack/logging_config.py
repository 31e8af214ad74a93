# src/goaltrack/logging_config.py
"""
Logging setup for goaltrack applications.

Library modules only ever call ``logging.getLogger(__name__)``; this module is
for the process that embeds goaltrack (or the ``goaltrack`` CLI) to decide
where those records go.

Key concepts:

    **Display filter**: When ``console_enabled=False`` (the default), the
    console handler still exists but only passes through log records that
    carry ``extra={"display": True}``. Operational messages can then reach
    the user in "silent" mode while per-record chatter stays in the log file.

    **File modes**: ``file_mode="per_run"`` writes a new timestamped file on
    each invocation; ``file_mode="single"`` appends to one file rotated by a
    ``RotatingFileHandler``.

Usage:
    from goaltrack.logging_config import configure_logging, log_display

    configure_logging(app_name="goaltrack", config=config.logging.model_dump())
    log_display(logger, logging.INFO, "Loaded %d goals", count)
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

DEFAULT_LOGGING_CONFIG: dict[str, Any] = {
    "console_enabled": False,
    "console_level": "WARNING",
    "console_format": "%(levelname)s - %(message)s",
    "file_enabled": False,
    "file_level": "DEBUG",
    "file_directory": "~/.local/share/goaltrack/logs",
    "file_mode": "per_run",
    "file_name_pattern": "{app}_{timestamp:%Y%m%d_%H%M%S}.log",
    "file_single_name": "{app}.log",
    "file_format": "%(asctime)s [%(levelname)-8s] %(name)-28s - %(message)s",
    "rotation_max_bytes": 10 * 1024 * 1024,  # 10 MB
    "rotation_backup_count": 5,
    "display_min_level": "INFO",
    "components": {
        "goaltrack": "INFO",
    },
}


def _level(value: Any, default: int) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else default


class DisplayFilter(logging.Filter):
    """Controls which log records pass through to the console handler.

    Behavior matrix::

        +------------------------+--------------+-----------------+
        | console_global         | display=True | display=False/  |
        |                        |              | absent          |
        +------------------------+--------------+-----------------+
        | True  (verbose)        | PASS         | PASS            |
        | False (default/quiet)  | PASS*        | BLOCK           |
        +------------------------+--------------+-----------------+

        * subject to display_min_level
    """

    def __init__(
        self,
        console_globally_enabled: bool = False,
        display_min_level: int = logging.INFO,
    ) -> None:
        super().__init__()
        self.console_globally_enabled = console_globally_enabled
        self.display_min_level = display_min_level

    def filter(self, record: logging.LogRecord) -> bool:
        if self.console_globally_enabled:
            return True
        if getattr(record, "display", False):
            return record.levelno >= self.display_min_level
        return False


class LoggingManager:
    """
    Singleton owner of the root logger's goaltrack handlers.

    Logging is configured once per process unless ``force_reconfigure`` is
    passed.
    """

    _instance: Optional["LoggingManager"] = None
    _configured: bool = False
    _log_file_path: Path | None = None
    _console_handler: logging.Handler | None = None
    _file_handler: logging.Handler | None = None

    def __new__(cls) -> "LoggingManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "LoggingManager":
        return cls()

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @classmethod
    def get_log_file_path(cls) -> Path | None:
        return cls._log_file_path

    def configure(
        self,
        app_name: str = "goaltrack",
        config: dict[str, Any] | None = None,
        force_reconfigure: bool = False,
    ) -> Path | None:
        """
        Install console and file handlers on the root logger.

        Returns:
            Path to the log file, or None when file logging is disabled or
            the file could not be created.
        """
        if LoggingManager._configured and not force_reconfigure:
            return LoggingManager._log_file_path

        log_config = {**DEFAULT_LOGGING_CONFIG, **(config or {})}

        root_logger = logging.getLogger()
        for handler in (LoggingManager._console_handler, LoggingManager._file_handler):
            if handler is not None:
                root_logger.removeHandler(handler)
                handler.close()
        LoggingManager._console_handler = None
        LoggingManager._file_handler = None
        LoggingManager._log_file_path = None
        root_logger.setLevel(logging.DEBUG)

        console_enabled = bool(log_config.get("console_enabled", False))
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(log_config["console_format"]))
        # Silent mode leaves the filter as the only gate.
        console_handler.setLevel(
            _level(log_config["console_level"], logging.WARNING) if console_enabled else logging.DEBUG
        )
        console_handler.addFilter(DisplayFilter(
            console_globally_enabled=console_enabled,
            display_min_level=_level(log_config["display_min_level"], logging.INFO),
        ))
        root_logger.addHandler(console_handler)
        LoggingManager._console_handler = console_handler

        if log_config.get("file_enabled", False):
            handler, path = self._create_file_handler(log_config, app_name)
            if handler is not None:
                root_logger.addHandler(handler)
                LoggingManager._file_handler = handler
                LoggingManager._log_file_path = path

        for component, level in log_config.get("components", {}).items():
            logging.getLogger(component).setLevel(_level(level, logging.INFO))

        LoggingManager._configured = True
        logging.getLogger(__name__).debug(
            "Logging configured (console_enabled=%s, log_file=%s)",
            console_enabled, LoggingManager._log_file_path,
        )
        return LoggingManager._log_file_path

    def _create_file_handler(
        self, config: dict[str, Any], app_name: str
    ) -> tuple[logging.Handler | None, Path | None]:
        log_dir = Path(os.path.expanduser(config["file_directory"]))
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            sys.stderr.write(f"Warning: Cannot create log directory {log_dir}: {e}\n")
            return None, None

        try:
            if config.get("file_mode") == "single":
                log_file_path = log_dir / config["file_single_name"].format(app=app_name)
                handler: logging.Handler = RotatingFileHandler(
                    log_file_path,
                    maxBytes=config["rotation_max_bytes"],
                    backupCount=config["rotation_backup_count"],
                    encoding="utf-8",
                )
            else:
                filename = config["file_name_pattern"].format(app=app_name, timestamp=datetime.now())
                log_file_path = log_dir / filename
                handler = logging.FileHandler(log_file_path, encoding="utf-8")
        except OSError as e:
            sys.stderr.write(f"Warning: Cannot create log file in {log_dir}: {e}\n")
            return None, None

        handler.setLevel(_level(config["file_level"], logging.DEBUG))
        handler.setFormatter(logging.Formatter(config["file_format"]))
        return handler, log_file_path


def configure_logging(
    app_name: str = "goaltrack",
    config: dict[str, Any] | None = None,
    force_reconfigure: bool = False,
) -> Path | None:
    """
    Configure logging for the application.

    Args:
        app_name: Used in the log file name.
        config: Logging settings; missing keys fall back to
            ``DEFAULT_LOGGING_CONFIG``. ``GoalTrackConfig.logging.model_dump()``
            is the usual source.
        force_reconfigure: Replace handlers even if already configured.
    """
    return LoggingManager.get_instance().configure(
        app_name=app_name, config=config, force_reconfigure=force_reconfigure
    )


def log_display(
    logger: logging.Logger,
    level: int,
    msg: str,
    *args: Any,
    **kwargs: Any,
) -> None:
    """Log a message that also reaches the console in silent mode.

    Wraps ``logger.log()`` with ``extra={"display": True}``, merging any
    ``extra`` the caller passed.
    """
    extra = kwargs.pop("extra", None) or {}
    extra["display"] = True
    kwargs["extra"] = extra
    logger.log(level, msg, *args, **kwargs)


def get_log_file_path() -> Path | None:
    return LoggingManager.get_log_file_path()
