"""Structured JSON logging for command execution.

ShapeLogger is the leveled logger that exec options and their log taps write
to. Messages are handed to ``logging`` without ``%`` arguments, so command text
and output containing ``%`` are emitted verbatim.
"""

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Protocol

LOGGER_NAME = "cmdshape"


class LeveledLogger(Protocol):
    """Anything exec options can log through."""

    def debug(self, msg: str, **kv: Any) -> None: ...

    def info(self, msg: str, **kv: Any) -> None: ...

    def error(self, msg: str, **kv: Any) -> None: ...


class ShapeLogger:
    """Structured JSON logger with optional rotating file output.

    Writes JSON lines to the console and, unless disabled, to
    ``~/.cmdshape/logs/cmdshape.log``.
    """

    log_dir: Path | None
    log_file: Path | None

    def __init__(
        self,
        log_dir: str | None = None,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        level: str | None = None,
        file_logging: bool | None = None,
    ) -> None:
        """Initialize logger.

        Args:
            log_dir: Directory for log files (defaults to ~/.cmdshape/logs/)
            max_bytes: Maximum size before rotation (default 10MB)
            backup_count: Number of backup files to keep (default 5)
            level: Log level (DEBUG/INFO/WARN/ERROR), reads CMDSHAPE_LOG_LEVEL if not provided
            file_logging: Force file logging on or off; by default it is on unless
                CMDSHAPE_DISABLE_FILE_LOGGING is set
        """
        if file_logging is None:
            file_logging = os.environ.get("CMDSHAPE_DISABLE_FILE_LOGGING", "").lower() not in (
                "1",
                "true",
                "yes",
            )

        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False

        for handler in self._logger.handlers[:]:
            handler.close()
            self._logger.removeHandler(handler)

        if file_logging:
            if log_dir is None:
                self.log_dir = Path("~/.cmdshape/logs").expanduser()
            else:
                self.log_dir = Path(log_dir)

            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = self.log_dir / "cmdshape.log"

            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            file_handler.setFormatter(JSONFormatter())
            self._logger.addHandler(file_handler)
        else:
            self.log_dir = None
            self.log_file = None

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(JSONFormatter())
        self._logger.addHandler(console_handler)

        log_level = level or os.environ.get("CMDSHAPE_LOG_LEVEL", "WARNING")
        self.set_level(log_level)

    def set_level(self, level: str) -> None:
        """Set logging level.

        Args:
            level: One of DEBUG, INFO, WARN/WARNING, ERROR
        """
        level_upper = level.upper()
        if level_upper == "WARN":
            level_upper = "WARNING"

        numeric_level = getattr(logging, level_upper, logging.INFO)
        self._logger.setLevel(numeric_level)

    def debug(self, msg: str, **kv: Any) -> None:
        """Log debug message with optional key-value pairs."""
        self._logger.debug(msg, extra={"kv": kv})

    def info(self, msg: str, **kv: Any) -> None:
        """Log info message with optional key-value pairs."""
        self._logger.info(msg, extra={"kv": kv})

    def warn(self, msg: str, **kv: Any) -> None:
        """Log warning message with optional key-value pairs."""
        self._logger.warning(msg, extra={"kv": kv})

    def error(self, msg: str, **kv: Any) -> None:
        """Log error message with optional key-value pairs."""
        self._logger.error(msg, extra={"kv": kv})


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string
        """
        dt = datetime.fromtimestamp(record.created, tz=UTC)
        timestamp = dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

        log_data = {
            "timestamp": timestamp,
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if hasattr(record, "kv") and record.kv:
            log_data.update(record.kv)

        return json.dumps(log_data)


_default_logger: ShapeLogger | None = None


def get_logger() -> ShapeLogger:
    """Return the process-wide default logger, creating it on first use.

    The default logger only writes to the console.
    """
    global _default_logger
    if _default_logger is None:
        _default_logger = ShapeLogger(file_logging=False)
    return _default_logger


def set_logger(logger: ShapeLogger | None) -> None:
    """Replace the process-wide default logger (None resets it)."""
    global _default_logger
    _default_logger = logger
