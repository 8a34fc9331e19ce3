"""Exception hierarchy with error codes for cmdshape.

Errors raised here fall into three groups: configuration problems caught while
building exec options, input introspection failures, and fan-out write failures
surfaced to whatever drives the output streams.
"""

from dataclasses import dataclass, field
from typing import Any

# Error codes
E_VALIDATION = "E_VALIDATION"
E_IO = "E_IO"
E_SHORT_WRITE = "E_SHORT_WRITE"


@dataclass
class CmdShapeException(Exception):  # noqa: N818
    """Base exception for all cmdshape-specific errors.

    Carries an error code and metadata for structured log output.
    """

    message: str
    error_code: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self.message

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)


@dataclass
class ConfigurationError(CmdShapeException):
    """Error in configuration or exec option construction."""

    key: str = ""
    reason: str = ""

    def __post_init__(self) -> None:
        """Initialize with configuration-specific metadata."""
        if not self.error_code:
            self.error_code = E_VALIDATION
        if self.key:
            self.metadata["config_key"] = self.key
        if self.reason:
            self.metadata["reason"] = self.reason
        super().__post_init__()


@dataclass
class RedactPatternError(ConfigurationError):
    """A redaction pattern failed to compile.

    Raised while the option is constructed, never while a command runs.
    """

    pattern: str = ""

    def __post_init__(self) -> None:
        if self.pattern:
            self.metadata["pattern"] = self.pattern
        super().__post_init__()


@dataclass
class InputSizeError(CmdShapeException):
    """Stat of a command input source failed unexpectedly."""

    reader_type: str = ""

    def __post_init__(self) -> None:
        if not self.error_code:
            self.error_code = E_IO
        if self.reader_type:
            self.metadata["reader_type"] = self.reader_type
        super().__post_init__()


@dataclass
class ShortWriteError(CmdShapeException):
    """A fan-out member accepted fewer bytes than it was given."""

    written: int = 0
    expected: int = 0

    def __post_init__(self) -> None:
        if not self.error_code:
            self.error_code = E_SHORT_WRITE
        self.metadata["written"] = self.written
        self.metadata["expected"] = self.expected
        super().__post_init__()


def format_error_for_user(exception: CmdShapeException) -> str:
    """Format exception for user-friendly display.

    Args:
        exception: The cmdshape exception to format

    Returns:
        Human-readable error message without internal details
    """
    if isinstance(exception, RedactPatternError):
        if exception.pattern:
            return f"Invalid redact pattern '{exception.pattern}': {exception.message}"
        return f"Invalid redact pattern: {exception.message}"

    if isinstance(exception, ConfigurationError):
        if exception.key:
            return f"Configuration error '{exception.key}': {exception.message}"
        return f"Configuration error: {exception.message}"

    if isinstance(exception, InputSizeError):
        return f"Input error: {exception.message}"

    if isinstance(exception, ShortWriteError):
        return (
            f"Short write ({exception.written}/{exception.expected} bytes): "
            f"{exception.message}"
        )

    return str(exception.message)


def format_error_for_log(exception: CmdShapeException) -> dict[str, Any]:
    """Format exception for structured logging.

    Args:
        exception: The cmdshape exception to format

    Returns:
        Dictionary with structured error information for logs
    """
    log_data: dict[str, Any] = {
        "error_type": type(exception).__name__,
        "message": exception.message,
        "error_code": exception.error_code,
    }

    if exception.metadata:
        log_data["metadata"] = exception.metadata

    if isinstance(exception, RedactPatternError) and exception.pattern:
        log_data["pattern"] = exception.pattern
    elif isinstance(exception, ConfigurationError):
        if exception.key:
            log_data["config_key"] = exception.key
        if exception.reason:
            log_data["reason"] = exception.reason
    elif isinstance(exception, InputSizeError) and exception.reader_type:
        log_data["reader_type"] = exception.reader_type
    elif isinstance(exception, ShortWriteError):
        log_data["written"] = exception.written
        log_data["expected"] = exception.expected

    return log_data
