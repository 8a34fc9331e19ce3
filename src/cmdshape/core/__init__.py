"""Core modules for cmdshape.

Redaction, command decoration, stream adapters and the exec options that tie
them together, plus the logging, error and configuration support they share.
"""

from .exceptions import (
    E_IO,
    E_SHORT_WRITE,
    E_VALIDATION,
    CmdShapeException,
    ConfigurationError,
    InputSizeError,
    RedactPatternError,
    ShortWriteError,
    format_error_for_log,
    format_error_for_user,
)
from .exec_options import ExecOption, ExecOptions, build
from .logger import ShapeLogger, get_logger, set_logger
from .redaction import REDACT_MASK, redaction_disabled, set_redaction_disabled

__all__ = [
    # Error codes
    "E_IO",
    "E_SHORT_WRITE",
    "E_VALIDATION",
    # Exception classes
    "CmdShapeException",
    "ConfigurationError",
    "InputSizeError",
    "RedactPatternError",
    "ShortWriteError",
    # Exec options
    "ExecOption",
    "ExecOptions",
    "build",
    # Logging
    "ShapeLogger",
    "get_logger",
    "set_logger",
    # Redaction
    "REDACT_MASK",
    "redaction_disabled",
    "set_redaction_disabled",
    # Error formatting utilities
    "format_error_for_log",
    "format_error_for_user",
]
