"""
cmdshape

Output shaping and redaction for command execution: decides how a command's
input, output and command line are logged and sanitized.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from cmdshape.core.config import ShapeConfig, load_config
from cmdshape.core.exceptions import (
    CmdShapeException,
    ConfigurationError,
    InputSizeError,
    RedactPatternError,
    ShortWriteError,
)
from cmdshape.core.exec_options import (
    ExecOption,
    ExecOptions,
    allow_win_stderr,
    build,
    decorate,
    hide_command,
    hide_output,
    log_error,
    log_input,
    powershell,
    powershell_compressed,
    redact,
    redact_string,
    sensitive,
    stderr,
    stdin,
    stdin_string,
    stdout,
    stream_output,
    trim_output,
    with_logger,
)
from cmdshape.core.redaction import REDACT_MASK, set_redaction_disabled

__all__ = [
    # Version
    "__version__",
    # Exec options
    "ExecOption",
    "ExecOptions",
    "build",
    "allow_win_stderr",
    "decorate",
    "hide_command",
    "hide_output",
    "log_error",
    "log_input",
    "powershell",
    "powershell_compressed",
    "redact",
    "redact_string",
    "sensitive",
    "stderr",
    "stdin",
    "stdin_string",
    "stdout",
    "stream_output",
    "trim_output",
    "with_logger",
    # Redaction
    "REDACT_MASK",
    "set_redaction_disabled",
    # Config
    "ShapeConfig",
    "load_config",
    # Exceptions
    "CmdShapeException",
    "ConfigurationError",
    "InputSizeError",
    "RedactPatternError",
    "ShortWriteError",
]
