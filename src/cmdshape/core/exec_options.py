"""Exec options: per-command logging, redaction and decoration settings.

An ExecOptions is built once per command from a sequence of option functions::

    opts = build(redact_string(token), stream_output(), powershell())
    opts.log_cmd(opts.command(script))
    proc_stdin = opts.stdin_reader()
    proc_stdout = opts.stdout_writer()
    proc_stderr = opts.stderr_writer()
    ...
    if opts.wrote_err() and not opts.allow_win_stderr:
        ...
    return opts.format_output(output)

Options apply strictly in order. Scalar settings are last-write-wins and
redaction/decoration rules accumulate.
"""

import io
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from cmdshape import powershell as ps
from cmdshape.core.decoration import DecorateFunc, expand_encoded
from cmdshape.core.decoration import decorate as apply_decorators
from cmdshape.core.exceptions import InputSizeError
from cmdshape.core.logger import LeveledLogger, get_logger
from cmdshape.core.redaction import REDACT_MASK, RedactFunc, literal_rule, pattern_rule
from cmdshape.core.redaction import redact as apply_redaction
from cmdshape.core.streams import (
    FlagWriter,
    LogWriter,
    MultiWriter,
    NullWriter,
    Reader,
    RedactingWriter,
    TeeReader,
    Writer,
    reader_size,
)


@dataclass
class ExecOptions:
    """Settings consulted while one command runs.

    Only the stderr write probe changes once the options are built.
    """

    stdin: Reader | None = None
    stdout: Writer | None = None
    stderr: Writer | None = None

    allow_win_stderr: bool = False

    log_command: bool = True
    log_error: bool = True
    log_output: bool = True
    log_input: bool = False

    stream_output: bool = False
    trim_output: bool = True

    redact_funcs: list[RedactFunc] = field(default_factory=list)
    decorate_funcs: list[DecorateFunc] = field(default_factory=list)

    logger: LeveledLogger | None = None

    _wrote_err: threading.Event = field(default_factory=threading.Event, repr=False)

    def apply(self, *opts: "ExecOption") -> None:
        """Apply options in order."""
        for opt in opts:
            opt(self)

    @property
    def log(self) -> LeveledLogger:
        return self.logger if self.logger is not None else get_logger()

    def redact(self, text: str) -> str:
        """Redact ``text`` with the registered rules."""
        return apply_redaction(text, self.redact_funcs)

    def command(self, cmd: str) -> str:
        """Return ``cmd`` with all decorators applied."""
        return apply_decorators(cmd, self.decorate_funcs)

    def log_cmd(self, cmd: str) -> None:
        """Log the command about to run.

        Encoded PowerShell payloads are expanded and the result redacted. With
        command logging off only a fixed notice is logged.
        """
        if self.log_command:
            self.log.debug(f"executing `{self.redact(expand_encoded(cmd))}`")
        else:
            self.log.debug("executing command")

    def format_output(self, output: str) -> str:
        """Trim surrounding whitespace from the output if trimming is on."""
        if self.trim_output:
            return output.strip()
        return output

    def wrote_err(self) -> bool:
        """Return True if the command wrote anything to stderr."""
        return self._wrote_err.is_set()

    def _tap(self, fn: Callable[[str], object]) -> RedactingWriter:
        return RedactingWriter(LogWriter(fn), self.redact)

    def stdin_reader(self) -> Reader | None:
        """Return the reader to feed the command's stdin, or None for no stdin.

        With input logging on, everything the command reads is also logged
        (redacted) at debug level as it is read.
        """
        if self.stdin is None:
            return None

        try:
            size = reader_size(self.stdin)
        except InputSizeError as e:
            self.log.debug(f"could not determine input size: {e}")
            size = None

        if size:
            self.log.debug(f"using {size} bytes of data from reader as command input")
        else:
            self.log.debug("using data from reader as command input")

        if self.log_input:
            return TeeReader(self.stdin, self._tap(self.log.debug))

        return self.stdin

    def stdout_writer(self) -> Writer:
        """Return the writer for the command's stdout."""
        writers: list[Writer] = []
        if self.stream_output:
            writers.append(self._tap(self.log.info))
        elif self.log_output:
            writers.append(self._tap(self.log.debug))
        if self.stdout is not None:
            writers.append(self.stdout)
        if not writers:
            return NullWriter()
        return MultiWriter(*writers)

    def stderr_writer(self) -> Writer:
        """Return the writer for the command's stderr.

        Always includes the probe behind ``wrote_err``.
        """
        writers: list[Writer] = []
        if self.stream_output:
            writers.append(self._tap(self.log.error))
        elif self.log_error:
            writers.append(self._tap(self.log.debug))
        writers.append(FlagWriter(self._wrote_err))
        if self.stderr is not None:
            writers.append(self.stderr)
        return MultiWriter(*writers)


ExecOption = Callable[[ExecOptions], None]


def build(*opts: ExecOption) -> ExecOptions:
    """Create ExecOptions with defaults and apply ``opts`` in order."""
    options = ExecOptions()
    options.apply(*opts)
    return options


def stdin(reader: Reader) -> ExecOption:
    """Send data from ``reader`` to the command's stdin."""

    def _opt(o: ExecOptions) -> None:
        o.stdin = reader

    return _opt


def stdin_string(text: str) -> ExecOption:
    """Send ``text`` (UTF-8 encoded) to the command's stdin."""

    def _opt(o: ExecOptions) -> None:
        o.stdin = io.BytesIO(text.encode("utf-8"))

    return _opt


def stdout(writer: Writer) -> ExecOption:
    """Copy the command's stdout to ``writer``."""

    def _opt(o: ExecOptions) -> None:
        o.stdout = writer

    return _opt


def stderr(writer: Writer) -> ExecOption:
    """Copy the command's stderr to ``writer``."""

    def _opt(o: ExecOptions) -> None:
        o.stderr = writer

    return _opt


def stream_output() -> ExecOption:
    """Log stdout at info and stderr at error level while the command runs."""

    def _opt(o: ExecOptions) -> None:
        o.stream_output = True

    return _opt


def log_error(enabled: bool) -> ExecOption:
    """Enable or disable debug logging of stderr."""

    def _opt(o: ExecOptions) -> None:
        o.log_error = enabled

    return _opt


def hide_command() -> ExecOption:
    """Keep the command text out of the logs."""

    def _opt(o: ExecOptions) -> None:
        o.log_command = False

    return _opt


def hide_output() -> ExecOption:
    """Keep stdout and stderr out of the debug log."""

    def _opt(o: ExecOptions) -> None:
        o.log_output = False
        o.log_error = False

    return _opt


def sensitive() -> ExecOption:
    """Disable all logging of the command, its input and its output."""

    def _opt(o: ExecOptions) -> None:
        o.log_command = False
        o.log_output = False
        o.log_error = False
        o.log_input = False
        o.stream_output = False

    return _opt


def redact(pattern: str, mask: str = REDACT_MASK) -> ExecOption:
    """Mask matches of a regular expression in the logs with ``mask``.

    Raises:
        RedactPatternError: If the pattern does not compile
    """
    rule = pattern_rule(pattern, mask=mask)

    def _opt(o: ExecOptions) -> None:
        o.redact_funcs.append(rule)

    return _opt


def redact_string(*literals: str, mask: str = REDACT_MASK) -> ExecOption:
    """Mask each of the given strings in the logs with ``mask``."""
    rule = literal_rule(*literals, mask=mask)

    def _opt(o: ExecOptions) -> None:
        o.redact_funcs.append(rule)

    return _opt


def log_input(enabled: bool) -> ExecOption:
    """Enable or disable debug logging of data sent to stdin."""

    def _opt(o: ExecOptions) -> None:
        o.log_input = enabled

    return _opt


def trim_output(enabled: bool) -> ExecOption:
    """Control whether ``format_output`` strips surrounding whitespace."""

    def _opt(o: ExecOptions) -> None:
        o.trim_output = enabled

    return _opt


def allow_win_stderr() -> ExecOption:
    """Let the command write to stderr without that counting as a failure."""

    def _opt(o: ExecOptions) -> None:
        o.allow_win_stderr = True

    return _opt


def decorate(decorator: DecorateFunc) -> ExecOption:
    """Add a custom decorator to the command text."""

    def _opt(o: ExecOptions) -> None:
        o.decorate_funcs.append(decorator)

    return _opt


def powershell() -> ExecOption:
    """Run the command through powershell.exe."""
    return decorate(ps.cmd)


def powershell_compressed() -> ExecOption:
    """Like ``powershell`` but gzip the script first, for long scriptlets."""
    return decorate(ps.compressed_cmd)


def with_logger(logger: LeveledLogger) -> ExecOption:
    """Log through ``logger`` instead of the package default."""

    def _opt(o: ExecOptions) -> None:
        o.logger = logger

    return _opt
