"""Reader and writer adapters for command I/O.

Everything here works against a minimal contract: readers have
``read(size=-1) -> bytes`` and writers have ``write(data) -> int | None``. A
writer returning ``None`` is taken to have accepted everything, as Python's
own file objects sometimes do.

Each adapter instance is driven by one caller at a time. Adapters for
different streams may run on different threads; the only state they share is
the stderr write probe, which is a ``threading.Event``.
"""

import io
import os
import stat
import threading
from collections.abc import Callable
from typing import Any, Protocol

from cmdshape.core.exceptions import InputSizeError, ShortWriteError


class Reader(Protocol):
    def read(self, size: int = -1, /) -> bytes: ...


class Writer(Protocol):
    def write(self, data: bytes, /) -> int | None: ...


class LogWriter:
    """Turns every write into exactly one call of a logging function."""

    def __init__(self, fn: Callable[[str], Any]) -> None:
        self.fn = fn

    def write(self, data: bytes) -> int:
        self.fn(data.decode("utf-8", errors="replace"))
        return len(data)


class RedactingWriter:
    """Redacts each write before passing it on to the wrapped writer."""

    def __init__(self, writer: Writer, redact: Callable[[str], str]) -> None:
        self.writer = writer
        self.redact = redact

    def write(self, data: bytes) -> int:
        text = self.redact(data.decode("utf-8", errors="replace"))
        self.writer.write(text.encode("utf-8"))
        # Redaction changes the length; report what the caller handed over.
        return len(data)


class FlagWriter:
    """Discarding writer that records whether anything non-empty was written."""

    def __init__(self, flag: threading.Event) -> None:
        self.flag = flag

    def write(self, data: bytes) -> int:
        if data and not self.flag.is_set():
            self.flag.set()
        return len(data)


class NullWriter:
    """Accepts and discards every write."""

    def write(self, data: bytes) -> int:
        return len(data)


class MultiWriter:
    """Writes each chunk to every member, in order.

    The first member to raise stops the fan-out and its exception propagates
    unchanged. A member that accepts fewer bytes than it was given raises
    ShortWriteError.
    """

    def __init__(self, *writers: Writer) -> None:
        self.writers: list[Writer] = []
        for writer in writers:
            if isinstance(writer, MultiWriter):
                self.writers.extend(writer.writers)
            else:
                self.writers.append(writer)

    def write(self, data: bytes) -> int:
        for writer in self.writers:
            n = writer.write(data)
            if n is not None and n < len(data):
                raise ShortWriteError(
                    f"{type(writer).__name__} accepted {n} of {len(data)} bytes",
                    written=n,
                    expected=len(data),
                )
        return len(data)


class TeeReader:
    """Reader that copies everything read from ``reader`` into ``writer``.

    The copy happens per read call, as the consumer pulls data.
    """

    def __init__(self, reader: Reader, writer: Writer) -> None:
        self.reader = reader
        self.writer = writer

    def read(self, size: int = -1) -> bytes:
        data = self.reader.read(size)
        if data:
            self.writer.write(data)
        return data


def reader_size(reader: Any) -> int | None:
    """Return how many bytes ``reader`` will yield, if that can be known.

    Returns None for reader kinds that can't be introspected and for
    character devices such as a terminal.

    Raises:
        InputSizeError: If stat on a file-backed reader fails
    """
    if isinstance(reader, io.BytesIO):
        return reader.getbuffer().nbytes - reader.tell()

    fileno = getattr(reader, "fileno", None)
    if fileno is None:
        return None

    try:
        fd = fileno()
    except (OSError, ValueError):
        # io.UnsupportedOperation lands here: file-like but not fd-backed
        return None

    try:
        st = os.fstat(fd)
    except OSError as e:
        raise InputSizeError(
            f"failed to stat reader: {e}", reader_type=type(reader).__name__
        ) from e

    if stat.S_ISCHR(st.st_mode):
        return None

    return st.st_size
