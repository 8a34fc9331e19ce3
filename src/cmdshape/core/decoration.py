"""Command decoration chain.

Decorators rewrite the literal command text before it is executed, for example
to run it through an alternate shell. The chain itself only composes them.
"""

import base64
import binascii
from collections.abc import Callable, Iterable

DecorateFunc = Callable[[str], str]

ENCODED_FLAGS = ("-E", "-EncodedCommand")


def decorate(command: str, decorators: Iterable[DecorateFunc]) -> str:
    """Apply ``decorators`` to ``command`` left to right."""
    for decorator in decorators:
        command = decorator(command)
    return command


def expand_encoded(command: str) -> str:
    """Return a legible form of a command carrying an encoded PowerShell script.

    The base64 payload following ``-E``/``-EncodedCommand`` is decoded as UTF-16LE,
    which is what powershell.exe expects. Payloads that are not valid UTF-16LE
    have their NUL bytes dropped instead. Anything that fails to decode is left
    as is.
    """
    if "powershell" not in command:
        return command

    parts = command.split(" ")
    for i, part in enumerate(parts[:-1]):
        if part not in ENCODED_FLAGS:
            continue
        try:
            decoded = base64.b64decode(parts[i + 1], validate=True)
        except (binascii.Error, ValueError):
            continue
        parts[i + 1] = _decode_payload(decoded)

    return " ".join(parts)


def _decode_payload(decoded: bytes) -> str:
    try:
        return decoded.decode("utf-16-le")
    except UnicodeDecodeError:
        return decoded.replace(b"\x00", b"").decode("utf-8", errors="replace")
