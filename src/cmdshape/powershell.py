"""PowerShell command decorators.

``cmd`` and ``compressed_cmd`` are the decorators behind the ``powershell()``
and ``powershell_compressed()`` exec options.
"""

import base64
import gzip

POWERSHELL = "powershell.exe -NonInteractive -ExecutionPolicy Bypass -NoProfile"

# powershell.exe rejects command lines longer than this
MAX_COMMAND_LENGTH = 8191

_DECOMPRESS_BOOTSTRAP = (
    "$s=New-Object IO.MemoryStream(,[Convert]::FromBase64String('{payload}'));"
    "IEX (New-Object IO.StreamReader(New-Object IO.Compression.GzipStream("
    "$s,[IO.Compression.CompressionMode]::Decompress))).ReadToEnd()"
)


def encode_cmd(script: str) -> str:
    """Encode a script for ``-EncodedCommand`` (base64 of UTF-16LE)."""
    return base64.b64encode(script.encode("utf-16-le")).decode("ascii")


def cmd(script: str) -> str:
    """Wrap a script in a non-interactive powershell.exe invocation."""
    return f"{POWERSHELL} -EncodedCommand {encode_cmd(script)}"


def compressed_cmd(script: str) -> str:
    """Like ``cmd`` but gzips the script first.

    The result carries a small bootstrap that decompresses and runs the script,
    which lets scripts well beyond ``MAX_COMMAND_LENGTH`` characters through.
    """
    payload = base64.b64encode(gzip.compress(script.encode("utf-8"))).decode("ascii")
    return cmd(_DECOMPRESS_BOOTSTRAP.format(payload=payload))


def single_quote(s: str) -> str:
    """Quote ``s`` as a PowerShell single-quoted string."""
    return "'" + s.replace("'", "''") + "'"


def double_quote(s: str) -> str:
    """Quote ``s`` as a PowerShell double-quoted string, escaping with backticks."""
    escaped = s.replace("`", "``").replace('"', '`"').replace("$", "`$")
    return '"' + escaped + '"'
