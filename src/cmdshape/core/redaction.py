"""Redaction of sensitive text before it reaches the logs.

A redaction chain is an ordered list of rules, each a plain ``str -> str``
function. Rules see the output of the rules before them. Redaction only ever
applies to what is logged; the bytes delivered to a caller's own sinks are
never rewritten.

The process-wide kill switch turns all redaction off. Set it once at process
start for trusted debugging sessions and leave it alone afterwards.
"""

import re
from collections.abc import Callable, Iterable

from cmdshape.core.exceptions import RedactPatternError

REDACT_MASK = "[REDACTED]"

RedactFunc = Callable[[str], str]

DISABLE_REDACT = False


def set_redaction_disabled(disabled: bool) -> None:
    """Turn the global redaction kill switch on or off."""
    global DISABLE_REDACT
    DISABLE_REDACT = disabled


def redaction_disabled() -> bool:
    """Return True if the global kill switch is set."""
    return DISABLE_REDACT


def redact(text: str, rules: Iterable[RedactFunc]) -> str:
    """Fold ``text`` through ``rules`` in order.

    Args:
        text: Text to redact
        rules: Redaction rules, applied in registration order

    Returns:
        The redacted text, or ``text`` unchanged when the kill switch is set or
        there are no rules
    """
    if DISABLE_REDACT:
        return text
    for rule in rules:
        text = rule(text)
    return text


def pattern_rule(pattern: "str | re.Pattern[str]", mask: str = REDACT_MASK) -> RedactFunc:
    """Build a rule replacing every match of ``pattern`` with ``mask``.

    The pattern is compiled immediately.

    Raises:
        RedactPatternError: If the pattern does not compile
    """
    if isinstance(pattern, re.Pattern):
        compiled = pattern
    else:
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise RedactPatternError(
                f"failed to compile redact pattern: {e}",
                key="redact",
                pattern=pattern,
            ) from e

    # A callable replacement keeps backslashes in the mask literal.
    def _rule(text: str) -> str:
        return compiled.sub(lambda _match: mask, text)

    return _rule


def literal_rule(*literals: str, mask: str = REDACT_MASK) -> RedactFunc:
    """Build a rule replacing every occurrence of each literal with ``mask``.

    Empty strings are ignored. Literals are replaced in the order given.
    """
    needles = [s for s in literals if s]

    def _rule(text: str) -> str:
        for needle in needles:
            text = text.replace(needle, mask)
        return text

    return _rule
