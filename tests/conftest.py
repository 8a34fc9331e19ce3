"""Shared fixtures for cmdshape tests."""

import pytest

from cmdshape.core import logger as logger_module
from cmdshape.core import redaction


class RecordingLogger:
    """Logger double that keeps (level, message) pairs."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def debug(self, msg, **kv):
        self.records.append(("debug", msg))

    def info(self, msg, **kv):
        self.records.append(("info", msg))

    def error(self, msg, **kv):
        self.records.append(("error", msg))

    def messages(self, level=None):
        return [m for lvl, m in self.records if level is None or lvl == level]


@pytest.fixture
def recorder():
    return RecordingLogger()


@pytest.fixture(autouse=True)
def _reset_process_state(monkeypatch):
    """Keep the redaction kill switch and default logger from leaking between tests."""
    monkeypatch.setenv("CMDSHAPE_DISABLE_FILE_LOGGING", "1")
    redaction.set_redaction_disabled(False)
    logger_module.set_logger(None)
    yield
    redaction.set_redaction_disabled(False)
    logger_module.set_logger(None)
