"""Tests for the cmdshape CLI."""

import pytest
from click.testing import CliRunner

from cmdshape import powershell as ps
from cmdshape.cli.main import cli
from cmdshape.core.redaction import REDACT_MASK


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in ("CMDSHAPE_DISABLE_REDACT", "CMDSHAPE_REDACT_MASK", "CMDSHAPE_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    return CliRunner()


class TestRedactCommand:
    def test_redacts_stdin(self, runner):
        result = runner.invoke(
            cli, ["redact", "-s", "hunter2", "-p", r"token=\w+"], input="pw hunter2 token=abc\n"
        )
        assert result.exit_code == 0
        assert result.output == f"pw {REDACT_MASK} {REDACT_MASK}\n"

    def test_redacts_file(self, runner, tmp_path):
        source = tmp_path / "log.txt"
        source.write_text("first secret\nsecond\n")

        result = runner.invoke(cli, ["redact", "-s", "secret", str(source)])
        assert result.exit_code == 0
        assert result.output == f"first {REDACT_MASK}\nsecond\n"

    def test_mask_from_env(self, runner, monkeypatch):
        monkeypatch.setenv("CMDSHAPE_REDACT_MASK", "***")
        result = runner.invoke(cli, ["redact", "-s", "pw"], input="pw\n")
        assert result.output == "***\n"

    def test_kill_switch_from_env(self, runner, monkeypatch):
        monkeypatch.setenv("CMDSHAPE_DISABLE_REDACT", "1")
        result = runner.invoke(cli, ["redact", "-s", "pw"], input="pw\n")
        assert result.stdout == "pw\n"
        assert "redaction is disabled for this process" in result.output

    def test_bad_pattern(self, runner):
        result = runner.invoke(cli, ["redact", "-p", "(oops"], input="x\n")
        assert result.exit_code == 1


class TestDecorateCommand:
    def test_powershell(self, runner):
        result = runner.invoke(cli, ["decorate", "Get-Date"])
        assert result.exit_code == 0
        assert result.output == ps.cmd("Get-Date") + "\n"

    def test_compressed(self, runner):
        result = runner.invoke(cli, ["decorate", "--mode", "compressed", "Get-Date"])
        assert result.exit_code == 0
        assert result.output == ps.compressed_cmd("Get-Date") + "\n"

    def test_show_log_emits_redacted_command_record(self, runner):
        result = runner.invoke(cli, ["decorate", "--show-log", "-s", "s3cr3t", "Connect s3cr3t"])
        assert result.exit_code == 0
        assert "executing `powershell.exe" in result.output
        assert f"-EncodedCommand Connect {REDACT_MASK}`" in result.output
        assert "s3cr3t" not in result.output

    def test_without_show_log_no_record(self, runner):
        result = runner.invoke(cli, ["decorate", "Get-Date"])
        assert "executing" not in result.output


class TestExpandCommand:
    def test_expands_and_redacts(self, runner):
        encoded = ps.cmd("Connect -Password s3cr3t")
        result = runner.invoke(cli, ["expand", "-s", "s3cr3t", encoded])
        assert result.exit_code == 0
        assert result.output.strip().endswith(f"-EncodedCommand Connect -Password {REDACT_MASK}")


def test_invalid_env_config_exits(runner, monkeypatch):
    monkeypatch.setenv("CMDSHAPE_LOG_LEVEL", "LOUD")
    result = runner.invoke(cli, ["expand", "x"])
    assert result.exit_code == 1


def test_wrongly_typed_project_config_exits(runner, tmp_path):
    config_dir = tmp_path / ".cmdshape"
    config_dir.mkdir()
    (config_dir / "config.json").write_text('{"log_level": 5}')

    result = runner.invoke(cli, ["expand", "x"])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
