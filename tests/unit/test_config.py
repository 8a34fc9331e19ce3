"""Tests for configuration system."""

import json

import pytest

from cmdshape.core.config import (
    ShapeConfig,
    load_config,
    load_env_overrides,
    load_project_config,
    merge_configs,
)
from cmdshape.core.exceptions import ConfigurationError
from cmdshape.core.exec_options import build
from cmdshape.core.redaction import REDACT_MASK, redaction_disabled

ENV_VARS = [
    "CMDSHAPE_DISABLE_REDACT",
    "CMDSHAPE_REDACT_MASK",
    "CMDSHAPE_LOG_LEVEL",
    "CMDSHAPE_TRIM_OUTPUT",
    "CMDSHAPE_LOG_INPUT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)


class TestShapeConfig:
    def test_default_config(self):
        config = ShapeConfig()
        assert config.disable_redact is False
        assert config.redact_mask == REDACT_MASK
        assert config.log_level == "WARNING"
        assert config.trim_output is True
        assert config.log_input is False

    def test_validation_empty_mask(self):
        with pytest.raises(ConfigurationError, match="redact_mask must not be empty"):
            ShapeConfig(redact_mask="")

    def test_validation_log_level(self):
        with pytest.raises(ConfigurationError, match="log_level must be one of"):
            ShapeConfig(log_level="LOUD")

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("log_level", 5),
            ("redact_mask", ["x"]),
            ("trim_output", "no"),
            ("disable_redact", 1),
            ("log_input", None),
        ],
    )
    def test_validation_types(self, key, value):
        with pytest.raises(ConfigurationError) as exc_info:
            ShapeConfig(**{key: value})
        assert exc_info.value.key == key

    def test_wrongly_typed_project_value(self, tmp_path):
        config_dir = tmp_path / ".cmdshape"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"log_level": 5}))

        with pytest.raises(ConfigurationError, match="log_level must be a string"):
            load_project_config(tmp_path)

    def test_from_dict_ignores_unknown_keys(self):
        config = ShapeConfig.from_dict({"trim_output": False, "unknown_key": 1})
        assert config.trim_output is False
        assert not hasattr(config, "unknown_key")

    def test_to_dict(self):
        data = ShapeConfig(log_input=True).to_dict()
        assert data["log_input"] is True
        assert "disable_redact" in data

    def test_apply_sets_kill_switch(self):
        ShapeConfig(disable_redact=True).apply()
        assert redaction_disabled() is True
        ShapeConfig().apply()
        assert redaction_disabled() is False

    def test_exec_options_are_overridable(self):
        config = ShapeConfig(trim_output=False, log_input=True)
        opts = build(*config.exec_options())
        assert opts.trim_output is False
        assert opts.log_input is True


class TestLoadProjectConfig:
    def test_load_nonexistent_project_config(self, tmp_path):
        assert load_project_config(tmp_path) is None

    def test_load_valid_project_config(self, tmp_path):
        config_dir = tmp_path / ".cmdshape"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"redact_mask": "***"}))

        config = load_project_config(tmp_path)
        assert config is not None
        assert config.redact_mask == "***"

    def test_load_project_config_current_dir(self, tmp_path, monkeypatch):
        config_dir = tmp_path / ".cmdshape"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"log_level": "DEBUG"}))

        monkeypatch.chdir(tmp_path)

        config = load_project_config()
        assert config is not None
        assert config.log_level == "DEBUG"

    def test_load_invalid_project_json(self, tmp_path):
        config_dir = tmp_path / ".cmdshape"
        config_dir.mkdir()
        (config_dir / "config.json").write_text("not json")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_project_config(tmp_path)

    def test_non_object_rejected(self, tmp_path):
        config_dir = tmp_path / ".cmdshape"
        config_dir.mkdir()
        (config_dir / "config.json").write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="must be a JSON object"):
            load_project_config(tmp_path)


class TestLoadEnvOverrides:
    def test_no_env_vars(self, clean_env):
        assert load_env_overrides() == {}

    def test_bool_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("CMDSHAPE_DISABLE_REDACT", "yes")
        monkeypatch.setenv("CMDSHAPE_TRIM_OUTPUT", "0")
        overrides = load_env_overrides()
        assert overrides == {"disable_redact": True, "trim_output": False}

    def test_invalid_bool(self, clean_env, monkeypatch):
        monkeypatch.setenv("CMDSHAPE_LOG_INPUT", "maybe")
        with pytest.raises(ConfigurationError, match="Invalid CMDSHAPE_LOG_INPUT"):
            load_env_overrides()

    def test_string_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("CMDSHAPE_REDACT_MASK", "<hidden>")
        monkeypatch.setenv("CMDSHAPE_LOG_LEVEL", "DEBUG")
        assert load_env_overrides() == {"redact_mask": "<hidden>", "log_level": "DEBUG"}


class TestMergeConfigs:
    def test_project_overrides_base(self):
        merged = merge_configs(ShapeConfig(), ShapeConfig(log_input=True))
        assert merged.log_input is True

    def test_project_defaults_do_not_override_base(self):
        merged = merge_configs(ShapeConfig(trim_output=False), ShapeConfig())
        assert merged.trim_output is False

    def test_env_has_highest_precedence(self):
        merged = merge_configs(
            ShapeConfig(),
            ShapeConfig(redact_mask="[P]"),
            {"redact_mask": "[E]"},
        )
        assert merged.redact_mask == "[E]"


def test_load_config_all_sources(tmp_path, clean_env, monkeypatch):
    config_dir = tmp_path / ".cmdshape"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(
        json.dumps({"log_input": True, "redact_mask": "[P]"})
    )
    monkeypatch.setenv("CMDSHAPE_REDACT_MASK", "[E]")

    config = load_config(tmp_path)
    assert config.log_input is True
    assert config.redact_mask == "[E]"
