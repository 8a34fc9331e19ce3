"""Configuration for cmdshape.

Settings are loaded and merged with precedence:
1. Environment variables (highest)
2. Project config (.cmdshape/config.json)
3. Defaults (lowest)
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from cmdshape.core.exceptions import ConfigurationError
from cmdshape.core.exec_options import ExecOption, log_input, trim_output
from cmdshape.core.redaction import REDACT_MASK, set_redaction_disabled

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR"}

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class ShapeConfig:
    """Process-level settings for command output shaping.

    ``disable_redact`` feeds the global redaction kill switch and is meant for
    trusted debugging only. ``trim_output`` and ``log_input`` become default
    exec options through ``exec_options()``.
    """

    disable_redact: bool = False
    redact_mask: str = REDACT_MASK
    log_level: str = "WARNING"
    trim_output: bool = True
    log_input: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for key in ("disable_redact", "trim_output", "log_input"):
            value = getattr(self, key)
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f"{key} must be a boolean, got {value!r}", key=key, reason="type"
                )
        for key in ("redact_mask", "log_level"):
            value = getattr(self, key)
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"{key} must be a string, got {value!r}", key=key, reason="type"
                )
        if not self.redact_mask:
            raise ConfigurationError("redact_mask must not be empty", key="redact_mask")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.log_level}",
                key="log_level",
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShapeConfig":
        """Create config from dictionary, ignoring unknown keys."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)

    def apply(self) -> None:
        """Push process-wide settings into effect.

        Call once at startup; this sets the redaction kill switch.
        """
        set_redaction_disabled(self.disable_redact)

    def exec_options(self) -> list[ExecOption]:
        """Exec options reflecting the configured defaults.

        Put these first so per-command options can still override them.
        """
        return [trim_output(self.trim_output), log_input(self.log_input)]


def load_project_config(project_root: Path | None = None) -> ShapeConfig | None:
    """Load project-specific configuration from .cmdshape/config.json.

    Args:
        project_root: Directory containing .cmdshape/ (default: current directory)

    Returns:
        ShapeConfig if the config file exists, None otherwise

    Raises:
        ConfigurationError: If config file is invalid JSON
    """
    if project_root is None:
        project_root = Path.cwd()

    config_path = project_root / ".cmdshape" / "config.json"

    if not config_path.exists():
        return None

    try:
        with config_path.open() as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in project config: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load project config: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Project config must be a JSON object")

    return ShapeConfig.from_dict(data)


def _env_bool(name: str) -> bool | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid {name}: {value}", key=name)


def load_env_overrides() -> dict[str, Any]:
    """Load configuration overrides from environment variables.

    Supported environment variables:
    - CMDSHAPE_DISABLE_REDACT: Turn off all redaction (debugging only)
    - CMDSHAPE_REDACT_MASK: Replacement text for redacted content
    - CMDSHAPE_LOG_LEVEL: Log level
    - CMDSHAPE_TRIM_OUTPUT: Trim whitespace around captured output
    - CMDSHAPE_LOG_INPUT: Log data sent to command stdin

    Returns:
        Dictionary of configuration overrides
    """
    overrides: dict[str, Any] = {}

    bool_vars = {
        "CMDSHAPE_DISABLE_REDACT": "disable_redact",
        "CMDSHAPE_TRIM_OUTPUT": "trim_output",
        "CMDSHAPE_LOG_INPUT": "log_input",
    }
    for env_name, key in bool_vars.items():
        value = _env_bool(env_name)
        if value is not None:
            overrides[key] = value

    if mask := os.getenv("CMDSHAPE_REDACT_MASK"):
        overrides["redact_mask"] = mask

    if level := os.getenv("CMDSHAPE_LOG_LEVEL"):
        overrides["log_level"] = level

    return overrides


def merge_configs(
    base: ShapeConfig,
    project: ShapeConfig | None = None,
    env_overrides: dict[str, Any] | None = None,
) -> ShapeConfig:
    """Merge configurations with precedence: env > project > base.

    Args:
        base: Base configuration
        project: Project-specific configuration (optional)
        env_overrides: Environment variable overrides (optional)

    Returns:
        Merged configuration
    """
    merged = base.to_dict()
    defaults = ShapeConfig().to_dict()

    if project:
        for key, value in project.to_dict().items():
            # Only override where the project deviates from defaults
            if value != defaults.get(key):
                merged[key] = value

    if env_overrides:
        merged.update(env_overrides)

    return ShapeConfig.from_dict(merged)


def load_config(project_root: Path | None = None) -> ShapeConfig:
    """Load and merge all configuration sources.

    Raises:
        ConfigurationError: If any config source is invalid
    """
    return merge_configs(ShapeConfig(), load_project_config(project_root), load_env_overrides())
