"""Configuration management for github-daily-report."""

import os
import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from .github_client import DEFAULT_ENDPOINT
from .report_builder import DEFAULT_LOOKBACK_DAYS, DEFAULT_LOW_RATE_LIMIT

DEFAULT_OUTPUT = "github-report.md"

_ENV_VAR = re.compile(r"\$\{([^}]+)\}")


@dataclass
class Settings:
    """Settings for a report run."""

    endpoint: str = DEFAULT_ENDPOINT
    username: str | None = None
    output: str = DEFAULT_OUTPUT
    low_rate_limit_threshold: int = DEFAULT_LOW_RATE_LIMIT
    activity_lookback_days: int = DEFAULT_LOOKBACK_DAYS
    timeout: float = 30.0


def _expand_env_vars(value):
    """Expand ``${VAR_NAME}`` references in strings, lists and dicts.

    References to unset variables are left untouched.
    """
    if isinstance(value, str):
        return _ENV_VAR.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    if isinstance(value, dict):
        return {key: _expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _as_int(raw: dict, key: str, minimum: int) -> int | None:
    if key not in raw:
        return None
    value = raw[key]
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"'{key}' must be an integer >= {minimum}, got {raw[key]!r}")
    return value


def load_config(config_path: str | Path) -> Settings:
    """Load and parse settings from a YAML file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Parsed settings; keys missing from the file keep their defaults

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        raw_config = yaml.safe_load(f)

    if not raw_config:
        raise ValueError("Configuration file is empty")

    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a mapping")

    raw_config = _expand_env_vars(raw_config)

    unknown = set(raw_config) - set(Settings.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    settings = Settings()

    for key in ("endpoint", "username", "output"):
        if key in raw_config:
            value = raw_config[key]
            if not isinstance(value, str) or not value:
                raise ValueError(f"'{key}' must be a non-empty string")
            setattr(settings, key, value)

    threshold = _as_int(raw_config, "low_rate_limit_threshold", 0)
    if threshold is not None:
        settings.low_rate_limit_threshold = threshold

    lookback = _as_int(raw_config, "activity_lookback_days", 1)
    if lookback is not None:
        settings.activity_lookback_days = lookback

    if "timeout" in raw_config:
        timeout = raw_config["timeout"]
        if isinstance(timeout, str):
            try:
                timeout = float(timeout)
            except ValueError:
                raise ValueError(f"'timeout' must be a positive number, got {timeout!r}") from None
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError(f"'timeout' must be a positive number, got {timeout!r}")
        settings.timeout = float(timeout)

    return settings
