"""Configuration loading for scansync.

Load and validate TOML configuration with Pydantic models and environment
overrides. Every setting has a default matching the scanner interface box,
so a configuration file is optional.

Example:
    >>> from scansync.config import load_settings
    >>> settings = load_settings("scansync.toml")
    >>> settings.input.poll_interval_s
    0.002

    Environment overrides use a double underscore for nesting:

    $ export SCANSYNC_INPUT__DEBOUNCE_POLICY=duration
    $ export SCANSYNC_EMULATION__FORCE=true
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

try:
    import tomllib  # Python >= 3.11
except ImportError:
    import tomli as tomllib  # Python < 3.11

from .domain.config import Settings

__all__ = [
    "Settings",
    "load_settings",
    "ENV_PREFIX",
]

ENV_PREFIX = "SCANSYNC_"


def load_settings(
    toml_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """Load and validate settings from TOML and environment.

    Args:
        toml_path: Path to TOML configuration file (optional)
        env_prefix: Environment variable prefix (default: SCANSYNC_)

    Returns:
        Validated Settings object

    Raises:
        FileNotFoundError: If toml_path specified but doesn't exist
        ValidationError: If configuration is invalid
    """
    config_dict: dict[str, Any] = {}

    if toml_path is not None:
        toml_path = Path(toml_path)
        if not toml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {toml_path}")

        with open(toml_path, "rb") as f:
            config_dict = tomllib.load(f)

    config_dict = _apply_env_overrides(config_dict, env_prefix)

    return Settings(**config_dict)


def _apply_env_overrides(config: dict[str, Any], prefix: str) -> dict[str, Any]:
    """Apply environment variable overrides to config dict.

    Supports nested keys with double underscore notation:
    SCANSYNC_INPUT__POLL_INTERVAL_S=0.001
    SCANSYNC_OUTPUT__LINES='["Dev2/port0/line0"]'

    Args:
        config: Configuration dictionary
        prefix: Environment variable prefix

    Returns:
        Configuration with environment overrides applied
    """
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :].lower()
        parts = config_key.split("__")

        current = config
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = _parse_env_value(value)

    return config


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type.

    Lists are given as JSON arrays. Booleans accept true/false/yes/no.

    Args:
        value: String value from environment

    Returns:
        Parsed value (list, bool, int, float, or str)
    """
    stripped = value.strip()
    if stripped.startswith("["):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    # Boolean
    if stripped.lower() in ("true", "yes"):
        return True
    if stripped.lower() in ("false", "no"):
        return False

    # Numeric
    try:
        if "." in stripped or "e" in stripped.lower():
            return float(stripped)
        return int(stripped)
    except ValueError:
        pass

    return value
