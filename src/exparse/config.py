"""Configuration file handling for exparse."""

from __future__ import annotations

import logging
import math
import os
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from exparse.constants import (
    CONFIG_DIRNAME,
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    DEFAULT_INPUT_RATE,
    DEFAULT_OUTPUT_RATE,
)
from exparse.models import PricingConfig

logger = logging.getLogger(__name__)

# Config keys holding dollar-per-MTok rates
RATE_KEYS = ("input_rate", "output_rate")

_RATE_DEFAULTS = {
    "input_rate": DEFAULT_INPUT_RATE,
    "output_rate": DEFAULT_OUTPUT_RATE,
}


def get_config_path(explicit: str | Path | None = None) -> Path:
    """Resolve the config file path.

    Precedence:
    1. An explicit path (``--config``)
    2. The ``EXPARSE_CONFIG`` environment variable
    3. ``$XDG_CONFIG_HOME/exparse/config.toml``
    4. ``~/.config/exparse/config.toml``

    Args:
        explicit: Path given on the command line, if any

    Returns:
        Path to config.toml (which may not exist)
    """
    if explicit:
        return Path(explicit)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(path: str | Path, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config.toml
        strict: Raise instead of ignoring an unreadable file. Callers that
            write the file back use this so existing keys are never lost.

    Returns:
        Configuration dictionary, or empty dict if no config exists

    Raises:
        ValueError: If ``strict`` and the file cannot be read or parsed
    """
    config_path = Path(path)
    if not config_path.exists():
        return {}

    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        if strict:
            msg = f"Cannot read config {config_path}: {e}"
            raise ValueError(msg) from e
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return {}


def save_config(path: str | Path, config: dict[str, Any]) -> None:
    """Save configuration to a TOML file.

    Args:
        path: Path to config.toml
        config: Configuration dictionary to save
    """
    config_path = Path(path)

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with config_path.open("wb") as f:
        tomli_w.dump(config, f)


def parse_rate(key: str, value: Any) -> float:
    """Validate a configured rate and return it as a float.

    Args:
        key: Config key the value belongs to (used in error messages)
        value: Raw value (number, or a numeric string from the CLI)

    Returns:
        The rate in dollars per MTok

    Raises:
        ValueError: If the value is not a non-negative number
    """
    if isinstance(value, bool):
        msg = f"Invalid value for '{key}': expected a number, got {value!r}"
        raise ValueError(msg)
    try:
        rate = float(value)
    except (TypeError, ValueError):
        msg = f"Invalid value for '{key}': expected a number, got {value!r}"
        raise ValueError(msg) from None
    if not math.isfinite(rate) or rate < 0:
        msg = f"Invalid value for '{key}': must be a non-negative number"
        raise ValueError(msg)
    return rate


def get_pricing(
    config: dict[str, Any],
    input_rate: float | None = None,
    output_rate: float | None = None,
) -> PricingConfig:
    """Build the pricing for a run.

    Precedence per rate: explicit argument, then config file, then the
    built-in default.

    Args:
        config: Loaded configuration dictionary
        input_rate: Rate from the command line, if given
        output_rate: Rate from the command line, if given

    Returns:
        PricingConfig for the run

    Raises:
        ValueError: If a configured rate is invalid
    """
    explicit = {"input_rate": input_rate, "output_rate": output_rate}
    rates: dict[str, float] = {}
    for key in RATE_KEYS:
        if explicit[key] is not None:
            rates[key] = parse_rate(key, explicit[key])
        elif key in config:
            rates[key] = parse_rate(key, config[key])
        else:
            rates[key] = _RATE_DEFAULTS[key]
    return PricingConfig(**rates)
