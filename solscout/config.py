"""
Config loading for solscout.

Sources (in precedence order, highest first):
  1. Environment variables (SOLSCOUT_*)
  2. ~/.solscout/config.toml
  3. Built-in defaults

Usage:
    from solscout.config import load_config
    config = load_config()
    print(config.rpc.url)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import toml

from solscout.exceptions import ConfigInvalidError

DEFAULT_CONFIG_DIR = Path.home() / ".solscout"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"
DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"

# Format: (env_var_name, dotted_config_path, type_converter)
_ENV_OVERRIDES: list[tuple[str, str, type]] = [
    ("SOLSCOUT_RPC_URL", "rpc.url", str),
    ("SOLSCOUT_RPC_TIMEOUT", "rpc.timeout_seconds", float),
    ("SOLSCOUT_COMMITMENT", "rpc.commitment", str),
    ("SOLSCOUT_OUTPUT_FORMAT", "output.default_format", str),
]

VALID_FORMATS = {"text", "json"}
VALID_COMMITMENTS = {"processed", "confirmed", "finalized"}


@dataclass
class RPCConfig:
    """RPC endpoint configuration."""

    url: str = DEFAULT_RPC_URL
    timeout_seconds: float = 30.0
    commitment: str = "confirmed"


@dataclass
class OutputConfig:
    """Output formatting defaults."""

    default_format: str = "text"        # text | json
    color: bool = True


@dataclass
class ScoutConfig:
    """Full configuration object. Passed via Click context to all commands."""

    rpc: RPCConfig = field(default_factory=RPCConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(path: str | None = None) -> ScoutConfig:
    """
    Load configuration from TOML file + environment variable overrides.

    A missing config file is not an error; defaults apply.

    Args:
        path: Override config file path. If None, uses SOLSCOUT_CONFIG_PATH
              env var or default (~/.solscout/config.toml).

    Raises:
        ConfigInvalidError: Config file is invalid TOML or holds invalid values.
    """
    config_path = _resolve_config_path(path)

    raw: dict = {}
    if config_path.exists():
        try:
            raw = toml.load(str(config_path))
        except toml.TomlDecodeError as e:
            raise ConfigInvalidError(f"Invalid TOML in {config_path}: {e}") from e

    config = _dict_to_config(raw)
    _apply_env_overrides(config)
    _validate_config(config)

    return config


def save_config(config: ScoutConfig, path: str | None = None) -> Path:
    """
    Serialize ScoutConfig to TOML and write to disk.

    Returns the path where config was written.
    """
    config_path = _resolve_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "rpc": {
            "url": config.rpc.url,
            "timeout_seconds": config.rpc.timeout_seconds,
            "commitment": config.rpc.commitment,
        },
        "output": {
            "default_format": config.output.default_format,
            "color": config.output.color,
        },
    }

    with open(config_path, "w") as f:
        toml.dump(data, f)

    return config_path


def get_default_config_path() -> Path:
    """Return the default config file path."""
    return DEFAULT_CONFIG_PATH


# ──────────────────────────────────────────────────────────────
# Private helpers
# ──────────────────────────────────────────────────────────────


def _resolve_config_path(path: str | None) -> Path:
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get("SOLSCOUT_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def _dict_to_config(raw: dict) -> ScoutConfig:
    """Build ScoutConfig from raw TOML dict, applying defaults for missing keys."""
    config = ScoutConfig()

    rpc = raw.get("rpc", {})
    try:
        config.rpc.url = str(rpc.get("url", DEFAULT_RPC_URL))
        config.rpc.timeout_seconds = float(rpc.get("timeout_seconds", 30.0))
        config.rpc.commitment = str(rpc.get("commitment", "confirmed"))
    except (ValueError, TypeError) as e:
        raise ConfigInvalidError(f"Invalid [rpc] section: {e}") from e

    output = raw.get("output", {})
    config.output.default_format = output.get("default_format", "text")
    config.output.color = bool(output.get("color", True))

    return config


def _apply_env_overrides(config: ScoutConfig) -> None:
    """Apply environment variable overrides to a loaded config."""
    if os.environ.get("SOLSCOUT_NO_COLOR"):
        config.output.color = False

    for env_var, dotted_key, converter in _ENV_OVERRIDES:
        val = os.environ.get(env_var)
        if val is None:
            continue
        section, key = dotted_key.split(".", 1)
        section_obj = getattr(config, section)
        try:
            setattr(section_obj, key, converter(val))
        except (ValueError, TypeError) as e:
            raise ConfigInvalidError(
                f"Invalid value for {env_var}={val!r}: {e}"
            ) from e


def _validate_config(config: ScoutConfig) -> None:
    """Validate config values. Raises ConfigInvalidError on invalid values."""
    if not config.rpc.url.startswith(("http://", "https://")):
        raise ConfigInvalidError(
            f"rpc.url must be an http(s) URL, got {config.rpc.url!r}"
        )
    if config.rpc.timeout_seconds <= 0:
        raise ConfigInvalidError(
            f"rpc.timeout_seconds must be positive, got {config.rpc.timeout_seconds}"
        )
    if config.rpc.commitment not in VALID_COMMITMENTS:
        raise ConfigInvalidError(
            f"rpc.commitment must be one of {sorted(VALID_COMMITMENTS)}, "
            f"got {config.rpc.commitment!r}"
        )
    if config.output.default_format not in VALID_FORMATS:
        raise ConfigInvalidError(
            f"output.default_format must be one of {sorted(VALID_FORMATS)}, "
            f"got {config.output.default_format!r}"
        )
