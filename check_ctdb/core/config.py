"""Configuration loading with layered overrides."""

from pathlib import Path
from typing import Any

import yaml

from check_ctdb.core.errors import ConfigError

DEFAULTS: dict[str, Any] = {
    "ctdb": "ctdb",
    "ssh": "ssh",
    "sudo": "sudo",
    "nodes_file": "/etc/ctdb/nodes",
    "timeout": 15,
    "log_dir": None,
}

SYSTEM_CONFIG = Path("/etc/check_ctdb/config.yaml")

CONFIG_ENV = "CHECK_CTDB_CONFIG"


def user_config_path() -> Path:
    """Per-user config file."""
    return Path.home() / ".config" / "check_ctdb" / "config.yaml"


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML config file if it exists.

    Args:
        path: Config file path

    Returns:
        Parsed mapping, empty if the file is missing or empty

    Raises:
        ConfigError: If the file is not valid YAML, not a mapping,
            contains keys this plugin does not know, or a value of the
            wrong type
    """
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a YAML mapping: {path}")

    unknown = set(data) - set(DEFAULTS)
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(sorted(map(str, unknown)))}")

    for key, value in data.items():
        if key == "timeout":
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"timeout in {path} must be a positive integer, got {value!r}")
        elif key == "log_dir":
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"log_dir in {path} must be a path, got {value!r}")
        elif not isinstance(value, str) or not value:
            raise ConfigError(f"{key} in {path} must be a non-empty string, got {value!r}")

    return data


def load_config(
    explicit: Path | None = None,
    env: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Build the effective configuration.

    Precedence, lowest first: defaults, system config, user config,
    then the file from $CHECK_CTDB_CONFIG or ``explicit``.

    Args:
        explicit: Config file given on the command line
        env: Environment mapping (default: none consulted)

    Returns:
        Merged configuration dict
    """
    config = dict(DEFAULTS)
    config.update(load_config_file(SYSTEM_CONFIG))
    config.update(load_config_file(user_config_path()))

    env_path = (env or {}).get(CONFIG_ENV)
    override = explicit or (Path(env_path) if env_path else None)
    if override is not None:
        if not override.exists():
            raise ConfigError(f"Config not found: {override}")
        config.update(load_config_file(override))

    return config
