"""TOML configuration loader with deep merge support."""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "DYNAMO_SESSIONS_CONFIG_DIR"
ENVIRONMENT_ENV = "DYNAMO_SESSIONS_ENV"

# config/ shipped next to the dynamo_sessions package in a source checkout
PROJECT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

# Parent directories searched above the working directory
CONFIG_SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Lookup order:
    1. DYNAMO_SESSIONS_CONFIG_DIR (must exist)
    2. the nearest `config/` in the working directory or its parents
    3. the project's own `config/` directory, when running from a checkout
    """
    config_dir_env = os.environ.get(CONFIG_DIR_ENV)
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    current = Path.cwd()
    for _ in range(CONFIG_SEARCH_DEPTH):
        config_path = current / "config"
        if (config_path / "default.toml").exists():
            return config_path
        current = current.parent

    if PROJECT_CONFIG_DIR.is_dir():
        return PROJECT_CONFIG_DIR

    return Path("config")


def get_environment() -> str:
    """Get the current environment name, defaulting to 'development'."""
    return os.environ.get(ENVIRONMENT_ENV, "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Nested dictionaries are merged recursively; any other value in
    `override` replaces the one in `base`. Neither input is modified.
    """
    result = base.copy()

    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config() -> dict[str, Any]:
    """Load configuration from TOML files.

    Loading order:
    1. config/default.toml (required)
    2. config/{DYNAMO_SESSIONS_ENV}.toml (optional)
    """
    config_dir = get_config_dir()
    env = get_environment()

    default_path = config_dir / "default.toml"
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/default.toml or set {CONFIG_DIR_ENV}."
        )

    config = load_toml(default_path)

    env_path = config_dir / f"{env}.toml"
    if env_path.exists():
        config = deep_merge(config, load_toml(env_path))

    return config
