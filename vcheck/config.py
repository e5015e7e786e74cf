"""User configuration: the API token and where offline indices are kept."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

__all__ = [
    "Config",
    "ConfigError",
    "config_dir",
    "load_config",
    "save_config",
    "indices_dir",
    "set_indices_dir",
    "has_config",
    "token_from_env",
    "token",
    "has_token",
    "save_token",
    "remove_token",
    "valid_token",
    "is_ci",
]

TOKEN_PREFIX = "vulncheck_"
TOKEN_LENGTH = 74
TOKEN_ENV = "VC_TOKEN"
CONFIG_NAME = "vulncheck.yaml"


class ConfigError(Exception):
    """Raised when the configuration cannot be read or written."""


@dataclass
class Config:
    """Settings stored in the configuration file."""

    token: str = ""
    indices_dir: str = ""


def config_dir() -> Path:
    """Return the configuration directory, creating it when missing."""
    directory = Path.home() / ".config" / "vulncheck"
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"failed to create config directory: {exc}") from exc
    return directory


def _as_str(value: object) -> str:
    return "" if value is None else str(value)


def load_config() -> Config:
    """Read the configuration file; raise ConfigError when it is absent or invalid."""
    path = config_dir() / CONFIG_NAME
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f'config file "vulncheck" not found in {path.parent}') from exc
    except OSError as exc:
        raise ConfigError(f"unable to read config file: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"unable to parse config file: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("config file does not hold a mapping")

    settings = {str(key).lower(): value for key, value in data.items()}
    return Config(
        token=_as_str(settings.get("token")),
        indices_dir=_as_str(settings.get("indicesdir")),
    )


def save_config(config: Config) -> None:
    """Write the configuration file, readable by the owner only."""
    path = config_dir() / CONFIG_NAME
    content = {"indicesdir": config.indices_dir, "token": config.token}
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            yaml.safe_dump(content, handle, default_flow_style=False)
    except OSError as exc:
        raise ConfigError(f"unable to write config file: {exc}") from exc


def indices_dir() -> Path:
    """Return the directory of offline indices, creating it when missing."""
    try:
        configured = load_config().indices_dir
    except ConfigError:
        configured = ""

    directory = Path(configured) if configured else Path.home() / ".config" / "vulncheck" / "indices"
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"failed to create indices directory: {exc}") from exc
    return directory


def set_indices_dir(directory: str | os.PathLike[str]) -> None:
    """Store the directory of offline indices in the configuration."""
    try:
        config = load_config()
    except ConfigError:
        config = Config()
    config.indices_dir = os.fspath(directory)
    save_config(config)


def has_config() -> bool:
    """Tell whether a readable configuration file exists."""
    try:
        load_config()
    except ConfigError:
        return False
    return True


def token_from_env() -> bool:
    """Tell whether the environment holds a well-formed token."""
    return valid_token(os.environ.get(TOKEN_ENV, ""))


def token() -> str:
    """Return the token from the environment, else from the configuration, else ""."""
    from_env = os.environ.get(TOKEN_ENV, "")
    if from_env and valid_token(from_env):
        return from_env
    try:
        return load_config().token
    except ConfigError:
        return ""


def has_token() -> bool:
    """Tell whether a token is available."""
    return token() != ""


def save_token(token: str) -> None:
    """Store the token, replacing the whole configuration."""
    save_config(Config(token=token))


def remove_token() -> None:
    """Clear the stored token, replacing the whole configuration."""
    save_config(Config(token=""))


def valid_token(token: str) -> bool:
    """Tell whether the token has the expected prefix and length."""
    return token.startswith(TOKEN_PREFIX) and len(token) == TOKEN_LENGTH


def is_ci() -> bool:
    """Tell whether the process runs under a continuous-integration service."""
    return any(os.environ.get(name, "") for name in ("CI", "BUILD_NUMBER", "RUN_ID"))