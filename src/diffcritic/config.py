"""Configuration management for diffcritic."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from diffcritic.exceptions import ConfigurationError
from diffcritic.models import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_PROVIDER,
    DEFAULT_TARGET_APP,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    DeliveryMode,
    Provider,
    Settings,
)

logger = logging.getLogger(__name__)

_ENV_DIR = "DIFFCRITIC_DIR"
_DEFAULT_DIR = Path.home() / ".diffcritic"

API_KEY_ENV_VARS: dict[str, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
}

_DEFAULTS: dict[str, Any] = {
    "provider": str(DEFAULT_PROVIDER),
    "model": "",
    "temperature": DEFAULT_TEMPERATURE,
    "max_tokens": DEFAULT_MAX_TOKENS,
    "timeout": DEFAULT_TIMEOUT,
    "delivery": str(DeliveryMode.BUFFER),
    "target_app": DEFAULT_TARGET_APP,
    "ask_preview": False,
}

_FLOAT_KEYS = ("temperature", "timeout")
_INT_KEYS = ("max_tokens",)
_BOOL_KEYS = ("ask_preview",)
_CHOICE_KEYS: dict[str, tuple[str, ...]] = {
    "provider": tuple(p.value for p in Provider),
    "delivery": tuple(d.value for d in DeliveryMode),
}


def _config_dir() -> Path:
    """Get config directory, respecting DIFFCRITIC_DIR env override."""
    env = os.environ.get(_ENV_DIR, "")
    if env:
        return Path(env)
    return _DEFAULT_DIR


def _config_path() -> Path:
    return _config_dir() / "config.yaml"


def init_config() -> Path:
    """Create default config file. Returns path."""
    path = _config_path()
    if path.exists():
        raise ConfigurationError(f"Config already exists at {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(dict(_DEFAULTS), f, default_flow_style=False)
    path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 0o600
    return path


def get_config() -> dict[str, Any]:
    """Load config, falling back to defaults."""
    path = _config_path()
    if not path.exists():
        return dict(_DEFAULTS)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config at {path} must be a YAML mapping")
    merged = dict(_DEFAULTS)
    merged.update(data)
    return merged


def _coerce(key: str, value: str) -> Any:
    if key in _FLOAT_KEYS:
        try:
            return float(value)
        except ValueError as e:
            raise ConfigurationError(f"Invalid float for '{key}': {value}") from e
    if key in _INT_KEYS:
        try:
            return int(value)
        except ValueError as e:
            raise ConfigurationError(f"Invalid integer for '{key}': {value}") from e
    if key in _BOOL_KEYS:
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ConfigurationError(f"Invalid boolean for '{key}': {value}")
    if key in _CHOICE_KEYS and value not in _CHOICE_KEYS[key]:
        choices = ", ".join(_CHOICE_KEYS[key])
        raise ConfigurationError(f"Invalid value for '{key}': {value} (expected one of {choices})")
    return value


def set_value(key: str, value: str) -> None:
    """Set a config value. Creates config if needed."""
    path = _config_path()
    if not path.exists():
        init_config()
    config = get_config()
    config[key] = _coerce(key, value)
    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False)


def dotenv_candidates() -> list[Path]:
    """Ordered .env locations: cwd, install dir and its ancestors, home."""
    candidates = [Path.cwd() / ".env"]
    install_dir = Path(__file__).resolve().parent
    candidates.extend(d / ".env" for d in (install_dir, *install_dir.parents))
    candidates.append(Path.home() / ".env")
    return candidates


def load_env(candidates: list[Path] | None = None) -> Path | None:
    """Load the first existing .env file. Already-set variables win."""
    for candidate in candidates if candidates is not None else dotenv_candidates():
        if candidate.is_file():
            load_dotenv(candidate, override=False)
            logger.debug("Loaded environment from %s", candidate)
            return candidate
    logger.debug("No .env file found; using process environment")
    return None


def get_api_key(provider: str = DEFAULT_PROVIDER) -> str:
    """Get the service credential from env or config."""
    env_var = API_KEY_ENV_VARS.get(provider, API_KEY_ENV_VARS[Provider.OPENAI])
    key = os.environ.get(env_var, "")
    if key:
        return key
    config = get_config()
    return str(config.get("api_key", "") or "")


def load_settings(**overrides: Any) -> Settings:
    """Build the immutable Settings for this process.

    Keyword overrides (e.g. from CLI options) win over the config file;
    ``None`` values are ignored.
    """
    config = get_config()
    config.update({k: v for k, v in overrides.items() if v is not None})
    provider = config.get("provider") or DEFAULT_PROVIDER
    if overrides.get("api_key") is None:
        config["api_key"] = get_api_key(provider)
    fields = {k: config[k] for k in Settings.model_fields if k in config}
    try:
        return Settings(**fields)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
