"""
================================================================================
Configuration Loader
================================================================================

Layered configuration for the UI suite, returned as an immutable value.

Sources (lowest to highest priority):
    1. Built-in defaults (UIConfig field defaults)
    2. config/config.yaml
    3. config/<ENV>.yaml
    4. env/.env
    5. env/.env.<ENV>
    6. Process environment variables

ENV itself comes from the process environment, else from env/.env, else "dev".

The loader is constructed explicitly and returns a new UIConfig on every
`load()`; nothing is cached at module level.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import dotenv_values
from loguru import logger


PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_ENV_DIR = PROJECT_ROOT / "env"

# Environment variable -> dot-notation config key
ENV_MAPPING: Dict[str, str] = {
    "BASE_URL": "ui.base_url",
    "SSO_URL": "ui.sso_url",
    "TEST_USERNAME": "ui.username",
    "TEST_PASSWORD": "ui.password",
    "DEFAULT_TIMEOUT": "ui.default_timeout",
    "NAVIGATION_TIMEOUT": "ui.navigation_timeout",
    "HEADLESS": "ui.headless",
    "SLOW_MO": "ui.slow_mo",
    "WORKERS": "ui.workers",
    "BROWSER": "ui.browser",
    "STORAGE_STATE_PATH": "ui.storage_state_path",
    "ARTIFACTS_DIR": "ui.artifacts_dir",
    "E2E_ENABLED": "ui.e2e_enabled",
    "LOG_LEVEL": "logging.level",
    "LOG_FILE": "logging.file",
}

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


@dataclass(frozen=True)
class UIConfig:
    """Resolved settings for one test run."""
    environment: str = "dev"
    base_url: str = "https://woocommerce.com"
    sso_url: str = "https://woocommerce.com/sso"
    username: str = ""
    password: str = field(default="", repr=False)
    default_timeout: int = 30000
    navigation_timeout: int = 30000
    headless: bool = True
    slow_mo: int = 0
    workers: int = 4
    browser: str = "chromium"
    viewport_width: int = 1280
    viewport_height: int = 720
    storage_state_path: Path = Path("auth/auth.json")
    artifacts_dir: Path = Path("test-results")
    e2e_enabled: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def viewport(self) -> Dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def url_for(self, path: str = "") -> str:
        """Absolute URL for `path`; absolute URLs pass through unchanged."""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if path and not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url.rstrip('/')}{path}"


class ConfigLoader:
    """
    Builds a UIConfig from YAML files, dotenv files and environment variables.

    Usage:
        >>> config = ConfigLoader().load()
        >>> config.base_url
        'https://woocommerce.com'

        >>> ConfigLoader(environ={"ENV": "staging", "WORKERS": "2"}).load().workers
        2
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        env_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory holding config.yaml and <env>.yaml
            env_dir: Directory holding .env and .env.<env>
            environ: Environment mapping (defaults to os.environ)
        """
        self._config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._env_dir = Path(env_dir) if env_dir else DEFAULT_ENV_DIR
        self._environ = dict(os.environ if environ is None else environ)
        self.environment = self._select_environment()

    def _select_environment(self) -> str:
        """ENV from the real environment, else from env/.env, else dev."""
        if self._environ.get("ENV"):
            return self._environ["ENV"]
        base_env = self._env_dir / ".env"
        if base_env.exists():
            selected = dotenv_values(base_env).get("ENV")
            if selected:
                return selected
        return "dev"

    def load(self) -> UIConfig:
        """Read every source and return the merged, typed configuration."""
        data = self._read_yaml(self._config_dir / "config.yaml")
        data = _deep_merge(data, self._read_yaml(self._config_dir / f"{self.environment}.yaml"))

        for env_key, value in self._env_values().items():
            config_key = ENV_MAPPING.get(env_key)
            if config_key is not None:
                _set_nested(data, config_key.split("."), value)

        config = self._build(data)
        logger.debug(
            f"Loaded environment: {config.environment} (base URL: {config.base_url})"
        )
        return config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.debug(f"Configuration file not found, skipping: {path}")
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        logger.debug(f"Loaded configuration from: {path}")
        return loaded

    def _env_values(self) -> Dict[str, str]:
        """dotenv files first, then the real environment on top."""
        values: Dict[str, str] = {}
        for path in (self._env_dir / ".env", self._env_dir / f".env.{self.environment}"):
            if path.exists():
                values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
                logger.debug(f"Loaded dotenv file: {path}")
        values.update(self._environ)
        return values

    def _build(self, data: Dict[str, Any]) -> UIConfig:
        ui_section = data.get("ui") or {}
        logging_section = data.get("logging") or {}
        raw: Dict[str, Any] = dict(ui_section)
        if "level" in logging_section:
            raw["log_level"] = logging_section["level"]
        if "file" in logging_section:
            raw["log_file"] = logging_section["file"]
        raw["environment"] = self.environment

        known = {f.name: f for f in dataclasses.fields(UIConfig)}
        kwargs: Dict[str, Any] = {}
        for key, value in raw.items():
            if key not in known:
                logger.warning(f"Ignoring unknown configuration key: ui.{key}")
                continue
            kwargs[key] = self._convert_type(key, value, known[key].default)

        config = UIConfig(**kwargs)
        if config.browser not in SUPPORTED_BROWSERS:
            raise ConfigurationError(
                f"Unsupported browser '{config.browser}', expected one of {SUPPORTED_BROWSERS}"
            )
        if config.default_timeout <= 0 or config.navigation_timeout <= 0:
            raise ConfigurationError("Timeouts must be positive milliseconds")
        if config.workers < 1:
            raise ConfigurationError("workers must be at least 1")
        return config

    def _convert_type(self, key: str, value: Any, reference: Any) -> Any:
        """
        Convert a raw value to match the field default's type.

        Used for environment variables which are always strings.
        """
        if value is None or reference is None:
            return value

        if isinstance(reference, bool):
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"'{key}' must be an integer, got {value!r}") from e
        if isinstance(reference, Path):
            return Path(str(value))
        return str(value)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merges two dictionaries, with override taking precedence.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _set_nested(d: Dict, keys: list, value: Any) -> None:
    """
    Sets a nested dictionary value using a list of keys.
    """
    for key in keys[:-1]:
        d = d.setdefault(key, {})
    d[keys[-1]] = value


def load_config(
    config_dir: Optional[Path] = None,
    env_dir: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> UIConfig:
    """Shortcut for `ConfigLoader(...).load()`."""
    return ConfigLoader(config_dir=config_dir, env_dir=env_dir, environ=environ).load()


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "UIConfig",
    "load_config",
]
