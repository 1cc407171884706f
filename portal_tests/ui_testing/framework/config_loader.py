"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (config/config.yaml)
    - Environment variable override (UI_BASE_URL overrides ui.base_url)
    - Dot notation path access with type coercion
    - Frozen `SuiteSettings` built once per run and passed explicitly

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from loguru import logger

from .errors import ConfigurationError


# Default configuration file path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"

# Extra environment variable names accepted for a key
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "ui.base_url": ("BASE_URL",),
}


@dataclass(frozen=True)
class SuiteSettings:
    """
    Resolved run configuration.

    Constructed once per run and handed to the browser manager, the Base
    Page and the Scenario Runner.
    """

    base_url: str = "https://ecommercepracticeportal.netlify.app"
    action_timeout_ms: int = 10000
    navigation_timeout_ms: int = 30000
    poll_interval_ms: int = 100
    headless: bool = True
    browser: str = "chromium"
    viewport_width: int = 1280
    viewport_height: int = 720
    screenshot_dir: str = "test-results/screenshots"
    screenshot_on_failure: bool = True
    trace_on_retry: bool = True
    worker_count: int = 2
    retry_count: int = 0
    results_dir: str = "test-results"
    # 0 for the first run, n for the n-th re-run of failed tests
    attempt: int = 0

    @property
    def tracing(self) -> bool:
        """Record a Playwright trace for each session of this attempt."""
        return self.trace_on_retry and self.attempt > 0

    @property
    def trace_dir(self) -> Path:
        return Path(self.results_dir) / "traces"

    def url_for(self, path: str = "/") -> str:
        """Join `path` onto the base URL."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UI_BASE_URL, RUN_WORKER_COUNT, ...)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> loader = ConfigLoader()
        >>> loader.get("ui.action_timeout_ms", 10000)
        10000
        >>> settings = loader.settings()
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Dict[str, Any] = {}
        self._load_config()

    @property
    def config_path(self) -> Path:
        return self._config_path

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {self._config_path}"
            )
        self._config = loaded
        logger.debug(f"Loaded configuration from: {self._config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "ui.base_url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        for env_key in (key.upper().replace(".", "_"),) + ENV_ALIASES.get(key, ()):
            env_value = os.environ.get(env_key)
            if env_value is not None:
                return self._convert_type(env_value, default, key)

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section (empty dict if absent)."""
        return self._config.get(section, {}) or {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def settings(self) -> SuiteSettings:
        """
        Build the frozen run settings.

        Raises:
            ConfigurationError: When a value has the wrong type or is out of range
        """
        defaults = SuiteSettings()
        # Original project config: a single worker on CI, two locally
        default_workers = 1 if os.environ.get("CI") else defaults.worker_count

        settings = SuiteSettings(
            base_url=str(self.get("ui.base_url", defaults.base_url)),
            action_timeout_ms=self._as_int("ui.action_timeout_ms", defaults.action_timeout_ms),
            navigation_timeout_ms=self._as_int("ui.navigation_timeout_ms", defaults.navigation_timeout_ms),
            poll_interval_ms=self._as_int("ui.poll_interval_ms", defaults.poll_interval_ms),
            headless=self._as_bool("ui.headless", defaults.headless),
            browser=str(self.get("ui.browser", defaults.browser)),
            viewport_width=self._as_int("ui.viewport.width", defaults.viewport_width),
            viewport_height=self._as_int("ui.viewport.height", defaults.viewport_height),
            screenshot_dir=str(self.get("ui.screenshot_dir", defaults.screenshot_dir)),
            screenshot_on_failure=self._as_bool("ui.screenshot_on_failure", defaults.screenshot_on_failure),
            trace_on_retry=self._as_bool("ui.trace_on_retry", defaults.trace_on_retry),
            worker_count=self._as_int("run.worker_count", default_workers),
            retry_count=self._as_int("run.retry_count", defaults.retry_count),
            results_dir=str(self.get("run.results_dir", defaults.results_dir)),
            attempt=self._as_int("run.attempt", defaults.attempt),
        )

        if not settings.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"ui.base_url must be an http(s) URL, got '{settings.base_url}'")
        if settings.browser not in ("chromium", "firefox", "webkit"):
            raise ConfigurationError(f"Unsupported browser: {settings.browser}")
        if settings.worker_count < 1:
            raise ConfigurationError("run.worker_count must be at least 1")
        if settings.retry_count < 0:
            raise ConfigurationError("run.retry_count must not be negative")
        if settings.attempt < 0:
            raise ConfigurationError("run.attempt must not be negative")
        for key in ("action_timeout_ms", "navigation_timeout_ms", "poll_interval_ms"):
            if getattr(settings, key) <= 0:
                raise ConfigurationError(f"ui.{key} must be positive")

        return settings

    def _as_int(self, key: str, default: int) -> int:
        value = self.get(key, default)
        if isinstance(value, bool):
            raise ConfigurationError(f"{key} must be an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None

    def _as_bool(self, key: str, default: bool) -> bool:
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        raise ConfigurationError(f"{key} must be a boolean, got {value!r}")

    def _convert_type(self, value: str, reference: Any, key: str) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                raise ConfigurationError(
                    f"Environment override for {key} must be an integer, got '{value}'"
                ) from None
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                raise ConfigurationError(
                    f"Environment override for {key} must be a number, got '{value}'"
                ) from None

        return value


def load_settings(config_path: Optional[Path] = None) -> SuiteSettings:
    """Shortcut: load the YAML file and return frozen settings."""
    return ConfigLoader(config_path).settings()


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "SuiteSettings",
    "load_settings",
]
