"""Configuration management for lazyfs."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from lazyfs.errors import ConfigError

from .models import FileOptions, LazyFsConfig, LoggingSettings
from .resolver import ENV_PREFIX, flatten_for_env, parse_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.lazyfs/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # lazyfs configuration file
    # Environment variables named LAZYFS__SECTION__KEY override these values.
    """
)


class ConfigManager:
    """Load and persist configuration data, applying precedence rules."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> LazyFsConfig:
        """Load configuration from defaults, file, environment, and overrides.

        A missing file is treated as empty; it is not created.

        Args:
            overrides: Highest-precedence values, nested or dotted keys.
            include_env: Whether ``LAZYFS__`` environment variables apply.

        Returns:
            LazyFsConfig: Validated configuration.

        Raises:
            ConfigError: If the file or any override is invalid.
        """
        return resolve_with_precedence(
            defaults=LazyFsConfig(),
            file_overrides=self._read_file(),
            env_overrides=parse_env(self._env) if include_env else None,
            overrides=overrides,
        )

    def save(self, config: LazyFsConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, LazyFsConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(data, sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Write a default configuration file if none exists and return its path."""
        if not self._config_path.exists():
            self.save(LazyFsConfig())
        return self._config_path

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "FileOptions",
    "LazyFsConfig",
    "LoggingSettings",
    "flatten_for_env",
    "parse_env",
    "resolve_with_precedence",
]
