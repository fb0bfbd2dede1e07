"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Mapping

import yaml
from pydantic import ValidationError

from lazyfs.errors import ConfigError

from .models import LazyFsConfig

ENV_PREFIX = "LAZYFS__"


def resolve_with_precedence(
    *,
    defaults: LazyFsConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> LazyFsConfig:
    """Merge configuration sources, later sources winning.

    Precedence runs defaults, then file, then environment, then explicit
    overrides. Keys may be nested mappings or dotted paths.

    Raises:
        ConfigError: If a source is malformed or the merged values are invalid.
    """
    merged = defaults.model_dump(mode="python")
    for name, source in (("file", file_overrides), ("environment", env_overrides), ("override", overrides)):
        if source is not None:
            merged = _deep_merge(merged, _expand(source, source_name=name))

    try:
        return LazyFsConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def parse_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Extract ``LAZYFS__SECTION__KEY`` variables into a nested mapping.

    Values are parsed as YAML scalars so numbers and booleans keep their type.
    """
    parsed: dict[str, Any] = {}
    for key, raw in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        segments = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if not segments:
            continue
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        parsed = _deep_merge(parsed, _nest(segments, value))
    return parsed


def flatten_for_env(config: LazyFsConfig) -> Dict[str, str]:
    """Flatten the config into ``LAZYFS__SECTION__KEY`` environment mappings."""
    flat: Dict[str, str] = {}
    for section, values in config.model_dump(mode="python").items():
        for key, value in values.items():
            env_key = f"{ENV_PREFIX}{section.upper()}__{key.upper()}"
            flat[env_key] = "null" if value is None else str(value)
    return flat


def _nest(path: list[str], value: Any) -> dict[str, Any]:
    node: Any = value
    for segment in reversed(path):
        node = {segment: node}
    return node


def _expand(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = _expand(value, source_name=source_name)
        nested = _nest(key.split("."), value)
        if not _compatible(result, nested):
            raise ConfigError(f"{source_name.capitalize()} override for {key} conflicts with existing value.")
        result = _deep_merge(result, nested)
    return result


def _compatible(base: Mapping[str, Any], extra: Mapping[str, Any]) -> bool:
    for key, value in extra.items():
        if key not in base:
            continue
        existing = base[key]
        if isinstance(existing, MappingABC) != isinstance(value, MappingABC):
            return False
        if isinstance(value, MappingABC) and not _compatible(existing, value):
            return False
    return True


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = deepcopy(dict(base))
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["ENV_PREFIX", "flatten_for_env", "parse_env", "resolve_with_precedence"]
