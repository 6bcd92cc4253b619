"""YAML configuration for the engine surfaces (session, server, CLI)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .engine import DEFAULT_SCRAMBLE_LENGTHS


class ConfigError(ValueError):
    """Raised when a configuration file is malformed."""


@dataclass(frozen=True)
class EngineConfig:
    default_size: int = 3
    scramble_lengths: dict[int, int] = field(default_factory=lambda: dict(DEFAULT_SCRAMBLE_LENGTHS))
    default_strategy: str = "two-phase"
    max_search_depth: int = 5
    host: str = "127.0.0.1"
    port: int = 8000
    move_delay_ms: int = 0

    def scramble_length(self, size: int) -> int:
        return self.scramble_lengths.get(size, 10 * size)


_INT_FIELDS = ("default_size", "max_search_depth", "port", "move_delay_ms")
_STR_FIELDS = ("default_strategy", "host")


def _check_int(key: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{key} must be >= {minimum}, got {value}")
    return value


def config_from_dict(raw: dict[str, Any]) -> EngineConfig:
    """Merge a parsed config mapping over the defaults."""
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")

    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key in _INT_FIELDS:
        if key in raw:
            minimum = 2 if key == "default_size" else 0
            values[key] = _check_int(key, raw[key], minimum)
    for key in _STR_FIELDS:
        if key in raw:
            if not isinstance(raw[key], str) or not raw[key]:
                raise ConfigError(f"{key} must be a non-empty string")
            values[key] = raw[key]

    if "scramble_lengths" in raw:
        lengths = raw["scramble_lengths"]
        if not isinstance(lengths, dict):
            raise ConfigError("scramble_lengths must map cube size to move count")
        merged = dict(DEFAULT_SCRAMBLE_LENGTHS)
        for size, count in lengths.items():
            merged[_check_int("scramble_lengths key", size, 2)] = _check_int(
                f"scramble_lengths[{size}]", count, 1
            )
        values["scramble_lengths"] = merged

    return replace(EngineConfig(), **values)


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load a YAML config file. ``None`` returns the defaults."""
    if path is None:
        return EngineConfig()
    with open(path, encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    return config_from_dict(raw)
