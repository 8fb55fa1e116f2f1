"""Configuration loading."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]

from rt_cli.core.constants import ASSUMED_SECONDS_PER_KM, RESUME_MODES, TICK_SECONDS


class ConfigError(RuntimeError):
    """Raised when config file parsing fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_data_dir() -> Path:
    """Resolve XDG-style data directory with env override."""
    raw = os.getenv("RT_DATA_DIR", "~/.local/share/rt")
    return expand_path(raw)


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("RT_CONFIG_FILE", "~/.config/rt/config.toml")
    return expand_path(raw)


def _default_config() -> Dict[str, Any]:
    return {
        "storage": {
            "directory": str(default_data_dir()),
        },
        "analysis": {
            "suggestion_window": 7,
            "daily_window": 10,
            "weekly_window": 12,
            "calendar_days": 28,
        },
        "live": {
            "seconds_per_km": ASSUMED_SECONDS_PER_KM,
            "tick_seconds": TICK_SECONDS,
            "resume_mode": "restart",
        },
        "export": {
            "default_directory": "./exports",
        },
    }


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    try:
        if suffix in {".toml", ""}:
            loaded = tomllib.loads(text)
        else:
            loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except Exception as exc:
        if suffix in {".toml", ""}:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def _validate(cfg: Dict[str, Any]) -> None:
    live = cfg["live"]
    if live.get("resume_mode") not in RESUME_MODES:
        raise ConfigError(f"live.resume_mode must be one of {'|'.join(RESUME_MODES)}")
    for key in ("seconds_per_km", "tick_seconds"):
        value = live.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigError(f"live.{key} must be a positive number")
    for key, value in cfg["analysis"].items():
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"analysis.{key} must be a positive integer")


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = _default_config()

    if cfg_path.exists():
        loaded = _read_config(cfg_path)
        cfg = _deep_merge(cfg, loaded)

    _validate(cfg)
    return cfg


def resolve_data_dir(config: Dict[str, Any]) -> Path:
    """Resolve the workout storage directory from env/config."""
    raw = os.getenv("RT_DATA_DIR") or config.get("storage", {}).get("directory")
    if not raw:
        return default_data_dir()
    return expand_path(raw)


def resolve_output_dir(config: Dict[str, Any], explicit: Optional[Path] = None) -> Path:
    """Resolve output directory with CLI override first."""
    if explicit is not None:
        return explicit.expanduser().resolve()
    raw = os.getenv("RT_OUTPUT_DIR") or config.get("export", {}).get(
        "default_directory",
        "./exports",
    )
    return expand_path(raw)
