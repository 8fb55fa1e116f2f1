from __future__ import annotations

import json
from pathlib import Path

import pytest

from rt_cli.core.config import (
    ConfigError,
    _deep_merge,
    default_config_path,
    default_data_dir,
    expand_path,
    load_config,
    resolve_data_dir,
    resolve_output_dir,
)


def test_deep_merge_nested_dicts() -> None:
    base = {"a": {"b": 1, "c": 2}, "x": 3}
    override = {"a": {"b": 9}, "y": 4}
    merged = _deep_merge(base, override)
    assert merged == {"a": {"b": 9, "c": 2}, "x": 3, "y": 4}
    assert base["a"]["b"] == 1


def test_expand_path_expands_home_and_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RT_TMP_PATH", str(tmp_path))
    expanded = expand_path("$RT_TMP_PATH/config.toml")
    assert expanded == (tmp_path / "config.toml").resolve()


def test_default_config_path_uses_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "custom.toml"
    monkeypatch.setenv("RT_CONFIG_FILE", str(path))
    assert default_config_path() == path.resolve()


def test_default_data_dir_uses_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "rt-data"
    monkeypatch.setenv("RT_DATA_DIR", str(path))
    assert default_data_dir() == path.resolve()


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.toml")
    assert cfg["analysis"]["suggestion_window"] == 7
    assert cfg["live"]["seconds_per_km"] == 360
    assert cfg["live"]["resume_mode"] == "restart"
    assert cfg["export"]["default_directory"] == "./exports"


def test_load_config_from_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"analysis": {"daily_window": 14}}))
    cfg = load_config(path)
    assert cfg["analysis"]["daily_window"] == 14
    assert cfg["analysis"]["weekly_window"] == 12


def test_load_config_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[live]
seconds_per_km = 300
resume_mode = "continue"

[export]
default_directory = "~/runs"
""".strip()
        + "\n"
    )
    cfg = load_config(path)
    assert cfg["live"]["seconds_per_km"] == 300
    assert cfg["live"]["resume_mode"] == "continue"
    assert cfg["live"]["tick_seconds"] == 1.0
    assert cfg["export"]["default_directory"] == "~/runs"


def test_load_config_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{broken")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_invalid_toml_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[live\nseconds_per_km = 3")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize(
    "override",
    [
        {"live": {"resume_mode": "rewind"}},
        {"live": {"seconds_per_km": 0}},
        {"live": {"tick_seconds": "fast"}},
        {"analysis": {"daily_window": -1}},
        {"analysis": {"calendar_days": True}},
    ],
)
def test_load_config_rejects_bad_values(tmp_path: Path, override) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(override))
    with pytest.raises(ConfigError):
        load_config(path)


def test_resolve_data_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RT_DATA_DIR", str(tmp_path / "from-env"))
    resolved = resolve_data_dir({"storage": {"directory": "/nope"}})
    assert resolved == (tmp_path / "from-env").resolve()


def test_resolve_data_dir_uses_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("RT_DATA_DIR", raising=False)
    resolved = resolve_data_dir({"storage": {"directory": str(tmp_path / "store")}})
    assert resolved == (tmp_path / "store").resolve()


def test_resolve_output_dir_prefers_explicit(tmp_path: Path) -> None:
    explicit = tmp_path / "exports"
    cfg = {"export": {"default_directory": "/tmp/ignored"}}
    assert resolve_output_dir(cfg, explicit=explicit) == explicit.resolve()


def test_resolve_output_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RT_OUTPUT_DIR", str(tmp_path / "from-env"))
    cfg = {"export": {"default_directory": "/tmp/ignored"}}
    assert resolve_output_dir(cfg) == (tmp_path / "from-env").resolve()
