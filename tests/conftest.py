from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from rt_cli.core.constants import STORAGE_KEY
from rt_cli.core.models import PersistenceError, Workout
from rt_cli.core.persistence import MemoryStore
from rt_cli.core.store import WorkoutStore


class FailingStore(MemoryStore):
    """Memory store whose writes can be switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("storage unavailable")
        super().set(key, value)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def kv() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def failing_kv() -> FailingStore:
    return FailingStore()


@pytest.fixture()
def store(kv: MemoryStore) -> WorkoutStore:
    return WorkoutStore(kv).load()


@pytest.fixture()
def sample_workouts() -> List[Workout]:
    return [
        Workout(date="2026-02-09", distance=5.0, duration=25.0, type="Easy Run"),
        Workout(date="2026-02-11", distance=8.0, duration=36.0, type="Tempo Run", kudos=2),
        Workout(date="2026-02-14", distance=10.0, duration=40.0, type="5x1km Speed Intervals"),
    ]


@pytest.fixture()
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point config and data directories at a temp location."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("RT_DATA_DIR", str(data_dir))
    monkeypatch.setenv("RT_CONFIG_FILE", str(tmp_path / "config.toml"))
    monkeypatch.setenv("RT_OUTPUT_DIR", str(tmp_path / "exports"))
    return data_dir


@pytest.fixture()
def seed_workouts(cli_env: Path):
    def _seed(rows: List[Dict[str, Any]]) -> Path:
        cli_env.mkdir(parents=True, exist_ok=True)
        path = cli_env / f"{STORAGE_KEY}.json"
        path.write_text(json.dumps(rows))
        return path

    return _seed
