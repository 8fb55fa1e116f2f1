from __future__ import annotations

import json
from pathlib import Path

import pytest

from rt_cli.core.models import PersistenceError
from rt_cli.core.persistence import (
    MISSING,
    PARSE_FAILURE,
    Err,
    FileStore,
    Ok,
    decode_settings,
    decode_workouts,
)


def test_file_store_round_trip(tmp_path: Path) -> None:
    kv = FileStore(tmp_path / "data")
    assert kv.get("runTracker.workouts") is None
    kv.set("runTracker.workouts", "[]")
    assert kv.get("runTracker.workouts") == "[]"
    assert (tmp_path / "data" / "runTracker.workouts.json").exists()


def test_file_store_sanitizes_key(tmp_path: Path) -> None:
    kv = FileStore(tmp_path)
    kv.set("../escape/key", "x")
    assert kv.get("../escape/key") == "x"
    assert [p.name for p in tmp_path.iterdir()] == [".._escape_key.json"]


def test_file_store_write_failure_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    kv = FileStore(blocker / "data")
    with pytest.raises(PersistenceError) as excinfo:
        kv.set("key", "value")
    assert excinfo.value.kind == "PERSISTENCE_FAILURE"


def test_decode_workouts_missing() -> None:
    assert decode_workouts(None) == Err(MISSING)


@pytest.mark.parametrize("raw", ["{broken", json.dumps({"workouts": []}), "42"])
def test_decode_workouts_parse_failure(raw: str) -> None:
    result = decode_workouts(raw)
    assert isinstance(result, Err)
    assert result.kind == PARSE_FAILURE


def test_decode_workouts_skips_bad_entries() -> None:
    raw = json.dumps(
        [
            {"date": "2026-02-14", "distance": 5, "duration": 30, "type": "Easy", "kudos": 3},
            "junk",
            {"date": "2026-02-15", "distance": 0, "duration": 30},
        ]
    )
    result = decode_workouts(raw)
    assert isinstance(result, Ok)
    assert len(result.value) == 1
    assert result.value[0].kudos == 3


def test_decode_settings() -> None:
    assert decode_settings('{"theme": "dark"}') == Ok({"theme": "dark"})
    assert decode_settings("[1]").kind == PARSE_FAILURE
    assert decode_settings(None).kind == MISSING


def test_decode_workouts_skips_non_finite_and_fractional_values() -> None:
    raw = json.dumps(
        [
            {"date": "2026-02-10", "distance": 5, "duration": float("inf")},
            {"date": "2026-02-11", "distance": 5, "duration": 30, "kudos": 1.9},
            {"date": "2026-02-12", "distance": 6, "duration": 33},
        ]
    )
    assert "Infinity" in raw
    result = decode_workouts(raw)
    assert isinstance(result, Ok)
    assert [w.date for w in result.value] == ["2026-02-12"]


def test_file_store_failed_replace_leaves_no_temp_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken_replace(self: Path, target: Path) -> Path:
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", broken_replace)
    kv = FileStore(tmp_path)
    with pytest.raises(PersistenceError):
        kv.set("runTracker.workouts", "[]")
    assert list(tmp_path.iterdir()) == []
