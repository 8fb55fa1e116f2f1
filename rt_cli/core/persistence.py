"""Key-value persistence and decoding of stored JSON values."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict, Generic, List, Optional, Protocol, TypeVar, Union

from rt_cli.core.models import InvalidInputError, PersistenceError, Workout

logger = logging.getLogger(__name__)

T = TypeVar("T")

PARSE_FAILURE = "PARSE_FAILURE"
MISSING = "MISSING"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: str
    message: str = ""


DecodeResult = Union[Ok[T], Err]


class KeyValueStore(Protocol):
    """Storage collaborator: string values under string keys."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process key-value store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileStore:
    """Key-value store keeping one file per key inside a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, key: str) -> Path:
        name = re.sub(r"[^A-Za-z0-9._-]+", "_", key)
        return self.directory / f"{name}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Could not read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        temp_path: Optional[Path] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "w", dir=path.parent, delete=False, encoding="utf-8"
            ) as tmp:
                temp_path = Path(tmp.name)
                tmp.write(value)
            temp_path.replace(path)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Could not write {path}: {exc}") from exc


def _load_json(raw: Optional[str]) -> DecodeResult[Any]:
    if raw is None:
        return Err(MISSING)
    try:
        return Ok(json.loads(raw))
    except json.JSONDecodeError as exc:
        return Err(PARSE_FAILURE, f"invalid JSON: {exc}")


def decode_workouts(raw: Optional[str]) -> DecodeResult[List[Workout]]:
    """Decode the stored workouts array.

    Entries that are not objects or fail workout validation are skipped with
    a warning; a value that is not a JSON array is a parse failure.
    """
    loaded = _load_json(raw)
    if isinstance(loaded, Err):
        return loaded
    if not isinstance(loaded.value, list):
        return Err(PARSE_FAILURE, "stored workouts must be a JSON array")

    workouts: List[Workout] = []
    for position, item in enumerate(loaded.value):
        if not isinstance(item, dict):
            logger.warning("Skipping stored workout %d: not an object", position)
            continue
        try:
            workouts.append(Workout.from_dict(item))
        except InvalidInputError as exc:
            logger.warning("Skipping stored workout %d: %s", position, exc)
    return Ok(workouts)


def decode_settings(raw: Optional[str]) -> DecodeResult[Dict[str, Any]]:
    """Decode the stored settings object."""
    loaded = _load_json(raw)
    if isinstance(loaded, Err):
        return loaded
    if not isinstance(loaded.value, dict):
        return Err(PARSE_FAILURE, "stored settings must be a JSON object")
    return Ok(loaded.value)


def encode(value: Any) -> str:
    return json.dumps(value)
