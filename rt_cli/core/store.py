"""Ordered workout collection persisted through a key-value store."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Tuple, Union

from rt_cli.core.constants import STORAGE_KEY
from rt_cli.core.models import (
    InvalidInputError,
    OutOfRangeError,
    PersistenceError,
    Workout,
)
from rt_cli.core.persistence import MISSING, Err, KeyValueStore, decode_workouts, encode

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("date", "distance", "duration", "type", "kudos")


class WorkoutStore:
    """Insertion-ordered workouts; every mutation is written through."""

    def __init__(self, kv: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.kv = kv
        self.key = key
        self._workouts: List[Workout] = []
        self.last_write_ok = True

    def load(self) -> "WorkoutStore":
        """Replace the in-memory collection with the persisted one."""
        try:
            raw = self.kv.get(self.key)
        except PersistenceError as exc:
            logger.warning("Could not read saved workouts: %s", exc)
            raw = None

        result = decode_workouts(raw)
        if isinstance(result, Err):
            if result.kind != MISSING:
                logger.warning("Could not parse saved workouts (%s): %s", result.kind, result.message)
            self._workouts = []
        else:
            self._workouts = list(result.value)
        logger.debug("Loaded %d workouts", len(self._workouts))
        return self

    def _persist(self) -> bool:
        try:
            self.kv.set(self.key, encode([w.to_dict() for w in self._workouts]))
        except PersistenceError as exc:
            logger.warning("Could not save workouts: %s", exc)
            self.last_write_ok = False
            return False
        self.last_write_ok = True
        return True

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._workouts):
            raise OutOfRangeError(
                f"No workout at index {index} (have {len(self._workouts)})"
            )

    def __len__(self) -> int:
        return len(self._workouts)

    def get_all(self) -> Tuple[Workout, ...]:
        return tuple(self._workouts)

    def get(self, index: int) -> Workout:
        self._check_index(index)
        return self._workouts[index]

    def append(self, candidate: Union[Workout, Dict[str, Any]]) -> Workout:
        """Validate and append a workout, defaulting kudos to 0."""
        if isinstance(candidate, Workout):
            candidate = candidate.to_dict()
        workout = Workout.from_dict(candidate)
        self._workouts.append(workout)
        self._persist()
        return workout

    def update_at(self, index: int, partial: Dict[str, Any]) -> Workout:
        """Shallow-merge ``partial`` over the record at ``index``."""
        self._check_index(index)
        unknown = set(partial) - set(_EDITABLE_FIELDS)
        if unknown:
            raise InvalidInputError(f"Unknown workout fields: {', '.join(sorted(unknown))}")

        merged = self._workouts[index].to_dict()
        merged.update(partial)
        workout = Workout.from_dict(merged)
        self._workouts[index] = workout
        self._persist()
        return workout

    def remove_at(self, index: int) -> Workout:
        self._check_index(index)
        removed = self._workouts.pop(index)
        self._persist()
        return removed

    def increment_kudos(self, index: int) -> Workout:
        self._check_index(index)
        workout = replace(self._workouts[index], kudos=self._workouts[index].kudos + 1)
        self._workouts[index] = workout
        self._persist()
        return workout
