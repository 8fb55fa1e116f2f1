"""Lightweight data models and error types used across commands."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict


class TrackerError(RuntimeError):
    """Base class for recoverable run tracker failures."""

    kind = "ERROR"


class InvalidInputError(TrackerError):
    """Raised when a workout is missing a date or has non-positive values."""

    kind = "INVALID_INPUT"


class OutOfRangeError(TrackerError):
    """Raised when a workout index does not point at a stored record."""

    kind = "OUT_OF_RANGE"


class InvalidTransitionError(TrackerError):
    """Raised when a live session call is not allowed in its current state."""

    kind = "INVALID_TRANSITION"


class PersistenceError(TrackerError):
    """Raised by key-value stores when a read or write fails."""

    kind = "PERSISTENCE_FAILURE"


def _positive_number(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number greater than 0")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be a number greater than 0") from None
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(f"{field} must be a finite number greater than 0")
    return number


def _whole_number(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a whole number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be a whole number") from None
    if not math.isfinite(number) or not number.is_integer():
        raise InvalidInputError(f"{field} must be a whole number")
    return int(number)


@dataclass(frozen=True)
class Workout:
    """One completed run. Distance in kilometers, duration in minutes."""

    date: str
    distance: float
    duration: float
    type: str = ""
    kudos: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Workout":
        """Build a validated workout from a plain mapping."""
        date_value = str(data.get("date") or "").strip()
        if not date_value:
            raise InvalidInputError("date is required")
        distance = _positive_number(data.get("distance"), "distance")
        duration = _positive_number(data.get("duration"), "duration")

        kudos = _whole_number(data.get("kudos") or 0, "kudos")
        if kudos < 0:
            raise InvalidInputError("kudos cannot be negative")

        return cls(
            date=date_value,
            distance=distance,
            duration=duration,
            type=str(data.get("type") or ""),
            kudos=kudos,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def pace(self) -> float:
        """Minutes per kilometer."""
        return self.duration / self.distance
