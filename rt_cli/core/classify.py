"""Workout type classification from free-text labels."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from rt_cli.core.constants import TYPE_LABELS, TYPE_RULES


def classify_type(
    raw_type: Optional[str],
    rules: Sequence[Tuple[str, Sequence[str]]] = TYPE_RULES,
) -> str:
    """Classify a label as easy/tempo/speed/other; the first matching rule wins."""
    text = (raw_type or "").lower()
    for workout_type, keywords in rules:
        if any(keyword in text for keyword in keywords):
            return workout_type
    return "other"


def type_label(workout_type: str) -> str:
    return TYPE_LABELS.get(workout_type, TYPE_LABELS["other"])
