"""Formatting helpers used by exports and console output."""

from __future__ import annotations

import math
from typing import Optional

from rt_cli.core.constants import KM_TO_MILES


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_pace_value(pace: float) -> str:
    """Format minutes-per-unit as M:SS."""
    minutes = int(math.floor(pace))
    seconds = round_half_up((pace - minutes) * 60)
    if seconds == 60:
        minutes, seconds = minutes + 1, 0
    return f"{minutes}:{seconds:02d}"


def format_pace(duration: Optional[float], distance: Optional[float]) -> str:
    """Format pace from minutes and kilometers, ``--:--`` without distance."""
    if not distance or distance <= 0:
        return "--:--"
    return format_pace_value(float(duration or 0) / float(distance))


def format_time(seconds: int) -> str:
    """Format elapsed seconds as HH:MM:SS."""
    hrs, rem = divmod(int(seconds), 3600)
    mins, secs = divmod(rem, 60)
    return f"{hrs:02d}:{mins:02d}:{secs:02d}"


def convert_distance(km: float, imperial: bool = False) -> str:
    if imperial:
        return f"{km * KM_TO_MILES:.2f} mi"
    return f"{km:.2f} km"


def format_duration(minutes: Optional[float]) -> str:
    """Format minutes as H:MM:SS or M:SS."""
    if not minutes:
        return "N/A"
    total_seconds = round_half_up(float(minutes) * 60)
    h, rem = divmod(total_seconds, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_number(value: float) -> str:
    """Render a float without a trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
