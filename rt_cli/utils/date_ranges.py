"""Date parsing and trailing-window helpers."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

import typer

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_date(value: Optional[str]) -> Optional[str]:
    """Typer callback that validates YYYY-MM-DD format for date options."""
    if value is None:
        return value
    if not _DATE_RE.match(value):
        raise typer.BadParameter(
            f"Invalid date '{value}'. Expected format: YYYY-MM-DD (e.g. 2026-01-15)"
        )
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise typer.BadParameter(
            f"Invalid date '{value}'. Expected format: YYYY-MM-DD (e.g. 2026-01-15)"
        )
    return value


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD date string."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def try_parse_date(value: str) -> Optional[date]:
    try:
        return parse_date(value)
    except (TypeError, ValueError):
        return None


def trailing_days(reference: date, count: int) -> List[date]:
    """Return ``count`` consecutive days ending at ``reference``, oldest first."""
    return [reference - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def trailing_weeks(reference: date, count: int) -> List[Tuple[date, date]]:
    """Return ``count`` inclusive 7-day windows ending at ``reference``, oldest first."""
    windows = []
    for index in range(count - 1, -1, -1):
        end = reference - timedelta(days=index * 7)
        windows.append((end - timedelta(days=6), end))
    return windows
