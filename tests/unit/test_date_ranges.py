from datetime import date

import pytest
import typer

from rt_cli.utils.date_ranges import (
    parse_date,
    trailing_days,
    trailing_weeks,
    try_parse_date,
    validate_date,
)


def test_trailing_days_oldest_first() -> None:
    days = trailing_days(date(2026, 3, 1), 3)
    assert [d.isoformat() for d in days] == ["2026-02-27", "2026-02-28", "2026-03-01"]


def test_trailing_weeks_non_overlapping() -> None:
    weeks = trailing_weeks(date(2026, 2, 14), 3)
    assert [(s.isoformat(), e.isoformat()) for s, e in weeks] == [
        ("2026-01-25", "2026-01-31"),
        ("2026-02-01", "2026-02-07"),
        ("2026-02-08", "2026-02-14"),
    ]


def test_parse_helpers() -> None:
    assert parse_date("2026-02-14") == date(2026, 2, 14)
    assert try_parse_date("2026-02-30") is None
    assert try_parse_date("yesterday") is None


def test_validate_date_accepts_none_and_valid() -> None:
    assert validate_date(None) is None
    assert validate_date("2026-02-14") == "2026-02-14"


@pytest.mark.parametrize("value", ["2026/02/14", "2026-02-30", "14-02-2026"])
def test_validate_date_rejects_invalid(value: str) -> None:
    with pytest.raises(typer.BadParameter):
        validate_date(value)
