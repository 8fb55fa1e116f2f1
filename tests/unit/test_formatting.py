import pytest

from rt_cli.utils.formatting import (
    convert_distance,
    format_duration,
    format_number,
    format_pace,
    format_time,
)


@pytest.mark.parametrize(
    ("duration", "distance", "expected"),
    [
        (25, 5, "5:00"),
        (40, 10, "4:00"),
        (27.5, 5, "5:30"),
        (30, 0, "--:--"),
        (30, None, "--:--"),
    ],
)
def test_format_pace(duration, distance, expected) -> None:
    assert format_pace(duration, distance) == expected


def test_format_time() -> None:
    assert format_time(0) == "00:00:00"
    assert format_time(3725) == "01:02:05"


def test_convert_distance() -> None:
    assert convert_distance(10) == "10.00 km"
    assert convert_distance(10, imperial=True) == "6.21 mi"


def test_format_duration_and_number() -> None:
    assert format_duration(None) == "N/A"
    assert format_duration(45.5) == "45:30"
    assert format_duration(90) == "1:30:00"
    assert format_number(5.0) == "5"
    assert format_number(5.25) == "5.25"
