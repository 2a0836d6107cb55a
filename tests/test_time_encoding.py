from datetime import time

import pytest

from app.services.turnover.config import minutes_to_time_str, time_str_to_minutes


@pytest.mark.parametrize(
    "value, expected",
    [
        ("00:00", 0),
        ("09:00", 540),
        ("9:05", 545),
        ("23:59", 1439),
        ("18:30:00", 1110),
        (" 10:00 ", 600),
        (time(13, 15), 795),
    ],
)
def test_time_str_to_minutes(value, expected) -> None:
    assert time_str_to_minutes(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", "24:00", "12:60", "1200", "12:5", 540])
def test_time_str_to_minutes_returns_none_for_malformed_input(value) -> None:
    assert time_str_to_minutes(value) is None


def test_minutes_to_time_str_pads_and_keeps_hours_past_midnight() -> None:
    assert minutes_to_time_str(545) == "09:05"
    assert minutes_to_time_str(0) == "00:00"
    assert minutes_to_time_str(26 * 60) == "26:00"
