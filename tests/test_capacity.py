import pytest

from app.services.turnover import RejectionCode, has_capacity, validate_capacity_change


def test_no_capacity_configured() -> None:
    decision = has_capacity(None, 0)
    assert decision.allowed is False
    assert decision.code == RejectionCode.NO_CAPACITY_CONFIGURED


@pytest.mark.parametrize("max_count, current", [(1, 1), (0, 0), (2, 3)])
def test_capacity_exceeded(max_count, current) -> None:
    decision = has_capacity(max_count, current)
    assert decision.allowed is False
    assert decision.code == RejectionCode.CAPACITY_EXCEEDED


def test_capacity_available() -> None:
    assert has_capacity(2, 1).allowed is True
    assert has_capacity(1, 0).allowed is True


def test_capacity_change_without_bookings_is_free() -> None:
    assert validate_capacity_change(None, 0).allowed is True
    assert validate_capacity_change(0, 0).allowed is True


def test_capacity_cannot_drop_below_bookings() -> None:
    assert validate_capacity_change(2, 2).allowed is True
    reduced = validate_capacity_change(1, 2)
    assert reduced.allowed is False
    assert reduced.code == RejectionCode.CAPACITY_BELOW_BOOKINGS


def test_capacity_cannot_be_cleared_while_booked() -> None:
    decision = validate_capacity_change(None, 1)
    assert decision.allowed is False
    assert decision.code == RejectionCode.CAPACITY_BELOW_BOOKINGS
