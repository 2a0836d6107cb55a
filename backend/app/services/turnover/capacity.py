# backend/app/services/turnover/capacity.py
"""
Daily capacity gate.

A hall accepts bookings on a date only up to its configured max_count;
no daily_capacities row means nothing can be booked yet.
"""

from .decision import Decision, RejectionCode

MAX_DAILY_COUNT = 9


def has_capacity(max_count: int | None, current_count: int) -> Decision:
    """Whether one more booking fits next to `current_count` existing ones."""
    if max_count is None:
        return Decision.reject(
            RejectionCode.NO_CAPACITY_CONFIGURED,
            "No capacity configured for this hall on this date",
        )
    if current_count >= max_count:
        return Decision.reject(
            RejectionCode.CAPACITY_EXCEEDED,
            f"Capacity exceeded: {current_count} of {max_count} already booked",
        )
    return Decision.accept()


def validate_capacity_change(new_max_count: int | None, current_count: int) -> Decision:
    """
    Whether max_count may be changed to `new_max_count` (None = clear it)
    while `current_count` bookings exist for the hall and date.
    """
    if current_count <= 0:
        return Decision.accept()
    if new_max_count is None:
        return Decision.reject(
            RejectionCode.CAPACITY_BELOW_BOOKINGS,
            f"{current_count} booking(s) exist, capacity cannot be cleared",
        )
    if new_max_count < current_count:
        return Decision.reject(
            RejectionCode.CAPACITY_BELOW_BOOKINGS,
            f"{current_count} booking(s) exist, capacity cannot be reduced to {new_max_count}. "
            f"Move or delete bookings first",
        )
    return Decision.accept()
