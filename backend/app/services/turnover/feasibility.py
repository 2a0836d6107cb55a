# backend/app/services/turnover/feasibility.py
"""
Booking feasibility for one hall on one day.

Stateless: every call works on the snapshot of existing bookings handed in
by the caller, who also owns the transaction around read-check-write.

Checks, first failure wins:
  1. cardinality : at most one 葬儀 and one 通夜 per hall per day
  2. day type    : no 葬儀 on a tomobiki (友引) day
  3. turnover    : wake vs. funeral, evaluated in both directions
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .config import FacilityTurnoverConfig, minutes_to_time_str, time_str_to_minutes
from .decision import Decision, RejectionCode
from .resolver import resolve_wake_constraint


class SlotType(str, Enum):
    FUNERAL = "葬儀"
    WAKE = "通夜"


class BookingStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    PREPARING = "preparing"
    # Held by another operator: no ceremony of ours, still occupies the slot
    EXTERNAL = "external"


@dataclass(frozen=True)
class DayType:
    is_tomobiki: bool = False


@dataclass(frozen=True)
class Booking:
    """Snapshot of one hall occupancy, detached from the session."""
    date: str
    hall_id: int
    slot_type: SlotType
    ceremony_time: str | None = None
    status: BookingStatus = BookingStatus.OCCUPIED
    family_name: str | None = None
    id: int | None = None

    @property
    def ceremony_minutes(self) -> int | None:
        return time_str_to_minutes(self.ceremony_time)

    @classmethod
    def from_row(cls, row) -> "Booking":
        return cls(
            id=row.id,
            date=row.date,
            hall_id=row.hall_id,
            slot_type=SlotType(row.slot_type),
            ceremony_time=row.ceremony_time,
            status=BookingStatus(row.status),
            family_name=row.family_name,
        )


def can_place_booking(
    config: FacilityTurnoverConfig,
    day_type: DayType | None,
    existing_bookings: Iterable[Booking],
    candidate: Booking,
    replacing_id: int | None = None,
) -> Decision:
    """
    Decide whether `candidate` may be placed next to `existing_bookings`.

    Args:
        config: Turnover configuration of the hall's facility
        day_type: Day type of the candidate's date (None = not tomobiki)
        existing_bookings: Bookings of the same hall and date
        candidate: Proposed booking
        replacing_id: Id of the booking being edited, ignored in the snapshot
    """
    others = [
        b for b in existing_bookings
        if replacing_id is None or b.id != replacing_id
    ]

    # 1. Cardinality
    if any(b.slot_type == candidate.slot_type for b in others):
        return Decision.reject(
            RejectionCode.ALREADY_BOOKED,
            f"{candidate.slot_type.value} is already booked in this hall on {candidate.date}",
        )

    # 2. Day type
    if candidate.slot_type == SlotType.FUNERAL and day_type is not None and day_type.is_tomobiki:
        return Decision.reject(
            RejectionCode.TOMOBIKI_RESTRICTION,
            f"Funerals cannot be booked on a tomobiki (友引) day: {candidate.date}",
        )

    # 3. Turnover
    if candidate.slot_type == SlotType.WAKE:
        funeral = _first_of(others, SlotType.FUNERAL)
        if funeral is not None:
            return _check_wake_after(config, funeral.ceremony_time, candidate.ceremony_time)
    else:
        wake = _first_of(others, SlotType.WAKE)
        if wake is not None:
            return _check_funeral_before(config, candidate.ceremony_time, wake.ceremony_time)

    return Decision.accept()


def _check_wake_after(
    config: FacilityTurnoverConfig,
    funeral_time: str | None,
    wake_time: str | None,
) -> Decision:
    """A new wake against the funeral already booked."""
    constraint = resolve_wake_constraint(config, funeral_time)

    if constraint.is_forbidden:
        return Decision.reject(
            RejectionCode.TURNOVER_FORBIDDEN,
            f"No wake can follow the funeral at {funeral_time} in this hall on the same day",
        )

    wake_min = time_str_to_minutes(wake_time)
    if not constraint.permits(wake_min):
        min_str = minutes_to_time_str(constraint.min_wake_minutes)
        return Decision.reject(
            RejectionCode.TURNOVER_TOO_SOON,
            f"Wake must start at {min_str} or later after the funeral at {funeral_time}",
            min_wake_time=min_str,
        )

    return Decision.accept()


def _check_funeral_before(
    config: FacilityTurnoverConfig,
    funeral_time: str | None,
    wake_time: str | None,
) -> Decision:
    """A new funeral against the wake already booked (roles swapped)."""
    constraint = resolve_wake_constraint(config, funeral_time)

    if constraint.is_forbidden:
        return Decision.reject(
            RejectionCode.TURNOVER_FORBIDDEN,
            f"A funeral at {funeral_time} forbids the wake already booked "
            f"at {wake_time} in this hall",
        )

    wake_min = time_str_to_minutes(wake_time)
    if not constraint.permits(wake_min):
        min_str = minutes_to_time_str(constraint.min_wake_minutes)
        return Decision.reject(
            RejectionCode.TURNOVER_TOO_SOON,
            f"A funeral at {funeral_time} requires the wake to start at {min_str} "
            f"or later, but it is booked at {wake_time}",
            min_wake_time=min_str,
        )

    return Decision.accept()


def _first_of(bookings: list[Booking], slot_type: SlotType) -> Booking | None:
    return next((b for b in bookings if b.slot_type == slot_type), None)
