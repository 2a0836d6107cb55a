# backend/app/services/turnover/availability.py
"""
Hourly availability of one hall on one day, for the schedule list view.

Every hour between the facility's start_hour and end_hour is run through
the same checks as a real submission, so the list never offers a time that
the guard would refuse.
"""

from datetime import date

from sqlalchemy.orm import Session

from ...models.generated import Halls, Rokuyo
from .capacity import has_capacity
from .feasibility import Booking, SlotType, can_place_booking
from .store import (
    as_date_str,
    facility_config,
    get_capacity,
    get_day_type,
    list_hall_bookings,
)


def calculate_hall_availability(
    db: Session,
    hall_id: int,
    target_date: date,
    slot_type: SlotType,
) -> dict | None:
    """
    Returns:
        Dict for HallDayAvailability, or None when the hall does not exist.
    """
    hall = db.get(Halls, hall_id)
    if not hall:
        return None

    facility = hall.facility
    config = facility_config(facility)
    date_str = as_date_str(target_date)

    existing = list_hall_bookings(db, hall_id, date_str)
    day_type = get_day_type(db, date_str)
    max_count = get_capacity(db, hall_id, date_str)
    capacity = has_capacity(max_count, len(existing))

    times = []
    for hour in range(facility.start_hour, facility.end_hour + 1):
        time_str = f"{hour:02d}:00"
        candidate = Booking(
            date=date_str,
            hall_id=hall_id,
            slot_type=slot_type,
            ceremony_time=time_str,
        )
        decision = can_place_booking(config, day_type, existing, candidate)
        if decision.allowed:
            decision = capacity

        times.append({
            "time": time_str,
            "available": decision.allowed,
            "code": decision.code.value if decision.code else None,
            "reason": decision.reason,
        })

    rokuyo = db.get(Rokuyo, date_str)

    return {
        "hall_id": hall_id,
        "date": target_date,
        "slot_type": slot_type.value,
        "rokuyo": rokuyo.rokuyo if rokuyo else None,
        "is_tomobiki": day_type.is_tomobiki,
        "max_count": max_count,
        "booked_count": len(existing),
        "times": times,
    }
