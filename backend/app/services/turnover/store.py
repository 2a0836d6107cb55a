# backend/app/services/turnover/store.py
"""
Record store reads for turnover checks.

One query per helper; the caller's Session decides the transaction.
"""

from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models.generated import (
    DailyCapacities,
    Facilities,
    Halls,
    Rokuyo,
    Schedules,
)
from .config import FacilityTurnoverConfig
from .feasibility import Booking, DayType


def as_date_str(value: date | str) -> str:
    """Stored dates are "YYYY-MM-DD"; a datetime keeps only its date part."""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def list_hall_bookings(
    db: Session,
    hall_id: int,
    target_date: date | str,
    exclude_id: int | None = None,
) -> list[Booking]:
    """Bookings of a hall on a date, optionally without the one being edited."""
    query = db.query(Schedules).filter(
        Schedules.hall_id == hall_id,
        Schedules.date == as_date_str(target_date),
    )
    if exclude_id is not None:
        query = query.filter(Schedules.id != exclude_id)
    return [Booking.from_row(row) for row in query.order_by(Schedules.id).all()]


def count_hall_bookings(db: Session, hall_id: int, target_date: date | str) -> int:
    return (
        db.query(func.count(Schedules.id))
        .filter(
            Schedules.hall_id == hall_id,
            Schedules.date == as_date_str(target_date),
        )
        .scalar()
    ) or 0


def get_capacity(db: Session, hall_id: int, target_date: date | str) -> int | None:
    row = (
        db.query(DailyCapacities)
        .filter(
            DailyCapacities.hall_id == hall_id,
            DailyCapacities.date == as_date_str(target_date),
        )
        .first()
    )
    return row.max_count if row else None


def get_day_type(db: Session, target_date: date | str) -> DayType:
    """Missing rokuyo rows count as non-tomobiki."""
    row = db.get(Rokuyo, as_date_str(target_date))
    return DayType(is_tomobiki=bool(row and row.is_tomobiki))


def facility_config(facility: Facilities) -> FacilityTurnoverConfig:
    """Build the turnover config of a facility row (raises TurnoverConfigError)."""
    return FacilityTurnoverConfig.from_records(
        facility.turnover_rules,
        block_time=facility.funeral_block_time,
        interval_hours=facility.turnover_interval_hours,
        wake_min_time=facility.wake_min_time,
    )


def get_facility_config(db: Session, facility_id: int) -> FacilityTurnoverConfig | None:
    facility = db.get(Facilities, facility_id)
    if not facility:
        return None
    return facility_config(facility)


def get_hall_facility_config(db: Session, hall_id: int) -> FacilityTurnoverConfig | None:
    hall = db.get(Halls, hall_id)
    if not hall:
        return None
    return facility_config(hall.facility)
