# backend/app/routers/capacities.py
# PUT = upsert per (hall_id, date), DELETE = ALLOWED (hard) while unused
#
# max_count may never drop below the bookings already made for that day.

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import DailyCapacities as DBDailyCapacities, Halls as DBHalls
from ..schemas.capacities import (
    CapacityBulkUpdate,
    CapacityRead,
    CapacityUpsert,
)
from ..services.events import emit_event
from ..services.turnover import validate_capacity_change
from ..services.turnover.store import count_hall_bookings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/capacities", tags=["capacities"])


def _require_hall(db: Session, hall_id: int) -> None:
    if not db.get(DBHalls, hall_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Hall {hall_id} not found",
        )


def _find(db: Session, hall_id: int, target_date: date) -> DBDailyCapacities | None:
    return (
        db.query(DBDailyCapacities)
        .filter(
            DBDailyCapacities.hall_id == hall_id,
            DBDailyCapacities.date == target_date.isoformat(),
        )
        .first()
    )


def _check_change(db: Session, hall_id: int, target_date: date, max_count: int | None) -> None:
    current = count_hall_bookings(db, hall_id, target_date)
    decision = validate_capacity_change(max_count, current)
    if not decision.allowed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"date": target_date.isoformat(), **decision.as_detail()},
        )


@router.get("/", response_model=list[CapacityRead])
def list_capacities(
    hall_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBDailyCapacities).filter(DBDailyCapacities.hall_id == hall_id)
    if start_date is not None:
        query = query.filter(DBDailyCapacities.date >= start_date.isoformat())
    if end_date is not None:
        query = query.filter(DBDailyCapacities.date <= end_date.isoformat())
    return query.order_by(DBDailyCapacities.date).all()


@router.put("/", response_model=CapacityRead)
def upsert_capacity(
    data: CapacityUpsert,
    db: Session = Depends(get_db),
):
    _require_hall(db, data.hall_id)
    _check_change(db, data.hall_id, data.date, data.max_count)

    obj = _find(db, data.hall_id, data.date)
    if obj:
        obj.max_count = data.max_count
    else:
        obj = DBDailyCapacities(
            hall_id=data.hall_id,
            date=data.date.isoformat(),
            max_count=data.max_count,
        )
        db.add(obj)

    db.commit()
    db.refresh(obj)

    emit_event("capacity_updated", {"hall_id": obj.hall_id, "date": obj.date})
    return obj


@router.put("/bulk", response_model=list[CapacityRead])
def update_capacities_bulk(
    data: CapacityBulkUpdate,
    db: Session = Depends(get_db),
):
    """
    Save a range of days for one hall, all or nothing.

    Items with max_count = null clear the day.
    """
    _require_hall(db, data.hall_id)

    for item in data.items:
        _check_change(db, data.hall_id, item.date, item.max_count)

    saved = []
    for item in data.items:
        obj = _find(db, data.hall_id, item.date)
        if item.max_count is None:
            if obj:
                db.delete(obj)
            continue
        if obj:
            obj.max_count = item.max_count
        else:
            obj = DBDailyCapacities(
                hall_id=data.hall_id,
                date=item.date.isoformat(),
                max_count=item.max_count,
            )
            db.add(obj)
        saved.append(obj)

    db.commit()
    for obj in saved:
        db.refresh(obj)

    logger.info(f"Capacities saved: hall={data.hall_id} days={len(data.items)}")
    emit_event("capacity_updated", {
        "hall_id": data.hall_id,
        "dates": [item.date.isoformat() for item in data.items],
    })
    return saved


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_capacity(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBDailyCapacities, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    _check_change(db, obj.hall_id, date.fromisoformat(obj.date), None)

    payload = {"hall_id": obj.hall_id, "date": obj.date}
    db.delete(obj)
    db.commit()

    emit_event("capacity_updated", payload)
