# backend/app/routers/schedules.py
# PATCH = ALLOWED (re-validated), DELETE = ALLOWED (hard)
#
# Every write goes through check_admission() in the same session that
# commits it; a rejection answers 409 with {code, reason, min_wake_time}.

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Halls as DBHalls, Schedules as DBSchedules
from ..schemas.schedules import (
    ScheduleBulkCreate,
    ScheduleCreate,
    ScheduleRead,
    ScheduleUpdate,
)
from ..services.events import emit_event
from ..services.turnover import (
    Booking,
    BookingStatus,
    Decision,
    RejectionCode,
    SlotType,
    check_admission,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedules", tags=["schedules"])

# Changing any of these moves the booking and needs a new admission check
PLACEMENT_FIELDS = ("date", "hall_id", "slot_type", "ceremony_time")


def _require_hall(db: Session, hall_id: int) -> None:
    hall = db.get(DBHalls, hall_id)
    if not hall or not hall.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Hall {hall_id} not found",
        )


def _candidate(values: dict) -> Booking:
    return Booking(
        date=values["date"].isoformat() if isinstance(values["date"], date) else values["date"],
        hall_id=values["hall_id"],
        slot_type=SlotType(values["slot_type"]),
        ceremony_time=values.get("ceremony_time"),
        status=BookingStatus(values.get("status") or BookingStatus.OCCUPIED.value),
        family_name=values.get("family_name"),
    )


def _admit(db: Session, candidate: Booking, replacing_id: int | None = None) -> None:
    decision = check_admission(db, candidate, replacing_id=replacing_id)
    if not decision.allowed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=decision.as_detail(),
        )


def _lost_race(db: Session, candidate: Booking, **extra) -> HTTPException:
    # Another request stored the same slot between our check and our write
    db.rollback()
    logger.info(
        f"Unique slot conflict: hall={candidate.hall_id} date={candidate.date} "
        f"type={candidate.slot_type.value}"
    )
    decision = Decision.reject(
        RejectionCode.ALREADY_BOOKED,
        f"{candidate.slot_type.value} is already booked in this hall on {candidate.date}",
    )
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={**extra, **decision.as_detail()},
    )


def _event_payload(obj: DBSchedules) -> dict:
    return {
        "schedule_id": obj.id,
        "hall_id": obj.hall_id,
        "date": obj.date,
        "slot_type": obj.slot_type,
    }


@router.get("/", response_model=list[ScheduleRead])
def list_schedules(
    target_date: date | None = Query(None, alias="date"),
    hall_id: int | None = None,
    facility_id: int | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBSchedules)
    if target_date is not None:
        query = query.filter(DBSchedules.date == target_date.isoformat())
    if hall_id is not None:
        query = query.filter(DBSchedules.hall_id == hall_id)
    if facility_id is not None:
        query = query.join(DBHalls).filter(DBHalls.facility_id == facility_id)
    return query.order_by(DBSchedules.date, DBSchedules.ceremony_time, DBSchedules.id).all()


@router.get("/{id}", response_model=ScheduleRead)
def get_schedule(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBSchedules, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=ScheduleRead, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: ScheduleCreate,
    db: Session = Depends(get_db),
):
    _require_hall(db, data.hall_id)

    values = data.model_dump()
    candidate = _candidate(values)
    _admit(db, candidate)

    values["date"] = data.date.isoformat()
    obj = DBSchedules(**values)
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        raise _lost_race(db, candidate)
    db.refresh(obj)

    logger.info(f"Schedule {obj.id} created: hall={obj.hall_id} date={obj.date} type={obj.slot_type}")
    emit_event("schedule_created", _event_payload(obj))
    return obj


@router.post("/bulk", response_model=list[ScheduleRead], status_code=status.HTTP_201_CREATED)
def create_schedules_bulk(
    data: ScheduleBulkCreate,
    db: Session = Depends(get_db),
):
    """
    Register several rows at once, all or nothing.

    Each row is checked against the stored bookings plus the rows before it.
    """
    created = []
    for index, item in enumerate(data.schedules):
        _require_hall(db, item.hall_id)

        values = item.model_dump()
        candidate = _candidate(values)
        decision = check_admission(db, candidate)
        if not decision.allowed:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"index": index, **decision.as_detail()},
            )

        values["date"] = item.date.isoformat()
        obj = DBSchedules(**values)
        db.add(obj)
        # autoflush is off: flush so the next row's snapshot sees this one
        try:
            db.flush()
        except IntegrityError:
            raise _lost_race(db, candidate, index=index)
        created.append(obj)

    db.commit()
    for obj in created:
        db.refresh(obj)
        emit_event("schedule_created", _event_payload(obj))

    logger.info(f"Bulk registration: {len(created)} schedules created")
    return created


@router.patch("/{id}", response_model=ScheduleRead)
def update_schedule(
    id: int,
    data: ScheduleUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBSchedules, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    changes = data.model_dump(exclude_unset=True)
    if "date" in changes and changes["date"] is not None:
        changes["date"] = changes["date"].isoformat()

    for field in ("date", "hall_id", "slot_type", "status"):
        if field in changes and changes[field] is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"{field} cannot be null",
            )

    merged = {
        "date": obj.date,
        "hall_id": obj.hall_id,
        "slot_type": obj.slot_type,
        "ceremony_time": obj.ceremony_time,
        "status": obj.status,
        "family_name": obj.family_name,
    }
    merged.update({k: v for k, v in changes.items() if k in merged})

    if merged["status"] != BookingStatus.EXTERNAL.value and not (merged["family_name"] or "").strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="family_name is required unless status is external",
        )

    if any(field in changes for field in PLACEMENT_FIELDS):
        if merged["hall_id"] != obj.hall_id:
            _require_hall(db, merged["hall_id"])
        _admit(db, _candidate(merged), replacing_id=obj.id)

    for field, value in changes.items():
        setattr(obj, field, value)
    obj.updated_at = func.current_timestamp()

    try:
        db.commit()
    except IntegrityError:
        raise _lost_race(db, _candidate(merged))
    db.refresh(obj)

    emit_event("schedule_updated", _event_payload(obj))
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBSchedules, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    payload = _event_payload(obj)
    db.delete(obj)
    db.commit()

    emit_event("schedule_deleted", payload)
