# backend/app/routers/facilities.py
# PATCH = ALLOWED, DELETE = soft-delete (is_active)
# Turnover settings are validated on write: a facility never stores a
# rule table the resolver cannot use.

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..models.generated import Facilities as DBFacilities
from ..schemas.facilities import (
    FacilityCreate,
    FacilityUpdate,
    FacilityRead,
    TurnoverPreview,
)
from ..services.turnover import (
    FacilityTurnoverConfig,
    minutes_to_time_str,
    resolve_wake_constraint,
    time_str_to_minutes,
)
from ..services.turnover.store import facility_config

router = APIRouter(prefix="/facilities", tags=["facilities"])

TURNOVER_FIELDS = (
    "turnover_rules",
    "funeral_block_time",
    "turnover_interval_hours",
    "wake_min_time",
)


def _interval_or_default(hours: int | None) -> int:
    if hours is None:
        return settings.default_turnover_interval_hours
    return hours


def _build_config(values: dict) -> FacilityTurnoverConfig:
    # Raises TurnoverConfigError → 422 (see main.py)
    return FacilityTurnoverConfig.from_records(
        values.get("turnover_rules") or [],
        block_time=values.get("funeral_block_time"),
        interval_hours=_interval_or_default(values.get("turnover_interval_hours")),
        wake_min_time=values.get("wake_min_time"),
    )


def _check_hours(start_hour: int, end_hour: int) -> None:
    if end_hour < start_hour:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_hour must not be earlier than start_hour",
        )


@router.get("/", response_model=list[FacilityRead])
def list_facilities(db: Session = Depends(get_db)):
    return (
        db.query(DBFacilities)
        .filter(DBFacilities.is_active == 1)
        .order_by(DBFacilities.name)
        .all()
    )


@router.get("/{id}", response_model=FacilityRead)
def get_facility(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBFacilities, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=FacilityRead, status_code=status.HTTP_201_CREATED)
def create_facility(
    data: FacilityCreate,
    db: Session = Depends(get_db),
):
    values = data.model_dump()
    _check_hours(values["start_hour"], values["end_hour"])
    config = _build_config(values)

    values["turnover_rules"] = config.rules_to_json()
    values["turnover_interval_hours"] = config.interval_hours
    values["funeral_block_time"] = config.block_time
    values["wake_min_time"] = config.wake_min_time

    obj = DBFacilities(**values)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=FacilityRead)
def update_facility(
    id: int,
    data: FacilityUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBFacilities, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    changes = data.model_dump(exclude_unset=True)

    _check_hours(
        changes.get("start_hour", obj.start_hour),
        changes.get("end_hour", obj.end_hour),
    )

    if any(field in changes for field in TURNOVER_FIELDS):
        merged = {
            "turnover_rules": obj.turnover_rules,
            "funeral_block_time": obj.funeral_block_time,
            "turnover_interval_hours": obj.turnover_interval_hours,
            "wake_min_time": obj.wake_min_time,
        }
        merged.update({k: v for k, v in changes.items() if k in TURNOVER_FIELDS})
        config = _build_config(merged)
        changes["turnover_rules"] = config.rules_to_json()
        changes["turnover_interval_hours"] = config.interval_hours
        changes["funeral_block_time"] = config.block_time
        changes["wake_min_time"] = config.wake_min_time

    for field, value in changes.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_facility(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBFacilities, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()


@router.get("/{id}/turnover", response_model=TurnoverPreview)
def preview_turnover(
    id: int,
    funeral_time: str = Query(..., description="Funeral start, HH:MM"),
    db: Session = Depends(get_db),
):
    """Earliest wake after a funeral at `funeral_time` (admin preview)."""
    obj = db.get(DBFacilities, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    minutes = time_str_to_minutes(funeral_time)
    if minutes is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="funeral_time must be in HH:MM format",
        )

    constraint = resolve_wake_constraint(facility_config(obj), funeral_time)
    rule = constraint.matched_rule

    return TurnoverPreview(
        facility_id=obj.id,
        funeral_time=minutes_to_time_str(minutes),
        is_forbidden=constraint.is_forbidden,
        is_by_block_time=constraint.is_by_block_time,
        min_wake_time=(
            minutes_to_time_str(constraint.min_wake_minutes)
            if constraint.min_wake_minutes is not None else None
        ),
        matched_rule=rule.to_record() if rule else None,
    )
