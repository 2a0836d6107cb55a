# backend/app/routers/slots.py
"""
Slots API endpoints.

GET /slots/day - hourly availability of one hall for one ceremony type
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.slots import HallDayAvailability
from ..services.turnover import SlotType
from ..services.turnover.availability import calculate_hall_availability


router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/day", response_model=HallDayAvailability)
def get_slots_day(
    hall_id: int,
    slot_type: SlotType,
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    """Which hours the schedule list may offer for a new booking."""
    result = calculate_hall_availability(
        db=db,
        hall_id=hall_id,
        target_date=target_date,
        slot_type=slot_type,
    )
    if result is None:
        raise HTTPException(status_code=404, detail=f"Hall {hall_id} not found")

    return HallDayAvailability(**result)
