# backend/app/schemas/slots.py

from datetime import date
from typing import Optional
from pydantic import BaseModel


class SlotTimeStatus(BaseModel):
    """One hourly cell of the list view."""
    time: str  # "HH:MM"
    available: bool
    code: Optional[str] = None
    reason: Optional[str] = None


class HallDayAvailability(BaseModel):
    hall_id: int
    date: date
    slot_type: str
    rokuyo: Optional[str] = None
    is_tomobiki: bool
    max_count: Optional[int] = None
    booked_count: int
    times: list[SlotTimeStatus]
