# backend/app/schemas/capacities.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from ..services.turnover.capacity import MAX_DAILY_COUNT


class CapacityUpsert(BaseModel):
    hall_id: int
    date: date
    max_count: int = Field(ge=0, le=MAX_DAILY_COUNT)


class CapacityBulkItem(BaseModel):
    date: date
    # None clears the day (no capacity configured)
    max_count: Optional[int] = Field(None, ge=0, le=MAX_DAILY_COUNT)


class CapacityBulkUpdate(BaseModel):
    """One week of one hall, as edited on the capacities screen."""
    hall_id: int
    items: list[CapacityBulkItem] = Field(min_length=1)


class CapacityRead(BaseModel):
    id: int
    hall_id: int
    date: date
    max_count: int

    model_config = {"from_attributes": True}
