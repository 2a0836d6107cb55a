# backend/app/schemas/schedules.py

from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..services.turnover.config import minutes_to_time_str, time_str_to_minutes

SlotTypeValue = Literal["葬儀", "通夜"]
StatusValue = Literal["available", "occupied", "preparing", "external"]
DateValue = date  # "date" is also a field name below


def _normalize_time(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    minutes = time_str_to_minutes(v)
    if minutes is None:
        raise ValueError("Time must be in HH:MM format")
    return minutes_to_time_str(minutes)


class ScheduleCreate(BaseModel):
    date: date
    hall_id: int
    slot_type: SlotTypeValue
    ceremony_time: Optional[str] = None
    status: StatusValue = "occupied"
    family_name: Optional[str] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("ceremony_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_time(v)

    @model_validator(mode="after")
    def require_family_name(self):
        if self.status != "external" and not (self.family_name or "").strip():
            raise ValueError("family_name is required unless status is external")
        return self


class ScheduleUpdate(BaseModel):
    date: Optional[DateValue] = None
    hall_id: Optional[int] = None
    slot_type: Optional[SlotTypeValue] = None
    ceremony_time: Optional[str] = None
    status: Optional[StatusValue] = None
    family_name: Optional[str] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("ceremony_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_time(v)


class ScheduleBulkCreate(BaseModel):
    """Several rows at once, e.g. from the OCR result form."""
    schedules: list[ScheduleCreate] = Field(min_length=1)


class ScheduleRead(BaseModel):
    id: int

    date: date
    hall_id: int
    slot_type: SlotTypeValue
    ceremony_time: Optional[str] = None
    status: StatusValue
    family_name: Optional[str] = None
    notes: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
