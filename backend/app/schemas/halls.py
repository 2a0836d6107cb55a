# backend/app/schemas/halls.py

from typing import Optional
from pydantic import BaseModel


class HallCreate(BaseModel):
    facility_id: int
    name: str
    capacity: Optional[int] = None
    has_waiting_room: bool = False
    display_order: Optional[int] = None

    model_config = {"from_attributes": True}


class HallUpdate(BaseModel):
    is_active: Optional[bool] = None
    name: Optional[str] = None
    capacity: Optional[int] = None
    has_waiting_room: Optional[bool] = None
    display_order: Optional[int] = None

    model_config = {"from_attributes": True}


class HallRead(BaseModel):
    id: int
    facility_id: int
    name: str
    capacity: Optional[int] = None
    has_waiting_room: bool
    display_order: Optional[int] = None
    is_active: bool

    model_config = {"from_attributes": True}
