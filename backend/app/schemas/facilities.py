# backend/app/schemas/facilities.py

import json
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class TurnoverRuleSchema(BaseModel):
    funeral_time: str
    min_wake_time: Optional[str] = None
    is_forbidden: bool = False


class FacilityCreate(BaseModel):
    name: str
    area: Optional[str] = None
    phone: Optional[str] = None

    start_hour: int = Field(9, ge=0, le=23)
    end_hour: int = Field(18, ge=0, le=23)

    turnover_rules: list[TurnoverRuleSchema] = []
    funeral_block_time: Optional[str] = None
    # None = settings.default_turnover_interval_hours
    turnover_interval_hours: Optional[int] = Field(None, ge=0)
    wake_min_time: Optional[str] = None

    model_config = {"from_attributes": True}


class FacilityUpdate(BaseModel):
    is_active: Optional[bool] = None
    name: Optional[str] = None
    area: Optional[str] = None
    phone: Optional[str] = None

    start_hour: Optional[int] = Field(None, ge=0, le=23)
    end_hour: Optional[int] = Field(None, ge=0, le=23)

    turnover_rules: Optional[list[TurnoverRuleSchema]] = None
    funeral_block_time: Optional[str] = None
    turnover_interval_hours: Optional[int] = Field(None, ge=0)
    wake_min_time: Optional[str] = None

    model_config = {"from_attributes": True}


class FacilityRead(BaseModel):
    id: int
    name: str
    area: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool

    start_hour: int
    end_hour: int

    turnover_rules: list[TurnoverRuleSchema]
    funeral_block_time: Optional[str] = None
    turnover_interval_hours: int
    wake_min_time: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("turnover_rules", mode="before")
    @classmethod
    def decode_rules(cls, v):
        """Column holds JSON text."""
        if isinstance(v, str):
            return json.loads(v) if v.strip() else []
        return v


class TurnoverPreview(BaseModel):
    """Admin preview of the resolver for one funeral time."""
    facility_id: int
    funeral_time: str
    is_forbidden: bool
    is_by_block_time: bool
    min_wake_time: Optional[str] = None
    matched_rule: Optional[TurnoverRuleSchema] = None
