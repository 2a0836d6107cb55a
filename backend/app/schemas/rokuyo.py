# backend/app/schemas/rokuyo.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator

TOMOBIKI = "友引"


class RokuyoWrite(BaseModel):
    date: date
    rokuyo: str
    is_tomobiki: Optional[bool] = None

    @model_validator(mode="after")
    def derive_tomobiki(self):
        if self.is_tomobiki is None:
            self.is_tomobiki = self.rokuyo == TOMOBIKI
        return self


class RokuyoBulkWrite(BaseModel):
    rows: list[RokuyoWrite] = Field(min_length=1)


class RokuyoRead(BaseModel):
    date: date
    rokuyo: str
    is_tomobiki: bool

    model_config = {"from_attributes": True}
