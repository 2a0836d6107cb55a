# backend/app/services/turnover/__init__.py
"""
Hall turnover rules for funerals (葬儀) and wakes (通夜).

Pure core (no I/O, no clock):
  config       time encoding + facility rule table
  resolver     earliest wake for a funeral time
  feasibility  cardinality, tomobiki and turnover checks
  capacity     daily max_count gate

Session-bound:
  store        record store reads
  admission    submit-time guard
  availability hourly slot filter for the list view
"""

from .config import (
    FacilityTurnoverConfig,
    TurnoverConfigError,
    TurnoverRule,
    minutes_to_time_str,
    time_str_to_minutes,
)
from .decision import Decision, RejectionCode
from .resolver import WakeConstraint, resolve_wake_constraint
from .feasibility import Booking, BookingStatus, DayType, SlotType, can_place_booking
from .capacity import has_capacity, validate_capacity_change
from .admission import check_admission

__all__ = [
    "FacilityTurnoverConfig",
    "TurnoverConfigError",
    "TurnoverRule",
    "minutes_to_time_str",
    "time_str_to_minutes",
    "Decision",
    "RejectionCode",
    "WakeConstraint",
    "resolve_wake_constraint",
    "Booking",
    "BookingStatus",
    "DayType",
    "SlotType",
    "can_place_booking",
    "has_capacity",
    "validate_capacity_change",
    "check_admission",
]
