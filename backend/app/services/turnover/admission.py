# backend/app/services/turnover/admission.py
"""
Submit-time guard: feasibility first, then capacity.

Run inside the same Session that performs the write, so the snapshot and
the write share one transaction.
"""

import logging

from sqlalchemy.orm import Session

from .capacity import has_capacity
from .decision import Decision
from .feasibility import Booking, can_place_booking
from .store import (
    get_capacity,
    get_day_type,
    get_hall_facility_config,
    list_hall_bookings,
)

logger = logging.getLogger(__name__)


def check_admission(
    db: Session,
    candidate: Booking,
    replacing_id: int | None = None,
) -> Decision:
    """
    Whether `candidate` may be written.

    `replacing_id` is the booking being edited: it is left out of both the
    turnover snapshot and the capacity count.
    """
    config = get_hall_facility_config(db, candidate.hall_id)
    if config is None:
        raise LookupError(f"Hall {candidate.hall_id} not found")

    existing = list_hall_bookings(db, candidate.hall_id, candidate.date, exclude_id=replacing_id)
    day_type = get_day_type(db, candidate.date)

    decision = can_place_booking(config, day_type, existing, candidate)
    if decision.allowed:
        max_count = get_capacity(db, candidate.hall_id, candidate.date)
        decision = has_capacity(max_count, len(existing))

    if not decision.allowed:
        logger.info(
            f"Booking rejected: hall={candidate.hall_id} date={candidate.date} "
            f"type={candidate.slot_type.value} time={candidate.ceremony_time} "
            f"code={decision.code.value}"
        )
    return decision
