# backend/app/services/turnover/decision.py
"""
Result values shared by the feasibility checker and the capacity gate.

Expected domain conditions are never raised: every check answers with a
Decision, and the calling layer shows `reason` to the user verbatim.
"""

from dataclasses import dataclass
from enum import Enum


class RejectionCode(str, Enum):
    ALREADY_BOOKED = "already_booked"
    TOMOBIKI_RESTRICTION = "tomobiki_restriction"
    TURNOVER_FORBIDDEN = "turnover_forbidden"
    TURNOVER_TOO_SOON = "turnover_too_soon"
    NO_CAPACITY_CONFIGURED = "no_capacity_configured"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    CAPACITY_BELOW_BOOKINGS = "capacity_below_bookings"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None
    code: RejectionCode | None = None
    # Only set for TURNOVER_TOO_SOON: earliest admissible wake, "HH:MM"
    min_wake_time: str | None = None

    @classmethod
    def accept(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def reject(
        cls,
        code: RejectionCode,
        reason: str,
        min_wake_time: str | None = None,
    ) -> "Decision":
        return cls(allowed=False, reason=reason, code=code, min_wake_time=min_wake_time)

    def as_detail(self) -> dict:
        """Body for an HTTP rejection."""
        return {
            "code": self.code.value if self.code else None,
            "reason": self.reason,
            "min_wake_time": self.min_wake_time,
        }
