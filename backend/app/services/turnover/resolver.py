# backend/app/services/turnover/resolver.py
"""
Turnover constraint resolution.

Given a funeral start time, decide whether a wake may follow in the same
hall on the same day, and if so, from what time. Strict precedence, each
step short-circuits:

  1. funeral time unknown      → unconstrained
  2. exact-match override      → forbidden, or its min_wake_time
  3. funeral >= block_time     → forbidden
  4. interval fallback         → funeral + interval_hours
                                 (raised to wake_min_time when configured)

The same function serves both directions: "earliest wake for this funeral"
and "is this funeral compatible with an already booked wake" (the caller
compares the existing wake time against the returned minimum).
"""

from dataclasses import dataclass

from .config import FacilityTurnoverConfig, TurnoverRule, time_str_to_minutes


@dataclass(frozen=True)
class WakeConstraint:
    min_wake_minutes: int | None = None
    is_forbidden: bool = False
    matched_rule: TurnoverRule | None = None
    is_by_block_time: bool = False

    def permits(self, wake_minutes: int | None) -> bool:
        """Whether a wake at `wake_minutes` satisfies this constraint."""
        if self.is_forbidden:
            return False
        if self.min_wake_minutes is None or wake_minutes is None:
            return True
        return wake_minutes >= self.min_wake_minutes


UNCONSTRAINED = WakeConstraint()


def resolve_wake_constraint(
    config: FacilityTurnoverConfig,
    funeral_time: str | None,
) -> WakeConstraint:
    """Resolve the wake constraint for a funeral starting at `funeral_time`."""
    funeral_min = time_str_to_minutes(funeral_time)
    if funeral_min is None:
        return UNCONSTRAINED

    rule = config.find_rule(funeral_min)
    if rule is not None:
        if rule.is_forbidden:
            return WakeConstraint(is_forbidden=True, matched_rule=rule)
        return WakeConstraint(min_wake_minutes=rule.min_wake_minutes, matched_rule=rule)

    block_min = config.block_minutes
    if block_min is not None and funeral_min >= block_min:
        return WakeConstraint(is_forbidden=True, is_by_block_time=True)

    min_wake = funeral_min + config.interval_minutes
    floor = time_str_to_minutes(config.wake_min_time)
    if floor is not None:
        min_wake = max(min_wake, floor)

    return WakeConstraint(min_wake_minutes=min_wake)
