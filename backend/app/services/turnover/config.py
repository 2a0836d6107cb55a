# backend/app/services/turnover/config.py
"""
Facility turnover configuration and time-of-day encoding.

A facility controls how soon a wake (通夜) may follow a funeral (葬儀)
in the same hall on the same day with three parameters:

    rules           exact-time overrides, keyed by funeral time
    block_time      funerals at or after this time forbid any wake
    interval_hours  minimum gap between funeral start and wake start

Times are "HH:MM" strings at the edges and minute-of-day integers inside.
"""

import json
import re
from dataclasses import dataclass, field
from datetime import time

DEFAULT_INTERVAL_HOURS = 8

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


class TurnoverConfigError(ValueError):
    """Facility turnover configuration cannot be used (corrupt input)."""


def time_str_to_minutes(value) -> int | None:
    """
    Convert "HH:MM" (or "HH:MM:SS") to minutes since midnight.

    Returns None for None, empty or malformed input, never raises.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        return None

    match = _TIME_RE.match(value.strip())
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM" (hours past 23 are kept)."""
    hour, minute = divmod(minutes, 60)
    return f"{hour:02d}:{minute:02d}"


@dataclass(frozen=True)
class TurnoverRule:
    """
    One exact-time override.

    Attributes:
        funeral_time: Funeral start this rule applies to ("HH:MM")
        min_wake_time: Earliest wake start; ignored when is_forbidden
        is_forbidden: No wake at all that day in that hall
    """
    funeral_time: str
    min_wake_time: str | None = None
    is_forbidden: bool = False

    @property
    def funeral_minutes(self) -> int | None:
        return time_str_to_minutes(self.funeral_time)

    @property
    def min_wake_minutes(self) -> int | None:
        if self.is_forbidden:
            return None
        return time_str_to_minutes(self.min_wake_time)

    def to_record(self) -> dict:
        record = {"funeral_time": self.funeral_time, "is_forbidden": self.is_forbidden}
        if not self.is_forbidden:
            record["min_wake_time"] = self.min_wake_time
        return record


@dataclass(frozen=True)
class FacilityTurnoverConfig:
    """
    Turnover settings of one facility, immutable during a resolution.

    Attributes:
        rules: Exact-time overrides (order only matters for display)
        block_time: Hard cutoff for same-day turnover, or None
        interval_hours: Fallback gap, 0 means "same time or later"
        wake_min_time: Optional floor applied on top of the interval result
    """
    rules: tuple[TurnoverRule, ...] = field(default_factory=tuple)
    block_time: str | None = None
    interval_hours: int = DEFAULT_INTERVAL_HOURS
    wake_min_time: str | None = None

    def __post_init__(self):
        """Validate configuration."""
        if self.interval_hours is None or self.interval_hours < 0:
            raise TurnoverConfigError(
                f"interval_hours must be a non-negative integer, got {self.interval_hours!r}"
            )
        if self.block_time and time_str_to_minutes(self.block_time) is None:
            raise TurnoverConfigError(f"Invalid block_time: {self.block_time!r}")
        if self.wake_min_time and time_str_to_minutes(self.wake_min_time) is None:
            raise TurnoverConfigError(f"Invalid wake_min_time: {self.wake_min_time!r}")

        seen: dict[int, str] = {}
        for rule in self.rules:
            minutes = rule.funeral_minutes
            if minutes is None:
                raise TurnoverConfigError(f"Invalid funeral_time in rule: {rule.funeral_time!r}")
            if not rule.is_forbidden and rule.min_wake_minutes is None:
                raise TurnoverConfigError(
                    f"Rule for {rule.funeral_time} needs min_wake_time or is_forbidden"
                )
            if minutes in seen:
                raise TurnoverConfigError(
                    f"Duplicate turnover rule for {rule.funeral_time} "
                    f"(already defined as {seen[minutes]})"
                )
            seen[minutes] = rule.funeral_time

    @property
    def block_minutes(self) -> int | None:
        return time_str_to_minutes(self.block_time)

    @property
    def interval_minutes(self) -> int:
        return self.interval_hours * 60

    def find_rule(self, funeral_minutes: int) -> TurnoverRule | None:
        """Exact-match lookup by minute value, so "9:00" finds "09:00"."""
        for rule in self.rules:
            if rule.funeral_minutes == funeral_minutes:
                return rule
        return None

    def rules_to_json(self) -> str:
        return json.dumps([r.to_record() for r in self.rules], ensure_ascii=False)

    @classmethod
    def from_records(
        cls,
        rules,
        block_time: str | None = None,
        interval_hours: int | None = None,
        wake_min_time: str | None = None,
    ) -> "FacilityTurnoverConfig":
        """
        Build a config from stored values.

        `rules` may be the JSON text of the facilities.turnover_rules column
        or an already decoded list of dicts. Rules are sorted by funeral time.
        """
        if isinstance(rules, str):
            try:
                rules = json.loads(rules) if rules.strip() else []
            except json.JSONDecodeError as e:
                raise TurnoverConfigError(f"turnover_rules is not valid JSON: {e}") from e
        rules = rules or []
        if not isinstance(rules, list):
            raise TurnoverConfigError("turnover_rules must be a list")

        parsed = []
        for item in rules:
            if isinstance(item, TurnoverRule):
                parsed.append(item)
                continue
            if not isinstance(item, dict) or "funeral_time" not in item:
                raise TurnoverConfigError(f"Malformed turnover rule: {item!r}")
            parsed.append(TurnoverRule(
                funeral_time=item["funeral_time"],
                min_wake_time=item.get("min_wake_time") or None,
                is_forbidden=bool(item.get("is_forbidden", False)),
            ))

        parsed.sort(key=lambda r: r.funeral_minutes if r.funeral_minutes is not None else -1)

        return cls(
            rules=tuple(parsed),
            block_time=block_time or None,
            interval_hours=DEFAULT_INTERVAL_HOURS if interval_hours is None else interval_hours,
            wake_min_time=wake_min_time or None,
        )
