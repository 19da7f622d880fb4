"""
handover/analytics/shift_clock.py
─────────────────────────────────
Shift calendar arithmetic on the facility wall clock.

  day        [06:00, 14:00)
  afternoon  [14:00, 22:00)
  night      [22:00, 06:00)   wraps midnight

A boundary hour belongs to the shift that starts at it. Every function is
total and deterministic for a given instant.
"""
from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from config.settings import settings
from config.shifts import SHIFT_ROTATION, SHIFT_START_HOURS, SHIFT_TIME_RANGES
from handover.data.models import Shift

_BOUNDARY_HOURS = sorted(SHIFT_START_HOURS.values())


@lru_cache(maxsize=8)
def _zone(name: str) -> tzinfo | None:
    return ZoneInfo(name) if name else None


def facility_now() -> datetime:
    """Current tz-aware instant on the facility wall clock."""
    zone = _zone(settings.FACILITY_TZ)
    if zone is None:
        return datetime.now().astimezone()
    return datetime.now(tz=zone)


def to_facility_time(t: datetime) -> datetime:
    """Express an aware instant in the facility zone; naive values pass through."""
    zone = _zone(settings.FACILITY_TZ)
    if zone is None or t.tzinfo is None:
        return t
    return t.astimezone(zone)


def current_shift(t: datetime | None = None) -> Shift:
    hour = to_facility_time(t or facility_now()).hour
    if SHIFT_START_HOURS["day"] <= hour < SHIFT_START_HOURS["afternoon"]:
        return Shift.DAY
    if SHIFT_START_HOURS["afternoon"] <= hour < SHIFT_START_HOURS["night"]:
        return Shift.AFTERNOON
    return Shift.NIGHT


def next_handover_time(t: datetime | None = None) -> datetime:
    """First shift boundary strictly after `t`."""
    local = to_facility_time(t or facility_now())
    for hour in _BOUNDARY_HOURS:
        if local.hour < hour:
            return local.replace(hour=hour, minute=0, second=0, microsecond=0)
    # Late night: the next boundary is the first one of the following day
    tomorrow = local + timedelta(days=1)
    return tomorrow.replace(hour=_BOUNDARY_HOURS[0], minute=0, second=0, microsecond=0)


def time_to_next_handover(t: datetime | None = None) -> timedelta:
    local = to_facility_time(t or facility_now())
    return next_handover_time(local) - local


def next_shift(shift: Shift) -> Shift:
    idx = SHIFT_ROTATION.index(Shift(shift).value)
    return Shift(SHIFT_ROTATION[(idx + 1) % len(SHIFT_ROTATION)])


def previous_shift(shift: Shift) -> Shift:
    idx = SHIFT_ROTATION.index(Shift(shift).value)
    return Shift(SHIFT_ROTATION[(idx - 1) % len(SHIFT_ROTATION)])


def shift_time_range(shift: Shift) -> str:
    return SHIFT_TIME_RANGES[Shift(shift).value]


def shift_name(shift: Shift) -> str:
    """Display name, e.g. "Afternoon Shift"."""
    return f"{Shift(shift).value.capitalize()} Shift"
