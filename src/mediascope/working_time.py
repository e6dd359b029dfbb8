from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, Tuple

import numpy as np

from .config import resolve_timezone, resolve_weekend_days
from .models import parse_iso_datetime

ZERO = timedelta(0)
FULL_DAY = timedelta(hours=24)


def _weekmask(weekend_days: Iterable[int]) -> str:
    weekend = set(weekend_days)
    return "".join("0" if day in weekend else "1" for day in range(7))


def to_zone(value: object, tz: tzinfo) -> datetime | None:
    """
    Aware datetime for `value` expressed in `tz`, or None when it cannot be read.

    Strings are parsed as ISO-8601. Naive values are taken as UTC, the same
    rule the incident records use.
    """
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return None
    return parsed.astimezone(tz)


def _elapsed(start: datetime, end: datetime) -> timedelta:
    # Aware values sharing a tzinfo subtract as wall-clock time; UTC does not.
    return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)


def _midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _resolve(weekend_days: Iterable[int] | None, tz: tzinfo | None) -> Tuple[Tuple[int, ...], tzinfo]:
    days = tuple(weekend_days) if weekend_days is not None else resolve_weekend_days()
    return days, tz if tz is not None else resolve_timezone()


def is_working_day(day: date, weekend_days: Iterable[int] | None = None) -> bool:
    days = tuple(weekend_days) if weekend_days is not None else resolve_weekend_days()
    return day.weekday() not in days


def working_duration(
    start: object,
    end: object,
    weekend_days: Iterable[int] | None = None,
    tz: tzinfo | None = None,
) -> timedelta:
    """
    Elapsed time between `start` and `end`, skipping weekend days.

    Calendar days are taken in `tz`. Whole working days in between count at
    full 24h weight; the first and last calendar days contribute the real
    elapsed time inside the interval. Invalid or inverted intervals give zero.
    """
    days, zone = _resolve(weekend_days, tz)
    local_start = to_zone(start, zone)
    local_end = to_zone(end, zone)
    if local_start is None or local_end is None or _elapsed(local_start, local_end) <= ZERO:
        return ZERO
    if len(set(days)) >= 7:
        return ZERO

    start_day = local_start.date()
    end_day = local_end.date()

    if start_day == end_day:
        return _elapsed(local_start, local_end) if is_working_day(start_day, days) else ZERO

    total = ZERO
    next_day = start_day + timedelta(days=1)
    if is_working_day(start_day, days):
        total += _elapsed(local_start, _midnight(next_day, zone))

    if next_day < end_day:
        whole_days = int(np.busday_count(next_day, end_day, weekmask=_weekmask(days)))
        total += whole_days * FULL_DAY

    if is_working_day(end_day, days):
        total += _elapsed(_midnight(end_day, zone), local_end)

    return max(total, ZERO)


def format_duration(value: timedelta | float | int) -> str:
    """Render a duration as `"{days}d {hours}h"`, dropping minutes."""
    seconds = value.total_seconds() if isinstance(value, timedelta) else float(value)
    if math.isnan(seconds) or seconds < 0:
        seconds = 0.0

    total_hours = int(seconds // 3600)
    days, hours = divmod(total_hours, 24)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0 or days == 0:
        parts.append(f"{hours}h")
    return " ".join(parts) or "0h"
