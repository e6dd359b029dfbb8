from __future__ import annotations

import calendar
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .catalog import OPEN_STATUSES, STATUS_CLOSED, STATUS_NEW, STATUS_ORDER
from .config import DAILY_BUCKET_MAX_DAYS, DEFAULT_TOP_N, NOT_AVAILABLE, resolve_timezone
from .models import Incident, utc_now
from .working_time import format_duration, to_zone, working_duration

DATE_FILTER_KINDS = ("allTime", "daily", "monthly", "yearly", "period")


def _weekend_tuple(weekend_days: Iterable[int] | None) -> Tuple[int, ...] | None:
    return tuple(weekend_days) if weekend_days is not None else None


def _mean_duration(durations: Sequence[timedelta]) -> str:
    if not durations:
        return NOT_AVAILABLE
    total = sum(durations, timedelta(0))
    return format_duration(total / len(durations))


def average_processing_time(records: Iterable[Incident], weekend_days: Iterable[int] | None = None, tz: tzinfo | None = None) -> str:
    weekend_days = _weekend_tuple(weekend_days)
    durations = [
        working_duration(item.received_at, item.started_processing_at, weekend_days=weekend_days, tz=tz)
        for item in records
        if item.started_processing_at is not None and item.status != STATUS_NEW
    ]
    return _mean_duration(durations)


def average_resolution_time(records: Iterable[Incident], weekend_days: Iterable[int] | None = None, tz: tzinfo | None = None) -> str:
    weekend_days = _weekend_tuple(weekend_days)
    durations = [
        working_duration(item.received_at, item.closed_at, weekend_days=weekend_days, tz=tz)
        for item in records
        if item.status == STATUS_CLOSED and item.closed_at is not None
    ]
    return _mean_duration(durations)


def resolution_rate(records: Iterable[Incident]) -> str:
    rows = list(records)
    if not rows:
        return NOT_AVAILABLE
    closed = sum(1 for item in rows if item.status == STATUS_CLOSED)
    return f"{(closed / len(rows)) * 100.0:.1f}%"


def oldest_open_incident_age(
    records: Iterable[Incident],
    now: datetime | None = None,
    weekend_days: Iterable[int] | None = None,
    tz: tzinfo | None = None,
) -> str:
    open_rows = [item for item in records if item.status in OPEN_STATUSES]
    if not open_rows:
        return NOT_AVAILABLE
    oldest = min(open_rows, key=lambda item: item.received_at)
    now = now or utc_now()
    weekend_days = _weekend_tuple(weekend_days)
    return format_duration(working_duration(oldest.received_at, now, weekend_days=weekend_days, tz=tz))


def _top_counts(values: Iterable[str], n: int) -> List[Dict[str, object]]:
    counts = Counter(values)
    # sorted() is stable, so equal counts keep first-seen order.
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [{"name": name, "count": int(count)} for name, count in ranked[: max(0, int(n))]]


def top_media_materials(records: Iterable[Incident], n: int = DEFAULT_TOP_N) -> List[Dict[str, object]]:
    return _top_counts((item.media_material for item in records), n)


def top_media_platforms(records: Iterable[Incident], n: int = DEFAULT_TOP_N) -> List[Dict[str, object]]:
    return _top_counts((item.platform for item in records), n)


def status_counts(records: Iterable[Incident]) -> Dict[str, int]:
    rows = list(records)
    counts: Dict[str, int] = {"total": len(rows)}
    for status in STATUS_ORDER:
        counts[status] = sum(1 for item in rows if item.status == status)
    return counts


def build_dashboard_summary(
    records: Iterable[Incident],
    now: datetime | None = None,
    top_n: int = DEFAULT_TOP_N,
    weekend_days: Iterable[int] | None = None,
    tz: tzinfo | None = None,
) -> Dict[str, object]:
    rows = list(records)
    now = now or utc_now()
    weekend_days = _weekend_tuple(weekend_days)
    return {
        "generated_at_utc": now.isoformat(),
        "counts": status_counts(rows),
        "average_processing_time": average_processing_time(rows, weekend_days=weekend_days, tz=tz),
        "average_resolution_time": average_resolution_time(rows, weekend_days=weekend_days, tz=tz),
        "resolution_rate": resolution_rate(rows),
        "oldest_open_incident_age": oldest_open_incident_age(rows, now=now, weekend_days=weekend_days, tz=tz),
        "top_media_materials": top_media_materials(rows, top_n),
        "top_media_platforms": top_media_platforms(rows, top_n),
    }


@dataclass
class DateFilter:
    """Dashboard time window. `month` is 1-12."""

    kind: str = "allTime"
    day: Optional[date] = None
    month: Optional[int] = None
    year: Optional[int] = None
    start: Optional[date] = None
    end: Optional[date] = None

    def validate(self) -> None:
        if self.kind not in DATE_FILTER_KINDS:
            raise ValueError(f"invalid date filter: {self.kind}")
        if self.kind == "daily" and self.day is None:
            raise ValueError("daily filter needs a day")
        if self.kind == "monthly":
            if self.year is None or self.month is None or not 1 <= int(self.month) <= 12:
                raise ValueError("monthly filter needs a year and a month between 1 and 12")
        if self.kind == "yearly" and self.year is None:
            raise ValueError("yearly filter needs a year")
        if self.kind == "period":
            if self.start is None or self.end is None:
                raise ValueError("period filter needs start and end dates")
            if self.end < self.start:
                raise ValueError("end date cannot be before start date")


def _received_day(item: Incident, zone: tzinfo) -> date:
    return to_zone(item.received_at, zone).date()  # type: ignore[union-attr]


def _window(date_filter: DateFilter, days: Sequence[date]) -> Tuple[date, date, str] | None:
    kind = date_filter.kind
    if kind == "daily":
        return date_filter.day, date_filter.day, "day"  # type: ignore[return-value]
    if kind == "monthly":
        year, month = int(date_filter.year), int(date_filter.month)  # type: ignore[arg-type]
        last = calendar.monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last), "day"
    if kind == "yearly":
        year = int(date_filter.year)  # type: ignore[arg-type]
        return date(year, 1, 1), date(year, 12, 31), "month"
    if kind == "period":
        start, end = date_filter.start, date_filter.end
    else:
        if not days:
            return None
        start, end = min(days), max(days)
    granularity = "day" if (end - start).days <= DAILY_BUCKET_MAX_DAYS else "month"  # type: ignore[operator]
    return start, end, granularity  # type: ignore[return-value]


def filter_by_received_date(
    records: Iterable[Incident],
    date_filter: DateFilter | None = None,
    tz: tzinfo | None = None,
) -> List[Incident]:
    date_filter = date_filter or DateFilter()
    date_filter.validate()
    rows = list(records)
    if date_filter.kind == "allTime":
        return rows
    zone = tz or resolve_timezone()
    window = _window(date_filter, [])
    if window is None:
        return rows
    start, end, _ = window
    return [item for item in rows if start <= _received_day(item, zone) <= end]


def _period_label(stamp: pd.Timestamp, granularity: str) -> str:
    if granularity == "month":
        return stamp.strftime("%b %Y")
    return f"{stamp.strftime('%b')} {stamp.day}"


def incidents_over_time(
    records: Iterable[Incident],
    date_filter: DateFilter | None = None,
    tz: tzinfo | None = None,
) -> pd.DataFrame:
    """
    Incident counts per day or month by local received date.

    Buckets inside the window are zero-filled. Windows longer than 90 days
    (and yearly filters) are bucketed by month.
    """
    date_filter = date_filter or DateFilter()
    date_filter.validate()
    zone = tz or resolve_timezone()
    days = [_received_day(item, zone) for item in records]

    window = _window(date_filter, days)
    if window is None:
        return pd.DataFrame(columns=["period", "label", "count"])
    start, end, granularity = window

    in_window = [day for day in days if start <= day <= end]
    if granularity == "day":
        counts = Counter(in_window)
        index = pd.date_range(start, end, freq="D")
    else:
        counts = Counter(day.replace(day=1) for day in in_window)
        index = pd.date_range(start.replace(day=1), end, freq="MS")

    return pd.DataFrame(
        {
            "period": index,
            "label": [_period_label(stamp, granularity) for stamp in index],
            "count": [int(counts.get(stamp.date(), 0)) for stamp in index],
        }
    )
