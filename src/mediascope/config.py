from __future__ import annotations

import os
from datetime import tzinfo
from pathlib import Path
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = DATA_DIR / "output"
SNAPSHOT_PATH = OUTPUT_DIR / "incident_snapshot.json"

SERIAL_PREFIX = "BDM-"
SERIAL_WIDTH = 4
NOT_AVAILABLE = "N/A"
SYSTEM_USER = "System User"
DEFAULT_TOP_N = 5
ITEMS_PER_PAGE = 10
RECENT_INCIDENTS_LIMIT = 5
DAILY_BUCKET_MAX_DAYS = 90

DEFAULT_WEEKEND_DAYS: Tuple[int, ...] = (4, 5)
DEFAULT_TIMEZONE = "Asia/Riyadh"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "text"

WEEKDAY_NAMES = {
    "mon": 0,
    "tue": 1,
    "wed": 2,
    "thu": 3,
    "fri": 4,
    "sat": 5,
    "sun": 6,
}


def _parse_weekday(token: str) -> int | None:
    raw = token.strip().lower()
    if not raw:
        return None
    if raw.isdigit():
        value = int(raw)
        return value if 0 <= value <= 6 else None
    return WEEKDAY_NAMES.get(raw[:3])


def resolve_weekend_days(raw: str | None = None) -> Tuple[int, ...]:
    """
    Weekend days as Python weekday numbers (Monday == 0).

    Read from `MS_WEEKEND_DAYS`, e.g. `fri,sat` or `5,6`. Anything that does not
    parse cleanly falls back to Friday/Saturday.
    """
    value = raw if raw is not None else os.getenv("MS_WEEKEND_DAYS", "")
    if not str(value).strip():
        return DEFAULT_WEEKEND_DAYS

    days = []
    for token in str(value).split(","):
        parsed = _parse_weekday(token)
        if parsed is None:
            return DEFAULT_WEEKEND_DAYS
        if parsed not in days:
            days.append(parsed)
    if len(days) >= 7:
        return DEFAULT_WEEKEND_DAYS
    return tuple(sorted(days))


def resolve_timezone(name: str | None = None) -> tzinfo:
    raw = str(name or os.getenv("MS_TIMEZONE", DEFAULT_TIMEZONE)).strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def resolve_log_settings() -> Tuple[str, str]:
    level = os.getenv("MS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    fmt = os.getenv("MS_LOG_FORMAT", DEFAULT_LOG_FORMAT).strip().lower()
    if fmt not in {"text", "json"}:
        fmt = DEFAULT_LOG_FORMAT
    return level, fmt
