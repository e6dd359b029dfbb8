from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .catalog import STATUS_ORDER
from .config import ITEMS_PER_PAGE
from .models import ActionEntry, Incident

STATUS_RANK = {status: index for index, status in enumerate(STATUS_ORDER)}


@dataclass
class TicketFilters:
    status: str = ""
    media_material: str = ""
    platform: str = ""
    search: str = ""
    include_reporter: bool = False


def _matches_search(item: Incident, needle: str, include_reporter: bool) -> bool:
    haystack = [item.serial_number, item.description, item.platform, item.media_material]
    if include_reporter:
        haystack.append(item.reported_by)
    return any(needle in str(value or "").lower() for value in haystack)


def filter_incidents(records: Iterable[Incident], filters: TicketFilters | None = None) -> List[Incident]:
    filters = filters or TicketFilters()
    needle = filters.search.strip().lower()
    rows = []
    for item in records:
        if filters.status and item.status != filters.status:
            continue
        if filters.media_material and item.media_material != filters.media_material:
            continue
        if filters.platform and item.platform != filters.platform:
            continue
        if needle and not _matches_search(item, needle, filters.include_reporter):
            continue
        rows.append(item)
    return rows


def sort_newest_first(records: Iterable[Incident]) -> List[Incident]:
    return sorted(records, key=lambda item: item.received_at, reverse=True)


def sort_for_operation_room(records: Iterable[Incident]) -> List[Incident]:
    """Open work first (New, then Processing, then Closed), newest first within a status."""
    newest = sort_newest_first(records)
    return sorted(newest, key=lambda item: STATUS_RANK.get(item.status, len(STATUS_RANK)))


def paginate(records: List[Incident], page: int, per_page: int = ITEMS_PER_PAGE) -> Tuple[List[Incident], int]:
    per_page = max(1, int(per_page))
    total_pages = math.ceil(len(records) / per_page)
    if total_pages == 0:
        return [], 0
    page = min(max(1, int(page)), total_pages)
    start = (page - 1) * per_page
    return records[start : start + per_page], total_pages


def actions_newest_first(incident: Incident) -> List[ActionEntry]:
    return list(reversed(incident.actions_log))
