from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime
from typing import Callable, Iterable, List

from .catalog import OTHER, STATUS_CLOSED, STATUS_PROCESSING, normalize_status_input
from .config import SYSTEM_USER
from .models import ActionEntry, Incident, utc_now
from .serial_numbers import next_serial_number

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _clean_optional(value: str | None) -> str | None:
    text = str(value or "").strip()
    return text or None


def _default_status_note(status: str, started_now: bool) -> str:
    if status == STATUS_PROCESSING and started_now:
        return f"Incident processing started. Status: {status}"
    if status == STATUS_CLOSED:
        return f"Incident resolved. Status: {status}"
    return f"Status updated to {status}"


class IncidentStore:
    """
    In-memory owner of the incident collection.

    Records cross the boundary only as deep copies, in both directions, so a
    caller holding a returned record can never reach the stored one. There is no
    locking: one logical writer at a time is assumed.
    """

    def __init__(self, incidents: Iterable[Incident] | None = None, clock: Clock = utc_now) -> None:
        self._incidents: List[Incident] = [copy.deepcopy(item) for item in (incidents or [])]
        self._clock = clock

    def __len__(self) -> int:
        return len(self._incidents)

    def _find(self, incident_id: str) -> Incident | None:
        for incident in self._incidents:
            if incident.id == incident_id:
                return incident
        return None

    def list_all(self) -> List[Incident]:
        return [copy.deepcopy(item) for item in self._incidents]

    def get_by_id(self, incident_id: str) -> Incident | None:
        incident = self._find(incident_id)
        if incident is None:
            return None
        return copy.deepcopy(incident)

    def create(
        self,
        media_material: str,
        platform: str,
        description: str,
        reported_by: str,
        issue_link: str | None = None,
        screenshot_link: str | None = None,
        other_media_material: str | None = None,
        other_platform: str | None = None,
    ) -> Incident:
        serial = next_serial_number(media_material, platform, (item.serial_number for item in self._incidents))
        incident = Incident(
            id=uuid.uuid4().hex,
            serial_number=serial,
            received_at=self._clock(),
            media_material=media_material,
            platform=platform,
            description=str(description or "").strip(),
            reported_by=str(reported_by or "").strip(),
            issue_link=_clean_optional(issue_link),
            screenshot_link=_clean_optional(screenshot_link),
            other_media_material=_clean_optional(other_media_material) if media_material == OTHER else None,
            other_platform=_clean_optional(other_platform) if platform == OTHER else None,
        )
        self._incidents.insert(0, incident)
        logger.info("incident created serial=%s id=%s reported_by=%s", serial, incident.id, incident.reported_by)
        return copy.deepcopy(incident)

    def set_status(self, incident_id: str, status: str, note: str | None = None) -> Incident | None:
        """
        Move an incident to `status` and log the change as the system user.

        No ordering is enforced here; which transitions are offered is up to the
        caller. The first move into Processing stamps `started_processing_at`;
        every move into Closed restamps `closed_at`.
        """
        normalized = normalize_status_input(status)
        incident = self._find(incident_id)
        if incident is None:
            logger.warning("set_status on unknown incident id=%s", incident_id)
            return None

        now = self._clock()
        previous = incident.status
        started_now = False
        incident.status = normalized
        if normalized == STATUS_PROCESSING and incident.started_processing_at is None:
            incident.started_processing_at = now
            started_now = True
        elif normalized == STATUS_CLOSED:
            incident.closed_at = now

        description = str(note or "").strip() or _default_status_note(normalized, started_now)
        incident.actions_log.append(ActionEntry(timestamp=now, description=description, user=SYSTEM_USER))
        logger.info(
            "incident status serial=%s %s -> %s",
            incident.serial_number,
            previous,
            normalized,
        )
        return copy.deepcopy(incident)

    def add_action(self, incident_id: str, description: str, user: str) -> Incident | None:
        incident = self._find(incident_id)
        if incident is None:
            logger.warning("add_action on unknown incident id=%s", incident_id)
            return None

        entry = ActionEntry(timestamp=self._clock(), description=str(description), user=str(user))
        incident.actions_log.append(entry)
        logger.debug("incident action serial=%s user=%s", incident.serial_number, entry.user)
        return copy.deepcopy(incident)


_default_store: IncidentStore | None = None


def default_store() -> IncidentStore:
    global _default_store
    if _default_store is None:
        _default_store = IncidentStore()
    return _default_store


def reset_default_store(store: IncidentStore | None = None) -> IncidentStore:
    global _default_store
    _default_store = store if store is not None else IncidentStore()
    return _default_store
