from __future__ import annotations

import logging

from .catalog import STATUS_CLOSED, STATUS_NEW, STATUS_PROCESSING
from .incident_store import IncidentStore
from .models import Incident

logger = logging.getLogger(__name__)


def log_action_with_auto_transition(
    store: IncidentStore,
    incident_id: str,
    description: str,
    user: str,
    note: str | None = None,
) -> Incident | None:
    """
    Log an action and, when it is the first touch on a New incident, move it
    to Processing.

    The store keeps actions and status changes independent; this is the one
    place the two are coupled.
    """
    text = str(description or "").strip()
    if not text:
        raise ValueError("action description is required")

    current = store.get_by_id(incident_id)
    if current is None:
        return None

    updated = store.add_action(incident_id, text, user)
    if updated is None:
        return None

    if current.status == STATUS_NEW:
        logger.info("auto transition serial=%s New -> Processing", current.serial_number)
        return store.set_status(
            incident_id,
            STATUS_PROCESSING,
            note or f"Processing started after first action by {user}.",
        )
    return updated


def close_incident(store: IncidentStore, incident_id: str, user: str) -> Incident | None:
    current = store.get_by_id(incident_id)
    if current is None:
        return None
    if current.status == STATUS_CLOSED:
        return current
    return store.set_status(incident_id, STATUS_CLOSED, f"Incident closed by {user}.")
