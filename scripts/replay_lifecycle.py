#!/usr/bin/env python3
from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mediascope.analytics import build_dashboard_summary
from mediascope.incident_store import IncidentStore
from mediascope.logging_setup import setup_logging
from mediascope.operations import close_incident, log_action_with_auto_transition


def main() -> None:
    setup_logging()
    store = IncidentStore()

    first = store.create("Video Clip", "SRSA Account on TikTok", "Clip re-uploaded without context.", "Monitor 1")
    second = store.create("Video Clip", "SRSA Account on TikTok", "Same clip, second account.", "Monitor 2")

    store.set_status(first.id, "Processing")
    log_action_with_auto_transition(store, second.id, "Requested takedown from platform.", "Analyst 1")
    close_incident(store, first.id, "Analyst 1")

    records = store.list_all()
    payload = {
        "incidents": [item.to_dict() for item in records],
        "summary": build_dashboard_summary(records),
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))


if __name__ == "__main__":
    main()
