#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mediascope.analytics import build_dashboard_summary
from mediascope.catalog import list_category_codes
from mediascope.config import DEFAULT_TOP_N, SNAPSHOT_PATH, resolve_timezone, resolve_weekend_days
from mediascope.demo_data import build_demo_store
from mediascope.logging_setup import setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Print dashboard statistics for the demo incident set")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP_N)
    parser.add_argument("--weekend-days", default="", help="e.g. fri,sat or 5,6")
    parser.add_argument("--timezone", default="")
    parser.add_argument("--codes", action="store_true", help="include the category code tables")
    parser.add_argument("--write", action="store_true", help=f"also write the payload to {SNAPSHOT_PATH}")
    args = parser.parse_args()

    setup_logging()
    store = build_demo_store()
    records = store.list_all()
    payload = build_dashboard_summary(
        records,
        top_n=args.top,
        weekend_days=resolve_weekend_days(args.weekend_days or None),
        tz=resolve_timezone(args.timezone or None),
    )
    if args.codes:
        payload["category_codes"] = list_category_codes()

    output = json.dumps(payload, ensure_ascii=True, indent=2)
    if args.write:
        SNAPSHOT_PATH.parent.mkdir(parents=True, exist_ok=True)
        SNAPSHOT_PATH.write_text(output + "\n", encoding="utf-8")
    print(output)


if __name__ == "__main__":
    main()
