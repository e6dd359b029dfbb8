from __future__ import annotations

import sys
import unittest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mediascope.analytics import (
    DateFilter,
    average_processing_time,
    average_resolution_time,
    build_dashboard_summary,
    filter_by_received_date,
    incidents_over_time,
    oldest_open_incident_age,
    resolution_rate,
    status_counts,
    top_media_materials,
    top_media_platforms,
)
from mediascope.models import Incident

UTC = timezone.utc
FRI_SAT = (4, 5)
_counter = 0


def at(day: int, hour: int = 0, month: int = 1) -> datetime:
    return datetime(2024, month, day, hour, tzinfo=UTC)


def make_incident(
    received: datetime,
    status: str = "New",
    started: datetime | None = None,
    closed: datetime | None = None,
    material: str = "Image",
    platform: str = "SRSA Website",
) -> Incident:
    global _counter
    _counter += 1
    return Incident(
        id=str(_counter),
        serial_number=f"BDM-XX{_counter:04d}",
        received_at=received,
        started_processing_at=started,
        closed_at=closed,
        status=status,
        media_material=material,
        platform=platform,
        description="test",
        reported_by="tester",
    )


class TestAggregates(unittest.TestCase):
    def test_empty_snapshot(self) -> None:
        self.assertEqual(average_processing_time([]), "N/A")
        self.assertEqual(average_resolution_time([]), "N/A")
        self.assertEqual(resolution_rate([]), "N/A")
        self.assertEqual(oldest_open_incident_age([]), "N/A")
        self.assertEqual(top_media_materials([], 5), [])
        self.assertEqual(top_media_platforms([], 5), [])

    def test_average_processing_time(self) -> None:
        records = [
            make_incident(at(1, 8), "Processing", started=at(1, 10)),
            make_incident(at(2, 8), "Closed", started=at(2, 12), closed=at(3, 8)),
            # Not counted: still New, or never started.
            make_incident(at(1, 8), "New", started=at(1, 20)),
            make_incident(at(1, 8), "Closed", closed=at(1, 9)),
        ]
        self.assertEqual(average_processing_time(records, weekend_days=FRI_SAT, tz=UTC), "3h")

    def test_average_processing_time_skips_weekend(self) -> None:
        # Thursday 20:00 -> Sunday 04:00 is 8 working hours.
        records = [make_incident(at(4, 20), "Processing", started=at(7, 4))]
        self.assertEqual(average_processing_time(records, weekend_days=FRI_SAT, tz=UTC), "8h")

    def test_weekend_days_may_be_a_generator(self) -> None:
        records = [
            make_incident(at(4, 20), "Closed", started=at(7, 4), closed=at(7, 4)),
            make_incident(at(4, 20), "Closed", started=at(7, 4), closed=at(7, 4)),
        ]
        weekend = (day for day in FRI_SAT)
        self.assertEqual(average_processing_time(records, weekend_days=weekend, tz=UTC), "8h")
        weekend = (day for day in FRI_SAT)
        self.assertEqual(average_resolution_time(records, weekend_days=weekend, tz=UTC), "8h")
        summary = build_dashboard_summary(records, now=at(7, 4), weekend_days=(day for day in FRI_SAT), tz=UTC)
        self.assertEqual(summary["average_processing_time"], "8h")
        self.assertEqual(summary["average_resolution_time"], "8h")

    def test_average_resolution_time(self) -> None:
        records = [
            make_incident(at(1, 0), "Closed", closed=at(2, 2)),
            make_incident(at(1, 0), "Processing", closed=at(3, 0)),
            make_incident(at(1, 0), "Closed"),
        ]
        self.assertEqual(average_resolution_time(records, weekend_days=FRI_SAT, tz=UTC), "1d 2h")

    def test_resolution_rate(self) -> None:
        records = [
            make_incident(at(1), "Closed", closed=at(2)),
            make_incident(at(1), "New"),
            make_incident(at(1), "Processing", started=at(2)),
        ]
        self.assertEqual(resolution_rate(records), "33.3%")
        self.assertEqual(resolution_rate(records[:1]), "100.0%")

    def test_oldest_open_incident_age(self) -> None:
        records = [
            make_incident(at(3, 0), "New"),
            make_incident(at(2, 0), "Processing", started=at(2, 5)),
            make_incident(at(1, 0), "Closed", closed=at(1, 5)),
        ]
        age = oldest_open_incident_age(records, now=at(3, 6), weekend_days=FRI_SAT, tz=UTC)
        self.assertEqual(age, "1d 6h")

    def test_top_lists_rank_with_stable_ties(self) -> None:
        materials = ["Image", "Video Clip", "Video Clip", "Image", "GIF"]
        platforms = ["SRSA Website", "Other", "Other", "Other", "SRSA Website"]
        records = [make_incident(at(1), material=m, platform=p) for m, p in zip(materials, platforms)]

        self.assertEqual(
            top_media_materials(records, 5),
            [{"name": "Image", "count": 2}, {"name": "Video Clip", "count": 2}, {"name": "GIF", "count": 1}],
        )
        self.assertEqual(top_media_materials(records, 1), [{"name": "Image", "count": 2}])
        self.assertEqual(top_media_platforms(records, 5)[0], {"name": "Other", "count": 3})

    def test_status_counts_and_summary(self) -> None:
        records = [
            make_incident(at(1), "New"),
            make_incident(at(1), "Processing", started=at(1, 4)),
            make_incident(at(1), "Closed", started=at(1, 2), closed=at(2)),
        ]
        self.assertEqual(status_counts(records), {"total": 3, "New": 1, "Processing": 1, "Closed": 1})

        summary = build_dashboard_summary(records, now=at(2, 12), weekend_days=FRI_SAT, tz=UTC)
        self.assertEqual(summary["resolution_rate"], "33.3%")
        self.assertEqual(summary["average_processing_time"], "3h")
        self.assertEqual(summary["average_resolution_time"], "1d")
        self.assertEqual(summary["oldest_open_incident_age"], "1d 12h")


class TestIncidentsOverTime(unittest.TestCase):
    def setUp(self) -> None:
        self.records = [
            make_incident(at(3, 10)),
            make_incident(at(3, 14)),
            make_incident(at(20, 9)),
            make_incident(at(5, 9, month=3)),
        ]

    def test_monthly_filter_buckets_by_day(self) -> None:
        frame = incidents_over_time(self.records, DateFilter(kind="monthly", year=2024, month=1), tz=UTC)
        self.assertEqual(len(frame), 31)
        self.assertEqual(list(frame.columns), ["period", "label", "count"])
        self.assertEqual(int(frame["count"].sum()), 3)
        self.assertEqual(int(frame.loc[2, "count"]), 2)
        self.assertEqual(frame.loc[2, "label"], "Jan 3")

    def test_yearly_filter_buckets_by_month(self) -> None:
        frame = incidents_over_time(self.records, DateFilter(kind="yearly", year=2024), tz=UTC)
        self.assertEqual(len(frame), 12)
        self.assertEqual(frame["count"].tolist()[:3], [3, 0, 1])
        self.assertEqual(frame.loc[0, "label"], "Jan 2024")

    def test_long_period_switches_to_months(self) -> None:
        short = incidents_over_time(self.records, DateFilter(kind="period", start=date(2024, 1, 1), end=date(2024, 1, 10)), tz=UTC)
        self.assertEqual(len(short), 10)
        self.assertEqual(int(short["count"].sum()), 2)

        long = incidents_over_time(self.records, DateFilter(kind="period", start=date(2024, 1, 1), end=date(2024, 6, 30)), tz=UTC)
        self.assertEqual(len(long), 6)
        self.assertEqual(int(long["count"].sum()), 4)

    def test_daily_filter_is_single_row(self) -> None:
        frame = incidents_over_time(self.records, DateFilter(kind="daily", day=date(2024, 1, 3)), tz=UTC)
        self.assertEqual(len(frame), 1)
        self.assertEqual(int(frame.loc[0, "count"]), 2)

    def test_all_time_spans_records(self) -> None:
        frame = incidents_over_time(self.records, tz=UTC)
        self.assertEqual(frame.loc[0, "label"], "Jan 3")
        self.assertEqual(int(frame["count"].sum()), 4)
        self.assertTrue(incidents_over_time([], tz=UTC).empty)

    def test_invalid_filters_raise(self) -> None:
        with self.assertRaises(ValueError):
            incidents_over_time(self.records, DateFilter(kind="period", start=date(2024, 2, 1), end=date(2024, 1, 1)))
        with self.assertRaises(ValueError):
            incidents_over_time(self.records, DateFilter(kind="weekly"))
        with self.assertRaises(ValueError):
            incidents_over_time(self.records, DateFilter(kind="monthly", year=2024, month=13))

    def test_filter_by_received_date(self) -> None:
        january = filter_by_received_date(self.records, DateFilter(kind="monthly", year=2024, month=1), tz=UTC)
        self.assertEqual(len(january), 3)
        self.assertEqual(len(filter_by_received_date(self.records, tz=UTC)), 4)

    def test_naive_received_times_are_utc(self) -> None:
        # 22:30Z on the 4th falls on the 5th in Riyadh.
        riyadh = ZoneInfo("Asia/Riyadh")
        record = make_incident(datetime(2024, 1, 4, 22, 30))
        fifth = filter_by_received_date([record], DateFilter(kind="daily", day=date(2024, 1, 5)), tz=riyadh)
        self.assertEqual(len(fifth), 1)
        frame = incidents_over_time([record], DateFilter(kind="daily", day=date(2024, 1, 4)), tz=riyadh)
        self.assertEqual(int(frame.loc[0, "count"]), 0)


if __name__ == "__main__":
    unittest.main()
