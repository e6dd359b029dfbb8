from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mediascope.catalog import (
    MEDIA_MATERIAL_CODES,
    MEDIA_MATERIAL_OPTIONS,
    PLATFORM_CODES,
    PLATFORM_OPTIONS,
)
from mediascope.incident_store import IncidentStore
from mediascope.serial_numbers import next_serial_number, serial_prefix

VIDEO = "Video Clip"
INTERNATIONAL = "International Media Channel/Platform"


class TestSerialNumbers(unittest.TestCase):
    def test_code_tables_cover_every_option(self) -> None:
        self.assertEqual(set(MEDIA_MATERIAL_CODES), set(MEDIA_MATERIAL_OPTIONS))
        self.assertEqual(set(PLATFORM_CODES), set(PLATFORM_OPTIONS))
        self.assertEqual(len(set(MEDIA_MATERIAL_CODES.values())), len(MEDIA_MATERIAL_CODES))
        self.assertEqual(len(set(PLATFORM_CODES.values())), len(PLATFORM_CODES))

    def test_prefix(self) -> None:
        self.assertEqual(serial_prefix(VIDEO, INTERNATIONAL), "BDM-VN")
        self.assertEqual(serial_prefix("Other", "Other"), "BDM-ZY")

    def test_unmapped_categories_fall_back(self) -> None:
        self.assertEqual(next_serial_number("Podcast", "Radio", []), "BDM-ZY0001")

    def test_first_serial_for_prefix(self) -> None:
        self.assertEqual(next_serial_number(VIDEO, INTERNATIONAL, ["BDM-PC0004"]), "BDM-VN0001")

    def test_next_is_max_plus_one(self) -> None:
        existing = ["BDM-VN0001", "BDM-VN0007", "BDM-VC0009", "BDM-VN0003"]
        self.assertEqual(next_serial_number(VIDEO, INTERNATIONAL, existing), "BDM-VN0008")

    def test_unparseable_suffixes_are_ignored(self) -> None:
        existing = ["BDM-VNabcd", "BDM-VN0002", "BDM-VN"]
        self.assertEqual(next_serial_number(VIDEO, INTERNATIONAL, existing), "BDM-VN0003")

    def test_only_plain_digit_suffixes_count(self) -> None:
        existing = ["BDM-VN1_000", "BDM-VN+0050", "BDM-VN 0060", "BDM-VN-0070", "BDM-VN0004"]
        self.assertEqual(next_serial_number(VIDEO, INTERNATIONAL, existing), "BDM-VN0005")

    def test_sequence_widens_past_four_digits(self) -> None:
        self.assertEqual(next_serial_number(VIDEO, INTERNATIONAL, ["BDM-VN9999"]), "BDM-VN10000")

    def test_store_assigns_consecutive_serials(self) -> None:
        store = IncidentStore()
        serials = [store.create(VIDEO, INTERNATIONAL, f"clip {i}", "tester").serial_number for i in range(5)]
        store.create("GIF", "SRSA Website", "unrelated", "tester")
        serials.append(store.create(VIDEO, INTERNATIONAL, "clip 6", "tester").serial_number)

        suffixes = [int(serial[len("BDM-VN"):]) for serial in serials]
        self.assertEqual(suffixes, [1, 2, 3, 4, 5, 6])
        self.assertEqual(len(set(serials)), len(serials))


if __name__ == "__main__":
    unittest.main()
