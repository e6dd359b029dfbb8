from __future__ import annotations

import re
from typing import Iterable

from .catalog import material_code, platform_code
from .config import SERIAL_PREFIX, SERIAL_WIDTH

SEQUENCE_PATTERN = re.compile(r"[0-9]+")


def serial_prefix(media_material: str, platform: str) -> str:
    return f"{SERIAL_PREFIX}{material_code(media_material)}{platform_code(platform)}"


def _sequence_suffix(serial: str, prefix: str) -> int | None:
    suffix = serial[len(prefix):]
    if not SEQUENCE_PATTERN.fullmatch(suffix):
        return None
    return int(suffix)


def next_serial_number(media_material: str, platform: str, existing_serials: Iterable[str]) -> str:
    """
    Next serial for the material/platform pair, e.g. `BDM-VN0003`.

    Recomputed from the serials passed in on every call. Suffixes that are not
    plain ASCII digits are ignored. Sequences past 9999 widen instead of wrapping.
    """
    prefix = serial_prefix(media_material, platform)
    numbers = []
    for serial in existing_serials:
        serial = str(serial or "")
        if not serial.startswith(prefix):
            continue
        parsed = _sequence_suffix(serial, prefix)
        if parsed is not None:
            numbers.append(parsed)

    next_number = (max(numbers) if numbers else 0) + 1
    return f"{prefix}{next_number:0{SERIAL_WIDTH}d}"
