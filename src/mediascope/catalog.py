from __future__ import annotations

from typing import Dict, List

MEDIA_MATERIAL_OPTIONS = (
    "Press Release",
    "Legal Document",
    "Infographic",
    "Image",
    "Video Clip",
    "Audio Clip",
    "GIF",
    "Other",
)

PLATFORM_OPTIONS = (
    "Umm Al-Qura Newspaper",
    "Local Media Channel/Platform",
    "International Media Channel/Platform",
    "SRSA Website",
    "Unified Platform",
    "SRSA Account on Platform X",
    "SRSA Account on Instagram",
    "SRSA Account on TikTok",
    "SRSA Account on LinkedIn",
    "Other",
)

MEDIA_MATERIAL_CODES: Dict[str, str] = {
    "Press Release": "P",
    "Legal Document": "L",
    "Infographic": "F",
    "Image": "M",
    "Video Clip": "V",
    "Audio Clip": "A",
    "GIF": "G",
    "Other": "Z",
}

PLATFORM_CODES: Dict[str, str] = {
    "Umm Al-Qura Newspaper": "U",
    "Local Media Channel/Platform": "C",
    "International Media Channel/Platform": "N",
    "SRSA Website": "S",
    "Unified Platform": "P",
    "SRSA Account on Platform X": "X",
    "SRSA Account on Instagram": "I",
    "SRSA Account on TikTok": "T",
    "SRSA Account on LinkedIn": "K",
    "Other": "Y",
}

FALLBACK_MATERIAL_CODE = "Z"
FALLBACK_PLATFORM_CODE = "Y"
OTHER = "Other"

STATUS_NEW = "New"
STATUS_PROCESSING = "Processing"
STATUS_CLOSED = "Closed"
STATUS_ORDER = [STATUS_NEW, STATUS_PROCESSING, STATUS_CLOSED]
INCIDENT_STATUSES = set(STATUS_ORDER)
OPEN_STATUSES = {STATUS_NEW, STATUS_PROCESSING}

STATUS_DISPLAY = {
    STATUS_NEW: "New",
    STATUS_PROCESSING: "Processing",
    STATUS_CLOSED: "Resolved",
}

STATUS_ALIASES = {
    "new": STATUS_NEW,
    "open": STATUS_NEW,
    "processing": STATUS_PROCESSING,
    "in progress": STATUS_PROCESSING,
    "in-progress": STATUS_PROCESSING,
    "start": STATUS_PROCESSING,
    "closed": STATUS_CLOSED,
    "close": STATUS_CLOSED,
    "resolved": STATUS_CLOSED,
    "done": STATUS_CLOSED,
}


def _check_exhaustive(name: str, options: tuple, codes: Dict[str, str]) -> None:
    missing = [option for option in options if option not in codes]
    extra = [key for key in codes if key not in options]
    if missing or extra:
        raise RuntimeError(f"{name} code table out of sync: missing={missing} extra={extra}")


_check_exhaustive("media material", MEDIA_MATERIAL_OPTIONS, MEDIA_MATERIAL_CODES)
_check_exhaustive("platform", PLATFORM_OPTIONS, PLATFORM_CODES)


def material_code(material: str) -> str:
    return MEDIA_MATERIAL_CODES.get(str(material or ""), FALLBACK_MATERIAL_CODE)


def platform_code(platform: str) -> str:
    return PLATFORM_CODES.get(str(platform or ""), FALLBACK_PLATFORM_CODE)


def normalize_status_input(status: str) -> str:
    raw = str(status or "").strip()
    if not raw:
        raise ValueError("status is required")

    if raw in INCIDENT_STATUSES:
        return raw

    lowered = raw.casefold()
    canonical_by_lower = {item.casefold(): item for item in STATUS_ORDER}
    if lowered in canonical_by_lower:
        return canonical_by_lower[lowered]

    alias = STATUS_ALIASES.get(lowered)
    if alias:
        return alias

    supported = ", ".join(STATUS_ORDER)
    raise ValueError(f"invalid status: {raw}. supported values: {supported}")


def status_display(status: str) -> str:
    return STATUS_DISPLAY.get(str(status), str(status))


def list_category_codes() -> List[Dict[str, str]]:
    rows: List[Dict[str, str]] = []
    for material in MEDIA_MATERIAL_OPTIONS:
        rows.append({"kind": "media_material", "value": material, "code": MEDIA_MATERIAL_CODES[material]})
    for platform in PLATFORM_OPTIONS:
        rows.append({"kind": "platform", "value": platform, "code": PLATFORM_CODES[platform]})
    return rows
