from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .catalog import OTHER, STATUS_NEW


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_iso_datetime(value: object) -> datetime | None:
    """Parse an ISO-8601 value into an aware UTC datetime; None when it cannot be read."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if not value or not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _required_datetime(payload: Dict[str, object], key: str) -> datetime:
    parsed = parse_iso_datetime(payload.get(key))
    if parsed is None:
        raise ValueError(f"{key} must be an ISO-8601 timestamp")
    return parsed


def _optional_datetime(payload: Dict[str, object], key: str) -> datetime | None:
    raw = payload.get(key)
    if raw in (None, ""):
        return None
    return _required_datetime(payload, key)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class ActionEntry:
    timestamp: datetime
    description: str
    user: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "description": self.description,
            "user": self.user,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "ActionEntry":
        return cls(
            timestamp=_required_datetime(payload, "timestamp"),
            description=str(payload.get("description", "")),
            user=str(payload.get("user", "")),
        )


@dataclass
class Incident:
    id: str
    serial_number: str
    received_at: datetime
    media_material: str
    platform: str
    description: str
    reported_by: str
    status: str = STATUS_NEW
    started_processing_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    issue_link: Optional[str] = None
    screenshot_link: Optional[str] = None
    other_media_material: Optional[str] = None
    other_platform: Optional[str] = None
    actions_log: List[ActionEntry] = field(default_factory=list)

    def material_label(self) -> str:
        if self.media_material == OTHER and self.other_media_material:
            return f"Other: {self.other_media_material}"
        return self.media_material

    def platform_label(self) -> str:
        if self.platform == OTHER and self.other_platform:
            return f"Other: {self.other_platform}"
        return self.platform

    def has_embedded_screenshot(self) -> bool:
        return bool(self.screenshot_link and self.screenshot_link.startswith("data:image/"))

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "serial_number": self.serial_number,
            "received_at": self.received_at.isoformat(),
            "started_processing_at": _isoformat(self.started_processing_at),
            "closed_at": _isoformat(self.closed_at),
            "status": self.status,
            "media_material": self.media_material,
            "other_media_material": self.other_media_material,
            "platform": self.platform,
            "other_platform": self.other_platform,
            "description": self.description,
            "issue_link": self.issue_link,
            "screenshot_link": self.screenshot_link,
            "reported_by": self.reported_by,
            "actions_log": [entry.to_dict() for entry in self.actions_log],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "Incident":
        actions = payload.get("actions_log") or []
        return cls(
            id=str(payload["id"]),
            serial_number=str(payload["serial_number"]),
            received_at=_required_datetime(payload, "received_at"),
            started_processing_at=_optional_datetime(payload, "started_processing_at"),
            closed_at=_optional_datetime(payload, "closed_at"),
            status=str(payload.get("status", STATUS_NEW)),
            media_material=str(payload.get("media_material", "")),
            other_media_material=payload.get("other_media_material") or None,  # type: ignore[arg-type]
            platform=str(payload.get("platform", "")),
            other_platform=payload.get("other_platform") or None,  # type: ignore[arg-type]
            description=str(payload.get("description", "")),
            issue_link=payload.get("issue_link") or None,  # type: ignore[arg-type]
            screenshot_link=payload.get("screenshot_link") or None,  # type: ignore[arg-type]
            reported_by=str(payload.get("reported_by", "")),
            actions_log=[ActionEntry.from_dict(item) for item in actions],  # type: ignore[union-attr]
        )
