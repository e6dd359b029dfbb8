from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List

from .incident_store import Clock, IncidentStore
from .models import ActionEntry, Incident, utc_now

# Offsets are hours before "now".
DEMO_ROWS: List[Dict[str, object]] = [
    {
        "serial": "BDM-VN0001", "received": 120, "started": 96, "closed": 72, "status": "Closed",
        "material": "Video Clip", "platform": "International Media Channel/Platform",
        "link": "https://youtube.com/example_video_1", "description": "Misleading content in a viral video.",
        "reporter": "User A",
        "actions": [(96, "Initial review started.", "Analyst 1"), (72, "Content verified and flagged. Case closed.", "Analyst 1")],
    },
    {
        "serial": "BDM-PC0001", "received": 72, "started": 48, "status": "Processing",
        "material": "Press Release", "platform": "Local Media Channel/Platform",
        "link": "https://news.com/example_article_1", "description": "Hate speech found in comments section.",
        "reporter": "User B",
        "actions": [(48, "Ticket assigned to Analyst 2.", "System"), (24, "Contacted platform for comment removal.", "Analyst 2")],
    },
    {
        "serial": "BDM-FX0001", "received": 24, "status": "New",
        "material": "Infographic", "platform": "SRSA Account on Platform X",
        "link": "https://x.com/example_post_1", "description": "Fake news spreading rapidly.", "reporter": "User C",
    },
    {
        "serial": "BDM-MI0001", "received": 12, "status": "New",
        "material": "Image", "platform": "SRSA Account on Instagram",
        "screenshot": "https://placehold.co/600x400.png", "description": "Copyright infringement on an image.",
        "reporter": "User D",
    },
    {
        "serial": "BDM-AT0001", "received": 144, "started": 120, "closed": 96, "status": "Closed",
        "material": "Audio Clip", "platform": "SRSA Account on TikTok",
        "link": "https://tiktok.com/example_audio_1", "description": "Unauthorized use of copyrighted music.",
        "reporter": "User E",
        "actions": [(120, "Investigation initiated.", "Analyst 3"), (96, "Takedown notice sent. Issue resolved.", "Analyst 3")],
    },
    {
        "serial": "BDM-ZY0001", "received": 2, "status": "New",
        "material": "Other", "other_material": "Live Stream Segment", "platform": "Other", "other_platform": "Twitch",
        "link": "https://twitch.tv/example_stream_clip",
        "description": "Violation of community guidelines during a live stream.", "reporter": "User F",
    },
    {
        "serial": "BDM-LU0001", "received": 192, "started": 168, "closed": 144, "status": "Closed",
        "material": "Legal Document", "platform": "Umm Al-Qura Newspaper",
        "link": "https://example-umm-al-qura.com/article_123",
        "description": "Official announcement clarification needed.", "reporter": "System Alert",
        "actions": [(168, "Reviewed official text.", "Analyst SRSA"), (144, "No action needed. Archived.", "Analyst SRSA")],
    },
    {
        "serial": "BDM-VS0001", "received": 10, "status": "New",
        "material": "Video Clip", "platform": "SRSA Website",
        "link": "https://srsa.gov.sa/videos/promo_vid_error", "description": "Broken video link on SRSA website.",
        "reporter": "Internal Audit",
    },
    {
        "serial": "BDM-PC0002", "received": 48, "started": 24, "status": "Processing",
        "material": "Press Release", "platform": "Local Media Channel/Platform",
        "link": "https://localnews.com/urgent_update",
        "description": "Fact-checking a rapidly spreading local news item.", "reporter": "User G",
        "actions": [(23, "Initial assessment complete.", "Analyst 1")],
    },
    {
        "serial": "BDM-MK0001", "received": 72, "started": 70, "closed": 68, "status": "Closed",
        "material": "Image", "platform": "SRSA Account on LinkedIn",
        "screenshot": "https://placehold.co/800x450.png",
        "description": "Image used without proper attribution on LinkedIn post.", "reporter": "User H",
        "actions": [(70, "Confirmed improper usage.", "Analyst 2"), (68, "Contacted poster, image removed. Resolved.", "Analyst 2")],
    },
    {
        "serial": "BDM-FP0001", "received": 8, "status": "New",
        "material": "Infographic", "platform": "Unified Platform",
        "link": "https://unifiedplatform.gov/stats_error",
        "description": "Potential error in data presented in an official infographic.", "reporter": "User I",
    },
    {
        "serial": "BDM-AN0001", "received": 120, "started": 96, "status": "Processing",
        "material": "Audio Clip", "platform": "International Media Channel/Platform",
        "link": "https://podcastplatform.com/episode123?t=30m5s",
        "description": "Misinformation segment in an international podcast.", "reporter": "User J",
        "actions": [(95.8, "Transcribing relevant audio segment.", "Analyst 3")],
    },
    {
        "serial": "BDM-GS0001", "received": 48, "status": "New",
        "material": "GIF", "platform": "SRSA Website",
        "link": "https://srsa.gov.sa/animated_explainer_flicker",
        "description": "Accessibility issue: Flickering GIF on main page causing discomfort.",
        "reporter": "Accessibility Team",
    },
    {
        "serial": "BDM-LX0001", "received": 240, "started": 216, "closed": 192, "status": "Closed",
        "material": "Legal Document", "platform": "SRSA Account on Platform X",
        "link": "https://x.com/srsalegal/doc_summary_incorrect",
        "description": "Incorrect summary of a legal document shared.", "reporter": "Legal Department",
        "actions": [(216, "Reviewed document and summary.", "Legal Team"), (192, "Correction issued. Post updated.", "Comms Team")],
    },
    {
        "serial": "BDM-VC0001", "received": 6, "status": "New",
        "material": "Video Clip", "platform": "Local Media Channel/Platform",
        "link": "https://localbroadcast.tv/clip_qanda",
        "description": "Sensitive information potentially revealed in a Q&A session.", "reporter": "PR Team",
    },
    {
        "serial": "BDM-PS0001", "received": 26, "started": 20, "status": "Processing",
        "material": "Press Release", "platform": "SRSA Website",
        "link": "https://srsa.gov.sa/news/typo_in_release",
        "description": "Minor typo found in recently published press release.", "reporter": "Internal Review",
        "actions": [(20, "Typo confirmed by editor.", "Editor")],
    },
    {
        "serial": "BDM-FU0001", "received": 288, "started": 264, "closed": 240, "status": "Closed",
        "material": "Infographic", "platform": "Umm Al-Qura Newspaper",
        "description": "Archived: Infographic related to past event, no issues.", "reporter": "System Archive Task",
        "actions": [(264, "Routine archival review.", "Archivist"), (240, "Confirmed for archival. Closed.", "Archivist")],
    },
    {
        "serial": "BDM-VT0001", "received": 3, "status": "New",
        "material": "Video Clip", "platform": "SRSA Account on TikTok",
        "screenshot": "https://placehold.co/300x600.png",
        "description": "User comment on TikTok video requires moderation.", "reporter": "Social Media Team",
    },
    {
        "serial": "BDM-ZI0001", "received": 720, "started": 696, "closed": 672, "status": "Closed",
        "material": "Other", "other_material": "User Story Highlight", "platform": "SRSA Account on Instagram",
        "description": "Review of outdated Instagram story highlight. Removed.", "reporter": "Content Audit",
        "actions": [(696, "Content identified as outdated.", "Content Manager"), (672, "Highlight removed from profile. Resolved.", "Content Manager")],
    },
    {
        "serial": "BDM-MY0001", "received": 1.5, "status": "New",
        "material": "Image", "platform": "Other", "other_platform": "Regional Forum Website",
        "link": "https://regionalforum.org/gallery/image_srsa_uncredited",
        "description": "SRSA image used on external forum gallery without credit.", "reporter": "Partnerships Team",
    },
]


def _ago(now: datetime, hours: object) -> datetime | None:
    if hours is None:
        return None
    return now - timedelta(hours=float(hours))  # type: ignore[arg-type]


def seed_demo_incidents(now: datetime | None = None) -> List[Incident]:
    now = now or utc_now()
    incidents = []
    for index, row in enumerate(DEMO_ROWS, start=1):
        actions = [
            ActionEntry(timestamp=now - timedelta(hours=float(hours)), description=text, user=user)
            for hours, text, user in row.get("actions", [])  # type: ignore[union-attr]
        ]
        incidents.append(
            Incident(
                id=str(index),
                serial_number=str(row["serial"]),
                received_at=now - timedelta(hours=float(row["received"])),  # type: ignore[arg-type]
                started_processing_at=_ago(now, row.get("started")),
                closed_at=_ago(now, row.get("closed")),
                status=str(row["status"]),
                media_material=str(row["material"]),
                other_media_material=row.get("other_material"),  # type: ignore[arg-type]
                platform=str(row["platform"]),
                other_platform=row.get("other_platform"),  # type: ignore[arg-type]
                description=str(row["description"]),
                issue_link=row.get("link"),  # type: ignore[arg-type]
                screenshot_link=row.get("screenshot"),  # type: ignore[arg-type]
                reported_by=str(row["reporter"]),
                actions_log=actions,
            )
        )
    return incidents


def build_demo_store(now: datetime | None = None, clock: Clock | None = None) -> IncidentStore:
    incidents = seed_demo_incidents(now)
    if clock is None:
        return IncidentStore(incidents)
    return IncidentStore(incidents, clock=clock)
