from __future__ import annotations

import base64
import sys
from contextlib import contextmanager
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mediascope.analytics import (
    DateFilter,
    build_dashboard_summary,
    filter_by_received_date,
    incidents_over_time,
)
from mediascope.catalog import (
    MEDIA_MATERIAL_OPTIONS,
    OTHER,
    PLATFORM_OPTIONS,
    STATUS_CLOSED,
    STATUS_ORDER,
    status_display,
)
from mediascope.config import ITEMS_PER_PAGE, RECENT_INCIDENTS_LIMIT
from mediascope.demo_data import build_demo_store
from mediascope.incident_store import IncidentStore, reset_default_store
from mediascope.logging_setup import setup_logging
from mediascope.models import Incident
from mediascope.operations import close_incident, log_action_with_auto_transition
from mediascope.ticket_views import (
    TicketFilters,
    actions_newest_first,
    filter_incidents,
    paginate,
    sort_for_operation_room,
    sort_newest_first,
)

SELECTED_INCIDENT_KEY = "selected_incident_id"
PAGES = ["Dashboard", "Report Incident", "Operation Room", "Logbook"]

STATUS_COLORS = {
    "New": "#d9822b",
    "Processing": "#2b6cb0",
    "Closed": "#2f855a",
}

st.set_page_config(
    page_title="MediaScope",
    layout="wide",
    initial_sidebar_state="collapsed",
)


@st.cache_resource
def get_store() -> IncidentStore:
    setup_logging()
    return reset_default_store(build_demo_store())


def _query_param(name: str) -> Optional[str]:
    try:
        params = st.query_params  # type: ignore[attr-defined]
        if name in params:
            value = params.get(name)
            if isinstance(value, list):
                return value[0] if value else None
            return str(value) if value is not None else None
    except Exception:
        pass
    return None


@contextmanager
def panel(title: str, *, caption: str | None = None):
    with st.container(border=True):
        st.subheader(title)
        if caption:
            st.caption(caption)
        yield


def render_nav() -> str:
    default = (_query_param("page") or "").strip().lower().replace("-", " ")
    default_map = {page.lower(): page for page in PAGES}
    index = PAGES.index(default_map.get(default, "Dashboard"))
    return st.radio("Page", PAGES, index=index, horizontal=True, label_visibility="collapsed")


def render_sign_in_gate() -> Dict[str, object]:
    if "current_user" not in st.session_state:
        st.session_state.current_user = None

    user = st.session_state.current_user
    if user:
        return user

    st.title("MediaScope")
    st.caption("Enter the name that will appear on incident reports and action entries.")
    with st.form("sign_in_form"):
        display_name = st.text_input("Display name")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        if display_name.strip():
            st.session_state.current_user = {"display_name": display_name.strip()}
            st.rerun()
        else:
            st.error("Display name is required")

    st.stop()


def render_session_bar(user: Dict[str, object]) -> None:
    c1, c2, c3 = st.columns([3, 1, 1])
    with c1:
        st.caption(f"Signed in as `{user.get('display_name')}`")
    with c2:
        if st.button("Refresh", use_container_width=True):
            st.rerun()
    with c3:
        if st.button("Sign out", use_container_width=True):
            st.session_state.current_user = None
            st.rerun()


def incidents_frame(records: List[Incident]) -> pd.DataFrame:
    rows = [
        {
            "Serial": item.serial_number,
            "Status": status_display(item.status),
            "Received": item.received_at,
            "Description": item.description,
            "Media Material": item.material_label(),
            "Media Platform": item.platform_label(),
            "Reported By": item.reported_by,
        }
        for item in records
    ]
    frame = pd.DataFrame(rows)
    if frame.empty:
        return pd.DataFrame(columns=["Serial", "Status", "Received", "Description", "Media Material", "Media Platform", "Reported By"])
    return frame


def build_over_time_chart(frame: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    if frame.empty:
        return fig
    fig.add_trace(
        go.Scatter(
            x=frame["label"],
            y=frame["count"],
            mode="lines+markers",
            name="Incidents",
            line=dict(color="#0f625b", width=2.6),
        )
    )
    fig.update_layout(
        margin=dict(l=8, r=8, t=4, b=8),
        height=260,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(showgrid=False, zeroline=False),
        yaxis=dict(showgrid=True, gridcolor="rgba(0,0,0,.08)", title="Incidents", rangemode="tozero"),
    )
    return fig


def build_status_chart(counts: Dict[str, int]) -> go.Figure:
    labels = [status for status in STATUS_ORDER if counts.get(status, 0) > 0]
    fig = go.Figure()
    if not labels:
        return fig
    fig.add_trace(
        go.Pie(
            labels=[status_display(status) for status in labels],
            values=[counts[status] for status in labels],
            hole=0.55,
            marker=dict(colors=[STATUS_COLORS[status] for status in labels]),
            sort=False,
        )
    )
    fig.update_layout(margin=dict(l=8, r=8, t=4, b=8), height=260, paper_bgcolor="rgba(0,0,0,0)")
    return fig


def render_date_filter() -> DateFilter:
    kind = st.selectbox(
        "Timeframe",
        ["allTime", "daily", "monthly", "yearly", "period"],
        format_func=lambda value: {
            "allTime": "All Time",
            "daily": "Daily",
            "monthly": "Monthly",
            "yearly": "Yearly",
            "period": "Specific Period",
        }[value],
    )
    today = date.today()
    if kind == "daily":
        return DateFilter(kind="daily", day=st.date_input("Day", value=today))
    if kind == "monthly":
        c1, c2 = st.columns(2)
        with c1:
            year = st.number_input("Year", min_value=2000, max_value=2100, value=today.year, step=1)
        with c2:
            month = st.number_input("Month", min_value=1, max_value=12, value=today.month, step=1)
        return DateFilter(kind="monthly", year=int(year), month=int(month))
    if kind == "yearly":
        year = st.number_input("Year", min_value=2000, max_value=2100, value=today.year, step=1)
        return DateFilter(kind="yearly", year=int(year))
    if kind == "period":
        c1, c2 = st.columns(2)
        with c1:
            start = st.date_input("From", value=today - timedelta(days=7))
        with c2:
            end = st.date_input("To", value=today)
        return DateFilter(kind="period", start=start, end=end)
    return DateFilter()


def render_dashboard(store: IncidentStore) -> None:
    records = store.list_all()

    with panel("Timeframe"):
        date_filter = render_date_filter()
    try:
        scoped = filter_by_received_date(records, date_filter)
        over_time = incidents_over_time(records, date_filter)
    except ValueError as exc:
        st.error(str(exc))
        return

    summary = build_dashboard_summary(scoped)
    counts = summary["counts"]  # type: ignore[assignment]

    cols = st.columns(4)
    cols[0].metric("Total Incidents", counts["total"])
    cols[1].metric("New", counts["New"])
    cols[2].metric("Processing", counts["Processing"])
    cols[3].metric("Resolved", counts["Closed"])
    cols = st.columns(4)
    cols[0].metric("Avg. Processing Start", summary["average_processing_time"], help="From receipt to start, working days only")
    cols[1].metric("Avg. Resolution", summary["average_resolution_time"], help="From receipt to close, working days only")
    cols[2].metric("Resolution Rate", summary["resolution_rate"])
    cols[3].metric("Oldest Open Incident", summary["oldest_open_incident_age"])

    left, right = st.columns([1.5, 1])
    with left:
        with panel("Incidents Over Time"):
            if over_time.empty:
                st.caption("No incidents in this timeframe.")
            else:
                st.plotly_chart(build_over_time_chart(over_time), use_container_width=True)
    with right:
        with panel("Incidents by Status"):
            st.plotly_chart(build_status_chart(counts), use_container_width=True)

    left, right = st.columns(2)
    with left:
        with panel("Top Media Materials"):
            st.dataframe(pd.DataFrame(summary["top_media_materials"]), use_container_width=True, hide_index=True)
    with right:
        with panel("Top Media Platforms"):
            st.dataframe(pd.DataFrame(summary["top_media_platforms"]), use_container_width=True, hide_index=True)

    with panel("Recent Incidents"):
        recent = sort_newest_first(scoped)[:RECENT_INCIDENTS_LIMIT]
        st.dataframe(incidents_frame(recent), use_container_width=True, hide_index=True)


def _screenshot_payload(upload) -> Optional[str]:
    if upload is None:
        return None
    encoded = base64.b64encode(upload.getvalue()).decode("ascii")
    return f"data:{upload.type};base64,{encoded}"


def render_report_form(store: IncidentStore, user: Dict[str, object]) -> None:
    with panel("Report Incident", caption="New incidents start in New and get a serial number on submit."):
        with st.form("report_form", clear_on_submit=True):
            c1, c2 = st.columns(2)
            with c1:
                material = st.selectbox("Media Material", MEDIA_MATERIAL_OPTIONS)
                other_material = st.text_input("Other material (when Other)")
            with c2:
                platform = st.selectbox("Media Platform", PLATFORM_OPTIONS)
                other_platform = st.text_input("Other platform (when Other)")
            description = st.text_area("Description", height=100)
            issue_link = st.text_input("Link to Media Content")
            screenshot_url = st.text_input("Screenshot URL")
            screenshot_file = st.file_uploader("Or upload a screenshot", type=["png", "jpg", "jpeg", "gif"])
            submitted = st.form_submit_button("Submit Report")

        if not submitted:
            return
        if not description.strip():
            st.error("Description is required")
            return
        if material == OTHER and not other_material.strip():
            st.error("Describe the media material when choosing Other")
            return
        if platform == OTHER and not other_platform.strip():
            st.error("Describe the platform when choosing Other")
            return

        incident = store.create(
            media_material=material,
            platform=platform,
            description=description,
            reported_by=str(user.get("display_name")),
            issue_link=issue_link,
            screenshot_link=_screenshot_payload(screenshot_file) or screenshot_url,
            other_media_material=other_material,
            other_platform=other_platform,
        )
        st.success(f"Incident reported: {incident.serial_number}")


def render_ticket_filters(key: str, default_status: str = "", include_reporter: bool = False) -> TicketFilters:
    c1, c2, c3, c4 = st.columns([1, 1, 1, 1.5])
    statuses = [""] + STATUS_ORDER
    with c1:
        status = st.selectbox(
            "Status",
            statuses,
            index=statuses.index(default_status),
            format_func=lambda value: status_display(value) if value else "All",
            key=f"{key}_status",
        )
    with c2:
        material = st.selectbox("Media Material", [""] + list(MEDIA_MATERIAL_OPTIONS), format_func=lambda v: v or "All", key=f"{key}_material")
    with c3:
        platform = st.selectbox("Media Platform", [""] + list(PLATFORM_OPTIONS), format_func=lambda v: v or "All", key=f"{key}_platform")
    with c4:
        search = st.text_input("Search", key=f"{key}_search")
    return TicketFilters(status=status, media_material=material, platform=platform, search=search, include_reporter=include_reporter)


def render_incident_details(store: IncidentStore, incident: Incident, user: Dict[str, object]) -> None:
    with panel(incident.serial_number, caption=f"{status_display(incident.status)} | received {incident.received_at:%Y-%m-%d %H:%M} UTC by {incident.reported_by}"):
        st.write(incident.description)
        st.caption(f"Media Material: {incident.material_label()}")
        st.caption(f"Media Platform: {incident.platform_label()}")
        if incident.issue_link:
            st.markdown(f"[Link to Media Content]({incident.issue_link})")
        if incident.has_embedded_screenshot():
            st.image(incident.screenshot_link)
        elif incident.screenshot_link:
            st.markdown(f"[View Screenshot Link]({incident.screenshot_link})")

        st.caption("Actions Log")
        entries = actions_newest_first(incident)
        if entries:
            st.dataframe(
                pd.DataFrame([{"When": entry.timestamp, "Action": entry.description, "By": entry.user} for entry in entries]),
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.caption("No actions logged yet.")

        if incident.status == STATUS_CLOSED:
            return

        with st.form(f"action_form_{incident.id}", clear_on_submit=True):
            text = st.text_area("Log an action", height=80)
            logged = st.form_submit_button("Log Action")
        if logged:
            try:
                updated = log_action_with_auto_transition(store, incident.id, text, str(user.get("display_name")))
            except ValueError as exc:
                st.error(str(exc))
            else:
                if updated is None:
                    st.error("Incident no longer exists.")
                else:
                    st.success("Action logged.")
                    st.rerun()

        if st.button("Close Incident", key=f"close_{incident.id}", use_container_width=True):
            updated = close_incident(store, incident.id, str(user.get("display_name")))
            if updated is None:
                st.error("Incident no longer exists.")
            else:
                st.success(f"{updated.serial_number} resolved.")
                st.rerun()


def render_operation_room(store: IncidentStore, user: Dict[str, object]) -> None:
    filters = render_ticket_filters("ops", default_status="New")
    queue = sort_for_operation_room(filter_incidents(store.list_all(), filters))

    left, right = st.columns([1.4, 1])
    with left:
        with panel("Incidents Queue"):
            st.dataframe(incidents_frame(queue), use_container_width=True, hide_index=True)
            if queue:
                labels = {item.id: f"{item.serial_number} | {item.description[:60]}" for item in queue}
                current = st.session_state.get(SELECTED_INCIDENT_KEY)
                ids = list(labels)
                selected = st.selectbox(
                    "Select incident",
                    ids,
                    index=ids.index(current) if current in ids else 0,
                    format_func=lambda value: labels[value],
                )
                st.session_state[SELECTED_INCIDENT_KEY] = selected
    with right:
        selected_id = st.session_state.get(SELECTED_INCIDENT_KEY)
        incident = store.get_by_id(selected_id) if selected_id else None
        if incident is None:
            st.info("Select an incident from the queue to see its details.")
        else:
            render_incident_details(store, incident, user)


def render_logbook(store: IncidentStore) -> None:
    filters = render_ticket_filters("logbook", include_reporter=True)
    rows = sort_newest_first(filter_incidents(store.list_all(), filters))
    page = int(st.number_input("Page", min_value=1, value=1, step=1))
    items, total_pages = paginate(rows, page, per_page=ITEMS_PER_PAGE)
    with panel("Logbook", caption=f"{len(rows)} incidents | page {min(page, max(total_pages, 1))} of {max(total_pages, 1)}"):
        st.dataframe(incidents_frame(items), use_container_width=True, hide_index=True)


def main() -> None:
    store = get_store()
    user = render_sign_in_gate()
    render_session_bar(user)
    page = render_nav()

    if page == "Dashboard":
        render_dashboard(store)
        return
    if page == "Report Incident":
        render_report_form(store, user)
        return
    if page == "Operation Room":
        render_operation_room(store, user)
        return
    render_logbook(store)


if __name__ == "__main__":
    main()
