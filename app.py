"""
Sales KPI Tracker — Interactive Dashboard

Run with:  streamlit run app.py
"""

import logging
import sys
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
from plotly.subplots import make_subplots

sys.path.insert(0, str(Path(__file__).resolve().parent))

from kpi_tracker.config import (
    APP_TITLE,
    DAILY_OUTBOUND_GOAL,
    FIELD_LABELS,
    FORM_SECTIONS,
    METRIC_FIELDS,
    WEEKLY_OUTBOUND_GOAL,
    load_backend_config,
)
from kpi_tracker.client import SnapshotFeed, TrackerClient
from kpi_tracker.dashboard import TREND_CHARTS, get_dashboard_view
from kpi_tracker.records import parse_week_start
from kpi_tracker.store import StoreError, StoreWriteError, build_store

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title=APP_TITLE,
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)

VIEW_DASHBOARD = "Dashboard"
VIEW_FORM = "Add Weekly Data"

ACCENT = "#6366f1"


# ---------------------------------------------------------------------------
# Backend (one store per process, one client + feed per session)
# ---------------------------------------------------------------------------
@st.cache_resource
def get_backend():
    config = load_backend_config()
    return config, build_store(config)


config, store = get_backend()

if "client" not in st.session_state:
    st.session_state.client = TrackerClient(
        store, app_id=config.app_id, auth_token=config.auth_token
    )
    st.session_state.feed = SnapshotFeed()

client: TrackerClient = st.session_state.client
feed: SnapshotFeed = st.session_state.feed

if client.store is not None and not client.is_ready:
    if client.initialize():
        client.subscribe(feed)


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title(APP_TITLE)
st.sidebar.markdown("Weekly outreach metrics")
st.sidebar.divider()

page = st.sidebar.radio("Navigate", [VIEW_DASHBOARD, VIEW_FORM], key="view")

st.sidebar.divider()
st.sidebar.caption(f"Weekly goal: {WEEKLY_OUTBOUND_GOAL} outbound activities")


# ---------------------------------------------------------------------------
# Helper: KPI card
# ---------------------------------------------------------------------------
def kpi_card(title: str, value: str, subtext: str = ""):
    st.markdown(
        f"""
        <div style="background: #fff; border-left: 4px solid {ACCENT};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;
                    box-shadow: 0 1px 3px rgba(0,0,0,0.08);">
            <div style="font-size: 13px; color: #888; font-weight: 600; text-transform: uppercase;">{title}</div>
            <div style="font-size: 28px; font-weight: 700; color: #222; margin: 4px 0;">{value}</div>
            <div style="font-size: 12px; color: #aaa;">{subtext}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def progress_chart(progress):
    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(
        go.Bar(
            x=progress["label"],
            y=progress["weekly_outbound"],
            name="Weekly Activities",
            marker_color="#8884d8",
        ),
        secondary_y=False,
    )
    fig.add_trace(
        go.Scatter(
            x=progress["label"],
            y=progress["cumulative_outbound"],
            name="Cumulative Actual",
            mode="lines",
            line=dict(color="#ff7300", width=3),
        ),
        secondary_y=True,
    )
    fig.add_trace(
        go.Scatter(
            x=progress["label"],
            y=progress["cumulative_goal_pace"],
            name="Cumulative Goal",
            mode="lines",
            line=dict(color="#28a745", width=2, dash="dash"),
        ),
        secondary_y=True,
    )
    fig.add_hline(
        y=WEEKLY_OUTBOUND_GOAL,
        line_dash="dot",
        line_color="#dc3545",
        annotation_text="Weekly Goal",
        annotation_position="top right",
    )
    fig.update_layout(
        height=400,
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=10, r=10, t=10, b=40),
    )
    return fig


def trend_chart(recent, lines):
    fig = go.Figure()
    for column, name, color in lines:
        fig.add_trace(go.Scatter(
            x=recent["label"],
            y=recent[column],
            name=name,
            mode="lines+markers",
            line=dict(color=color, width=2),
        ))
    fig.update_layout(
        height=300,
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=10, r=10, t=10, b=40),
    )
    return fig


# ===========================================================================
# PAGE: Dashboard
# ===========================================================================
@st.fragment(run_every=config.refresh_seconds)
def render_dashboard():
    if feed.error is not None:
        st.error("Could not load weekly data. Showing the last snapshot received.")

    if feed.loading:
        st.info("Loading weekly data...")
        return

    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    view = get_dashboard_view(feed.records)
    if view["is_empty"]:
        st.info("Loading data or no data available. Add some weekly data to get started!")
        return

    latest = view["latest_week"]
    st.subheader(f"Latest Week's Summary ({latest['display_date']})")
    cols = st.columns(6)
    figures = [
        ("New Leads", latest["new_leads"]),
        ("Emails Delivered", latest["emails_delivered"]),
        ("LinkedIn Activity", latest["linkedin_activity"]),
        ("Calls Dialed", latest["calls_dialed"]),
        ("Calls Connected", latest["calls_connected"]),
        ("Meetings Booked", latest["meetings_booked"]),
    ]
    for col, (label, value) in zip(cols, figures):
        col.metric(label, value)

    st.divider()

    st.subheader("KPI Progress vs. Goals")
    st.caption(
        f"Weekly Goal: {WEEKLY_OUTBOUND_GOAL} Outbound Activities ({DAILY_OUTBOUND_GOAL} per day)"
    )
    st.plotly_chart(progress_chart(view["progress"]), use_container_width=True)

    cols = st.columns(3)
    for i, card in enumerate(view["cards"]):
        with cols[i % 3]:
            kpi_card(card["title"], card["value"], card["subtext"])

    st.divider()

    cols = st.columns(2)
    for i, (title, lines) in enumerate(TREND_CHARTS):
        with cols[i % 2]:
            st.markdown(f"**{title}**")
            st.plotly_chart(trend_chart(view["recent"], lines), use_container_width=True)

    st.subheader("Historical Data")
    st.dataframe(view["history"], use_container_width=True, hide_index=True)


# ===========================================================================
# PAGE: Add Weekly Data
# ===========================================================================
def _field_key(field: str) -> str:
    return f"form_{field}"


def _submit_week():
    form = {
        field: st.session_state.get(_field_key(field))
        for field in ["week_start_date", *METRIC_FIELDS]
    }
    week = parse_week_start(form["week_start_date"])
    existing = {r.get("week_start_date") for r in feed.records}

    try:
        client.add_week(form)
    except ValueError as exc:
        st.session_state.form_error = str(exc)
        return
    except StoreWriteError:
        st.session_state.form_error = "Failed to add data. Please try again."
        return
    except StoreError as exc:
        st.session_state.form_error = str(exc)
        return

    if week in existing:
        st.session_state.flash = f"Week of {week} already existed and was overwritten."
    else:
        st.session_state.flash = f"Added week of {week}."

    st.session_state[_field_key("week_start_date")] = None
    for field in METRIC_FIELDS:
        st.session_state[_field_key(field)] = None
    st.session_state.view = VIEW_DASHBOARD


if page == VIEW_DASHBOARD:
    st.title("Dashboard")
    render_dashboard()

elif page == VIEW_FORM:
    st.title("Add New Weekly Metrics")
    st.caption("Enter your sales data for the week. Blank fields count as 0.")

    error = st.session_state.pop("form_error", None)
    if error:
        st.error(error)

    with st.form("weekly_metrics", clear_on_submit=False):
        st.date_input(
            FIELD_LABELS["week_start_date"],
            value=None,
            key=_field_key("week_start_date"),
        )
        for section, fields in FORM_SECTIONS:
            st.markdown(f"**{section}**")
            cols = st.columns(3)
            for i, (field, placeholder) in enumerate(fields):
                with cols[i % 3]:
                    st.number_input(
                        FIELD_LABELS[field],
                        min_value=0,
                        value=None,
                        step=1,
                        placeholder=placeholder,
                        key=_field_key(field),
                    )
        st.form_submit_button("Add Week's Data", on_click=_submit_week)

st.caption("© Sales KPI Tracker")
