"""
DGSHAPE Analytics — Interactive Dashboard

Run with:  streamlit run app.py
"""

import sys
from dataclasses import replace
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent))

from dgshape_dashboard.config import (
    DASHBOARD_TITLE,
    DATA_DIR,
    JOB_DATE_PERIODS,
    JOB_STATUSES,
    JOBS_PAGE_SIZE,
    STATUS_COLORS,
)
from dgshape_dashboard.dashboard import (
    JobQuery,
    aggregate,
    export_filename,
    export_jobs_csv,
    get_available_time_ranges,
    load_dashboard_data,
    query_jobs,
)
from dgshape_dashboard.kpis import format_duration, format_peak_hour
from dgshape_dashboard.loaders.utils import parse_date_column

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title=f"{DASHBOARD_TITLE} Dashboard",
    page_icon="🦷",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ---------------------------------------------------------------------------
# Data loading (cached until an explicit reload)
# ---------------------------------------------------------------------------
@st.cache_data
def load_all_data():
    return load_dashboard_data()


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title(DASHBOARD_TITLE)
st.sidebar.markdown("Executive Performance Dashboard")
st.sidebar.divider()

if st.sidebar.button("Reload data"):
    load_all_data.clear()

data = load_all_data()

time_range = st.sidebar.radio(
    "Time range",
    get_available_time_ranges(),
    format_func=str.capitalize,
)

page = st.sidebar.radio("Navigate", ["Dashboard", "Jobs"])

st.sidebar.divider()
st.sidebar.caption("Data: DGSHAPE dental milling machine logs")

if data["error"]:
    st.warning(
        f"**Data Loading Notice:** {data['error']}. Showing sample data for demonstration. "
        f"Place `daily_summary.csv` and `job_sessions.csv` in `{DATA_DIR}` to load real data."
    )


# ---------------------------------------------------------------------------
# Helper: metric card
# ---------------------------------------------------------------------------
def metric_card(label: str, value: str, subtitle: str, color: str = "#3b82f6"):
    st.markdown(
        f"""
        <div style="background: linear-gradient(135deg, {color}22, {color}11);
                    border-left: 4px solid {color};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;">
            <div style="font-size: 13px; color: #888; font-weight: 600; text-transform: uppercase;">{label}</div>
            <div style="font-size: 28px; font-weight: 700; color: #222; margin: 4px 0;">{value}</div>
            <div style="font-size: 13px; color: #666;">{subtitle}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def sessions_table(df: pd.DataFrame) -> pd.DataFrame:
    """Shape job sessions for display."""
    started = parse_date_column(df["session_start"])
    return pd.DataFrame({
        "ID": df["session_id"],
        "Date": df["start_date"],
        "Time": started.dt.strftime("%H:%M").fillna("N/A"),
        "Material": df["material_type"].replace("", "Unknown"),
        "Color": df["material_color"].replace("", "N/A"),
        "Duration": df["duration_minutes"].apply(format_duration),
        "Status": df["status"],
    })


def color_status(val):
    color = STATUS_COLORS.get(val, "#6b7280")
    return f"background-color: {color}22; color: {color}"


# ===========================================================================
# PAGE: Dashboard
# ===========================================================================
if page == "Dashboard":
    st.title(DASHBOARD_TITLE)
    st.caption(f"Time range: **{time_range}** | Last updated {pd.Timestamp.now():%b %d %H:%M}")

    result = aggregate(data["daily_data"], data["job_sessions"], time_range)

    cols = st.columns(4)
    with cols[0]:
        metric_card("Total Jobs", f"{result['total_jobs']:,}", "Manufacturing sessions", "#3b82f6")
    with cols[1]:
        metric_card("Success Rate", f"{result['success_rate']:.1f}%", "Completion percentage", "#16a34a")
    with cols[2]:
        metric_card("Utilization", f"{result['utilization_hours']:.1f}h", "Machine productive time", "#d97706")
    with cols[3]:
        metric_card("Material Types", str(result["material_types"]), "Different materials used", "#64748b")

    st.divider()

    chart = result["chart_data"]
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Job Performance Trends")
        if chart.empty:
            st.info("No daily data in this time range.")
        else:
            fig = go.Figure()
            fig.add_trace(go.Scatter(
                x=chart["date"], y=chart["jobs"],
                name="Total Jobs",
                mode="lines+markers",
                line=dict(color="#3b82f6", width=2),
            ))
            fig.add_trace(go.Scatter(
                x=chart["date"], y=chart["success_rate"],
                name="Success Rate (%)",
                mode="lines+markers",
                line=dict(color="#10b981", width=2),
                yaxis="y2",
            ))
            fig.update_layout(
                height=350,
                xaxis=dict(type="category"),
                yaxis=dict(title="Jobs"),
                yaxis2=dict(title="Success %", overlaying="y", side="right", range=[0, 100]),
                plot_bgcolor="rgba(0,0,0,0)",
                margin=dict(l=10, r=10, t=10, b=40),
            )
            st.plotly_chart(fig, use_container_width=True)

    with col2:
        st.subheader("Machine Utilization")
        if chart.empty:
            st.info("No daily data in this time range.")
        else:
            fig = go.Figure(go.Bar(
                x=chart["date"],
                y=chart["utilization"],
                marker_color="#f59e0b",
                text=chart["utilization"].apply(lambda x: f"{x:.1f}h"),
                textposition="outside",
            ))
            fig.update_layout(
                height=350,
                xaxis=dict(type="category"),
                yaxis_title="Hours",
                plot_bgcolor="rgba(0,0,0,0)",
                margin=dict(l=10, r=10, t=10, b=40),
            )
            st.plotly_chart(fig, use_container_width=True)

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Material Usage")
        breakdown = result["material_breakdown"]
        if breakdown.empty:
            st.info("No material data in this time range.")
        else:
            fig = go.Figure(go.Pie(
                labels=breakdown["material"],
                values=breakdown["count"],
                marker=dict(colors=breakdown["color"].tolist()),
                hole=0.5,
                sort=False,
            ))
            fig.update_layout(height=350, margin=dict(l=10, r=10, t=10, b=10))
            st.plotly_chart(fig, use_container_width=True)

    with col2:
        st.subheader("Performance Summary")
        st.metric("Average Job Duration", f"{result['avg_duration']:.1f} min")
        st.metric("Peak Operating Hour", format_peak_hour(result["peak_hour"]))
        st.metric("Error Incidents", result["error_count"])

    st.divider()

    st.subheader("Recent Job Sessions")
    recent = result["recent_sessions"]
    if recent.empty:
        st.info("No recent sessions found.")
    else:
        styled = sessions_table(recent).style.map(color_status, subset=["Status"])
        st.dataframe(styled, use_container_width=True, hide_index=True)


# ===========================================================================
# PAGE: Jobs
# ===========================================================================
elif page == "Jobs":
    st.title("Job Sessions")

    fcol1, fcol2, fcol3 = st.columns([2, 2, 3])
    with fcol1:
        filter_date = st.date_input("Date", value=None)
    with fcol2:
        period = st.selectbox(
            "Filter type",
            list(JOB_DATE_PERIODS),
            format_func=lambda key: JOB_DATE_PERIODS[key],
        )
    with fcol3:
        material = st.text_input("Material type", placeholder="e.g. Pan Dental")

    col1, col2, col3, col4 = st.columns([3, 2, 2, 1])
    with col1:
        search = st.text_input("Search", placeholder="Material, shade, status or ID")
    with col2:
        status = st.selectbox("Status", ["All", *JOB_STATUSES])
    with col3:
        sort_by = st.selectbox(
            "Sort by",
            ["session_start", "session_id", "material_type", "duration_minutes", "status"],
        )
    with col4:
        ascending = st.toggle("Ascending", value=False)

    query = JobQuery(
        search=search,
        status=status,
        material=material,
        date=filter_date,
        period=period,
        sort_by=sort_by,
        ascending=ascending,
        page_size=JOBS_PAGE_SIZE,
    )

    first = query_jobs(data["job_sessions"], query)
    page_number = st.number_input(
        f"Page (of {first.page_count})", min_value=1, max_value=first.page_count, value=1,
    )
    result = query_jobs(data["job_sessions"], replace(query, page=int(page_number)))

    cap_col, export_col = st.columns([4, 1])
    with cap_col:
        st.caption(f"{result.total} matching jobs")
    with export_col:
        st.download_button(
            "Export CSV",
            data=export_jobs_csv(data["job_sessions"], query),
            file_name=export_filename(query),
            mime="text/csv",
            disabled=result.total == 0,
        )

    if result.rows.empty:
        st.info("No jobs match the current filters.")
    else:
        styled = sessions_table(result.rows).style.map(color_status, subset=["Status"])
        st.dataframe(styled, use_container_width=True, hide_index=True)
