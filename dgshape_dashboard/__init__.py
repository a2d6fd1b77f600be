"""
DGSHAPE Analytics — Dental Milling Machine Dashboard

Analytics backend for turning the machine's CSV log exports (daily summary
and per-job sessions) into dashboard-ready cards, chart series and tables.

To point at a different export location:
    Change DAILY_SUMMARY_FILE / JOB_SESSIONS_FILE in
    dgshape_dashboard.config, or pass paths to
    dashboard.load_dashboard_data().

To connect to Streamlit/Dash:
    Call dashboard.aggregate(daily, sessions, time_range) to get a plain
    dict suitable for rendering metric cards, trend charts (Plotly), the
    material pie and the recent-jobs table.

To add a material colour:
    Add an entry to config.MATERIAL_COLORS; unlisted materials fall back
    to the "Unknown" colour.
"""
