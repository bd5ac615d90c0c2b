"""
Sales KPI Tracker — weekly outreach metrics dashboard.

Records one row of outreach counts per week (leads, emails, LinkedIn,
calls, meetings) in a per-identity document collection and derives
all-time KPIs and chart series from the full snapshot.

To render the dashboard:
    Call dashboard.get_dashboard_view(records) with the latest snapshot
    from client.SnapshotFeed; it returns plain dicts and DataFrames for
    cards, Plotly charts, and the history table.

To swap the backend:
    Implement store.RecordStore (authenticate, subscribe, create) and pass
    an instance to client.TrackerClient. The record schema is unchanged.

To add a metric:
    Add it to config.METRIC_FIELDS, FIELD_MAP, FIELD_LABELS and
    FORM_SECTIONS; add it to OUTBOUND_FIELDS or LINKEDIN_FIELDS if it
    counts towards those composites.
"""
