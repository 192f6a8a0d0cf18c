"""Dashboard KPI endpoint."""
