"""Report building package."""

from budget_tracker.reports.summary import build_report, format_date_range

__all__ = ["build_report", "format_date_range"]
