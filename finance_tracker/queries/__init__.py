"""Reports and read-only queries."""

from finance_tracker.queries.reports import (
    ReportBuilder,
    ReportParameterError,
)

__all__ = [
    "ReportBuilder",
    "ReportParameterError",
]
