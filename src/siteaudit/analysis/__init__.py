"""Filtering, classification and aggregation for SiteAudit."""

from .aggregator import (
    AuditReport,
    ReportTable,
    SummaryRow,
    build_report,
    detail,
    summarize,
)
from .classifier import SubnetLocationIndex, classify, flatten_printers
from .filters import LocationFilter, build_location_filter

__all__ = [
    "AuditReport",
    "LocationFilter",
    "ReportTable",
    "SubnetLocationIndex",
    "SummaryRow",
    "build_location_filter",
    "build_report",
    "classify",
    "detail",
    "flatten_printers",
    "summarize",
]
