"""Report parsing and validation."""

from reportagg.report.loader import load_report, parse_report, report_schema
from reportagg.report.model import (
    METADATA_KEY,
    Outcome,
    RunMetadata,
    TestEntry,
    ValidatedReport,
)

__all__ = [
    "METADATA_KEY",
    "Outcome",
    "RunMetadata",
    "TestEntry",
    "ValidatedReport",
    "load_report",
    "parse_report",
    "report_schema",
]
