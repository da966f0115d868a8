"""reportagg: consolidate per-gateway test reports.

Reads one JSON test report per execution environment, validates each against
a packaged schema, tallies root-level test outcomes per group, and merges the
per-run summaries into a single mapping keyed by gateway URL.

Primary API:
    parse_report() / load_report() - Validate a raw report document
    summarize() - Turn one validated report into (gateway_url, RunSummary)
    aggregate_all() - Best-effort merge of many report files
    aggregate_files() - Same, also returning processed and failed files

Example:
    from reportagg import aggregate_all, write_consolidated

    output = aggregate_all(["staging.json", "prod.json"])
    write_consolidated("summary.json", output)
"""

from __future__ import annotations

from reportagg import cli, logging
from reportagg._version import __version__
from reportagg.aggregate import (
    BatchResult,
    ConsolidatedOutput,
    FileFailure,
    FileOutcome,
    RunSummary,
    Tally,
    aggregate_all,
    aggregate_files,
    merge_summaries,
    process_file,
    summarize,
)
from reportagg.config import DEFAULT_CONFIG, AggregatorConfig, load_config
from reportagg.errors import (
    MalformedJsonError,
    MissingMetadataError,
    ReportError,
    ReportReadError,
    SchemaValidationError,
)
from reportagg.io import read_consolidated, write_consolidated
from reportagg.report import (
    Outcome,
    RunMetadata,
    TestEntry,
    ValidatedReport,
    load_report,
    parse_report,
)

__all__ = [
    # Version
    "__version__",
    # Modules
    "cli",
    "logging",
    # Report model
    "Outcome",
    "RunMetadata",
    "TestEntry",
    "ValidatedReport",
    "load_report",
    "parse_report",
    # Aggregation
    "Tally",
    "RunSummary",
    "ConsolidatedOutput",
    "BatchResult",
    "FileFailure",
    "FileOutcome",
    "summarize",
    "merge_summaries",
    "process_file",
    "aggregate_files",
    "aggregate_all",
    # IO
    "read_consolidated",
    "write_consolidated",
    # Config
    "AggregatorConfig",
    "DEFAULT_CONFIG",
    "load_config",
    # Errors
    "ReportError",
    "ReportReadError",
    "MalformedJsonError",
    "SchemaValidationError",
    "MissingMetadataError",
]
