"""Grouped outcome tallies per run, merged across runs by gateway URL.

A single validated report is folded into a :class:`RunSummary`: only root-level
tests count, each bucketed by its ``meta.group`` label. Many summaries are then
merged into a consolidated mapping keyed by gateway URL, last write wins.

Batch processing isolates every file: :func:`process_file` returns a
:class:`FileOutcome` carrying either a result or the error, and the batch loop
collects successes and logs failures without aborting.
"""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from reportagg.config import DEFAULT_CONFIG, AggregatorConfig
from reportagg.errors import MissingMetadataError, ReportError
from reportagg.logging import get_logger
from reportagg.report.loader import load_report
from reportagg.report.model import Outcome, RunMetadata, ValidatedReport

logger = get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True, slots=True)
class Tally:
    """Outcome counts for one group of root-level tests."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0

    def __post_init__(self) -> None:
        for name in ("passed", "failed", "skipped"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"Tally.{name} must be a non-negative int: {value!r}")

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.skipped

    def to_dict(self) -> Dict[str, int]:
        return {"pass": self.passed, "fail": self.failed, "skip": self.skipped}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tally":
        return cls(
            passed=int(data.get("pass", 0)),
            failed=int(data.get("fail", 0)),
            skipped=int(data.get("skip", 0)),
        )


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Summary of one run: its metadata and per-group tallies.

    ``results`` is stored as a read-only mapping; groups keep the order in
    which they were first seen.
    """

    metadata: RunMetadata
    results: Mapping[str, Tally] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", MappingProxyType(dict(self.results)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "metadata": self.metadata.to_dict(),
            "results": {group: t.to_dict() for group, t in self.results.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunSummary":
        """Construct a RunSummary from a dictionary produced by :meth:`to_dict`."""
        return cls(
            metadata=RunMetadata.from_dict(data["metadata"]),
            results={
                str(group): Tally.from_dict(t)
                for group, t in (data.get("results") or {}).items()
            },
        )


#: Mapping of gateway URL to the summary of the run that produced it.
ConsolidatedOutput = Dict[str, RunSummary]


def group_tallies(
    report: ValidatedReport, default_group: str = DEFAULT_CONFIG.default_group
) -> Dict[str, Tally]:
    """Count root-level outcomes per group label.

    Nested entries (path length > 1) are sub-steps of a root test and are not
    counted. Entries without a group, or with an empty one, fall into
    ``default_group``.
    """
    counts: Counter[Tuple[str, Outcome]] = Counter()
    for entry in report.root_entries:
        counts[(entry.group or default_group, entry.outcome)] += 1

    # Groups keep the order in which they first appear in the report
    groups = dict.fromkeys(group for group, _ in counts)
    return {
        group: Tally(
            passed=counts[(group, Outcome.PASS)],
            failed=counts[(group, Outcome.FAIL)],
            skipped=counts[(group, Outcome.SKIP)],
        )
        for group in groups
    }


def summarize(
    report: ValidatedReport, config: Optional[AggregatorConfig] = None
) -> Tuple[str, RunSummary]:
    """Summarize a validated report into its gateway URL and run summary.

    Args:
        report: Validated report document.
        config: Optional aggregation settings; defaults to ``DEFAULT_CONFIG``.

    Returns:
        ``(gateway_url, summary)`` where ``gateway_url`` is the routing key for
        the consolidated output.

    Raises:
        MissingMetadataError: If the report has no ``TestMetadata`` block.
    """
    config = config or DEFAULT_CONFIG
    if report.metadata is None:
        raise MissingMetadataError("no TestMetadata found in report")

    results = group_tallies(report, config.default_group)
    logger.debug(
        "Summarized %d root tests (%d nested skipped) into %d groups for %s",
        len(report.root_entries),
        len(report.nested_entries),
        len(results),
        report.metadata.gateway_url,
    )
    return report.metadata.gateway_url, RunSummary(report.metadata, results)


def merge_summaries(
    pairs: Iterable[Tuple[str, RunSummary]],
    into: Optional[ConsolidatedOutput] = None,
) -> ConsolidatedOutput:
    """Fold ``(gateway_url, summary)`` pairs into one mapping, in order.

    When two pairs share a gateway URL, the later one replaces the earlier.
    """
    output: ConsolidatedOutput = {} if into is None else into
    for gateway_url, summary in pairs:
        if gateway_url in output:
            logger.warning(
                "Gateway %s reported more than once; keeping the later report",
                gateway_url,
            )
        output[gateway_url] = summary
    return output


@dataclass(frozen=True)
class FileFailure:
    """An input file that was skipped, and why."""

    path: str
    error: ReportError


@dataclass(frozen=True)
class FileOutcome:
    """Result of processing one file: a summary pair or an error."""

    path: str
    result: Optional[Tuple[str, RunSummary]] = None
    error: Optional[ReportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Outcome of aggregating a batch of report files."""

    output: ConsolidatedOutput = field(default_factory=dict)
    processed: List[str] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def process_file(
    path: PathLike, config: Optional[AggregatorConfig] = None
) -> FileOutcome:
    """Load, validate and summarize one report file without raising.

    Any :class:`ReportError` is captured on the returned outcome.
    """
    path_str = str(path)
    try:
        report = load_report(path)
        try:
            pair = summarize(report, config)
        except ReportError as exc:
            raise exc.with_source(path_str)
    except ReportError as exc:
        return FileOutcome(path=path_str, error=exc)
    return FileOutcome(path=path_str, result=pair)


def aggregate_files(
    files: Sequence[PathLike],
    config: Optional[AggregatorConfig] = None,
    jobs: Optional[int] = None,
) -> BatchResult:
    """Aggregate report files into a consolidated output, best effort.

    Files are processed independently. A failing file is logged and left out of
    the output; the remaining files are still processed. Outcomes are merged in
    file-list order so that last-write-wins on duplicate gateway URLs follows
    that order even when ``jobs > 1``.

    Args:
        files: Report file paths, in processing order.
        config: Optional aggregation settings; defaults to ``DEFAULT_CONFIG``.
        jobs: Worker threads; overrides ``config.jobs`` when given.

    Returns:
        The consolidated output together with processed and failed paths.
    """
    config = config or DEFAULT_CONFIG
    workers = jobs if jobs is not None else config.jobs
    if workers < 1:
        raise ValueError("jobs must be >= 1")

    if workers > 1 and len(files) > 1:
        logger.debug("Processing %d files with %d workers", len(files), workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields results in submission order
            outcomes = list(executor.map(lambda p: process_file(p, config), files))
    else:
        outcomes = [process_file(p, config) for p in files]

    batch = BatchResult()
    for outcome in outcomes:
        if outcome.error is not None:
            logger.error(
                "Error processing %s: %s: %s",
                outcome.path,
                type(outcome.error).__name__,
                outcome.error.message,
            )
            batch.failures.append(FileFailure(outcome.path, outcome.error))
        elif outcome.result is not None:
            merge_summaries([outcome.result], into=batch.output)
            batch.processed.append(outcome.path)

    logger.info(
        "Aggregated %d of %d report files into %d gateways",
        len(batch.processed),
        len(files),
        len(batch.output),
    )
    return batch


def aggregate_all(
    files: Sequence[PathLike], config: Optional[AggregatorConfig] = None
) -> ConsolidatedOutput:
    """Aggregate report files and return only the consolidated mapping.

    See :func:`aggregate_files` for the failure policy.
    """
    return aggregate_files(files, config).output
