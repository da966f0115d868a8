"""JSON loader + schema validation for per-run test reports.

Provides a single entrypoint to parse raw report bytes, validate them against
the packaged JSON schema, and return a :class:`ValidatedReport` whose field
types are guaranteed for downstream aggregation.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Union

import jsonschema
from jsonschema.exceptions import best_match

from reportagg.errors import (
    MalformedJsonError,
    ReportError,
    ReportReadError,
    SchemaValidationError,
)
from reportagg.logging import get_logger
from reportagg.report.model import METADATA_KEY, RunMetadata, TestEntry, ValidatedReport

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def report_schema() -> Dict[str, Any]:
    """Return the packaged report JSON schema."""
    try:
        with (
            resources.files("reportagg.schemas")
            .joinpath("report.json")
            .open("r", encoding="utf-8")
        ) as f:  # type: ignore[attr-defined]
            return json.load(f)
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "Failed to locate packaged report schema 'reportagg/schemas/report.json'."
        ) from exc


@lru_cache(maxsize=1)
def _validator() -> jsonschema.Draft7Validator:
    schema = report_schema()
    jsonschema.Draft7Validator.check_schema(schema)
    return jsonschema.Draft7Validator(schema)


def _json_location(path: Any) -> str:
    """Render a jsonschema error path as ``$.key[0]`` notation."""
    location = "$"
    for part in path:
        if isinstance(part, int):
            location += f"[{part}]"
        else:
            location += f".{part}"
    return location


def parse_report(raw: Union[bytes, str]) -> ValidatedReport:
    """Parse and validate a raw report document.

    Args:
        raw: The report as bytes (UTF-8) or text.

    Returns:
        The validated report. ``metadata`` is ``None`` when the document has no
        ``TestMetadata`` block.

    Raises:
        MalformedJsonError: If the input is not valid JSON.
        SchemaValidationError: If the JSON does not match the report schema.
    """
    # ValueError covers JSONDecodeError, UnicodeDecodeError and the int digit limit
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise MalformedJsonError(f"invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise SchemaValidationError(
            f"report must be a JSON object, got {type(data).__name__}"
        )

    error = best_match(_validator().iter_errors(data))
    if error is not None:
        raise SchemaValidationError(
            error.message, location=_json_location(error.absolute_path)
        )

    metadata = None
    if METADATA_KEY in data:
        metadata = RunMetadata.from_raw(data[METADATA_KEY])

    entries = tuple(
        TestEntry.from_raw(name, value)
        for name, value in data.items()
        if name != METADATA_KEY
    )
    logger.debug(
        "Validated report with %d entries (metadata present: %s)",
        len(entries),
        metadata is not None,
    )
    return ValidatedReport(metadata=metadata, entries=entries)


def load_report(path: Union[str, Path]) -> ValidatedReport:
    """Read a report file from disk and validate it.

    Raises:
        ReportReadError: If the file cannot be read.
        MalformedJsonError: If the file is not valid JSON.
        SchemaValidationError: If the JSON does not match the report schema.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ReportReadError(
            f"cannot read report: {exc.strerror or exc}", source=str(path)
        ) from exc

    try:
        return parse_report(raw)
    except ReportError as exc:
        raise exc.with_source(str(path))
