"""Error taxonomy for report ingestion.

Every error is scoped to a single input file. The batch loop in
:mod:`reportagg.aggregate` catches :class:`ReportError` per file, logs it and
moves on, so one bad report never sinks the whole run.
"""

from __future__ import annotations

from typing import Optional


class ReportError(ValueError):
    """Base class for per-file report failures.

    Args:
        message: Human-readable description of the failure.
        source: Optional file path the report was read from.
    """

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source

    def with_source(self, source: str) -> "ReportError":
        """Attach the originating file path and return self for re-raising."""
        self.source = source
        return self

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message


class ReportReadError(ReportError):
    """The report file could not be read from disk."""


class MalformedJsonError(ReportError):
    """The report is not valid JSON."""


class SchemaValidationError(ReportError):
    """The report is valid JSON but does not match the report schema.

    Attributes:
        location: JSON path of the first mismatch (e.g. ``$.test_a.path``).
        reason: Validator message for the mismatch, without location.
    """

    def __init__(
        self,
        reason: str,
        location: str = "$",
        source: Optional[str] = None,
    ) -> None:
        super().__init__(f"schema mismatch at {location}: {reason}", source)
        self.location = location
        self.reason = reason


class MissingMetadataError(ReportError):
    """The report is well-formed but has no ``TestMetadata`` block."""
