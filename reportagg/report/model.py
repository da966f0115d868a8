"""Typed in-memory representation of a validated test report."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

#: Reserved top-level key holding run-level metadata.
METADATA_KEY = "TestMetadata"


class Outcome(str, Enum):
    """Terminal result of a single test case."""

    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class RunMetadata:
    """Run-level descriptor copied from the ``TestMetadata`` block.

    Attributes:
        time: Execution timestamp, passed through verbatim.
        gateway_url: Identifier of the environment that produced the run.
        version: Optional semantic version of the system under test.
        job_url: Optional URL of the CI job that produced the report.
    """

    time: str
    gateway_url: str
    version: Optional[str] = None
    job_url: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "RunMetadata":
        meta = raw["meta"]
        return cls(
            time=raw["time"],
            gateway_url=meta["gateway_url"],
            version=meta.get("version"),
            job_url=meta.get("job_url"),
        )

    def to_dict(self) -> Dict[str, str]:
        """Convert to a JSON-ready dict, omitting absent optional fields."""
        data: Dict[str, str] = {"time": self.time}
        if self.version is not None:
            data["version"] = self.version
        if self.job_url is not None:
            data["job_url"] = self.job_url
        data["gateway_url"] = self.gateway_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunMetadata":
        return cls(
            time=data["time"],
            gateway_url=data["gateway_url"],
            version=data.get("version"),
            job_url=data.get("job_url"),
        )


@dataclass(frozen=True, slots=True)
class TestEntry:
    """One test case from a report.

    Attributes:
        name: Top-level key the entry was stored under.
        path: Hierarchical location; a single segment marks a root-level test.
        time: Execution timestamp.
        outcome: Pass, fail or skip.
        output: Optional captured log output.
        group: Optional logical group label from ``meta.group``.
    """

    __test__ = False  # not a pytest test class

    name: str
    path: Tuple[str, ...]
    time: str
    outcome: Outcome
    output: Optional[str] = None
    group: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return len(self.path) == 1

    @classmethod
    def from_raw(cls, name: str, raw: Dict[str, Any]) -> "TestEntry":
        meta = raw.get("meta") or {}
        return cls(
            name=name,
            path=tuple(raw["path"]),
            time=raw["time"],
            outcome=Outcome(raw["outcome"]),
            output=raw.get("output"),
            group=meta.get("group"),
        )


@dataclass(frozen=True, slots=True)
class ValidatedReport:
    """A report document whose shape has been checked against the schema.

    ``metadata`` is ``None`` when the document carried no ``TestMetadata``
    block; the aggregator decides whether that is acceptable.
    """

    metadata: Optional[RunMetadata]
    entries: Tuple[TestEntry, ...] = ()

    @property
    def root_entries(self) -> Tuple[TestEntry, ...]:
        """Entries at the top of the test hierarchy (path length 1)."""
        return tuple(entry for entry in self.entries if entry.is_root)

    @property
    def nested_entries(self) -> Tuple[TestEntry, ...]:
        """Sub-steps of root tests (path length > 1)."""
        return tuple(entry for entry in self.entries if not entry.is_root)
