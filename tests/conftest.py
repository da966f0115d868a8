"""Shared fixtures for reportagg tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

SAMPLE_DATA = Path(__file__).parent / "sample_data"


def make_entry(
    path: list[str],
    outcome: str = "pass",
    group: Optional[str] = None,
    time: str = "2024-05-01T10:00:00Z",
    output: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a raw test entry dict."""
    entry: Dict[str, Any] = {"path": path, "time": time, "outcome": outcome}
    if output is not None:
        entry["output"] = output
    if group is not None:
        entry["meta"] = {"group": group}
    return entry


def make_report(
    gateway_url: Optional[str] = "https://gw.example.com",
    entries: Optional[Dict[str, Dict[str, Any]]] = None,
    version: Optional[str] = None,
    job_url: Optional[str] = None,
    time: str = "2024-05-01T10:00:00Z",
) -> Dict[str, Any]:
    """Build a raw report document; ``gateway_url=None`` omits TestMetadata."""
    doc: Dict[str, Any] = {}
    if gateway_url is not None:
        meta: Dict[str, str] = {"gateway_url": gateway_url}
        if version is not None:
            meta["version"] = version
        if job_url is not None:
            meta["job_url"] = job_url
        doc["TestMetadata"] = {"time": time, "meta": meta}
    doc.update(entries or {})
    return doc


@pytest.fixture
def sample_data() -> Path:
    """Directory holding JSON report fixtures."""
    return SAMPLE_DATA


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a report document (dict or raw text) under ``tmp_path``."""

    def _write(name: str, content: Any) -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture(name="make_report")
def make_report_fixture() -> Callable[..., Dict[str, Any]]:
    return make_report


@pytest.fixture(name="make_entry")
def make_entry_fixture() -> Callable[..., Dict[str, Any]]:
    return make_entry
