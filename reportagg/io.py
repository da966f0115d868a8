"""Reading and writing the consolidated summary artifact."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from reportagg.aggregate import ConsolidatedOutput, RunSummary
from reportagg.logging import get_logger

logger = get_logger(__name__)


def consolidated_to_dict(output: ConsolidatedOutput) -> Dict[str, Any]:
    """Return a JSON-ready representation keyed by gateway URL."""
    return {url: summary.to_dict() for url, summary in output.items()}


def consolidated_from_dict(data: Dict[str, Any]) -> ConsolidatedOutput:
    """Rebuild a consolidated output from :func:`consolidated_to_dict` data."""
    if not isinstance(data, dict):
        raise ValueError("Consolidated output must be a JSON object")
    return {str(url): RunSummary.from_dict(entry) for url, entry in data.items()}


def dumps_consolidated(output: ConsolidatedOutput, indent: int = 2) -> str:
    return json.dumps(consolidated_to_dict(output), indent=indent)


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory exists for a file path."""
    path.parent.mkdir(parents=True, exist_ok=True)


def write_consolidated(
    path: Union[str, Path], output: ConsolidatedOutput, indent: int = 2
) -> Path:
    """Write the consolidated output to ``path`` in full.

    Parent directories are created as needed. ``OSError`` propagates to the
    caller; failing to write the artifact is fatal to a run.
    """
    path = Path(path)
    ensure_parent_dir(path)
    path.write_text(dumps_consolidated(output, indent=indent) + "\n", encoding="utf-8")
    logger.debug("Wrote %d gateway summaries to %s", len(output), path)
    return path


def read_consolidated(path: Union[str, Path]) -> ConsolidatedOutput:
    """Read a consolidated output previously written by :func:`write_consolidated`."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return consolidated_from_dict(data)
