"""Configuration for report aggregation."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Union

import yaml

from reportagg.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AggregatorConfig:
    """Settings that shape how reports are summarized and written."""

    # Group label for root tests without meta.group
    default_group: str = "Others"

    # Worker threads used to read and summarize files
    jobs: int = 1

    # Exit non-zero when any input file failed
    strict: bool = False

    # JSON indentation of the consolidated output
    indent: int = 2

    def __post_init__(self) -> None:
        if not isinstance(self.default_group, str) or not self.default_group:
            raise ValueError("default_group must be a non-empty string")
        if (
            not isinstance(self.jobs, int)
            or isinstance(self.jobs, bool)
            or self.jobs < 1
        ):
            raise ValueError("jobs must be an integer >= 1")
        if not isinstance(self.strict, bool):
            raise ValueError("strict must be a boolean")
        if (
            not isinstance(self.indent, int)
            or isinstance(self.indent, bool)
            or self.indent < 0
        ):
            raise ValueError("indent must be an integer >= 0")

    def override(self, **changes: Any) -> "AggregatorConfig":
        """Return a copy with the given non-``None`` fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_config(path: Union[str, Path]) -> AggregatorConfig:
    """Load an :class:`AggregatorConfig` from a YAML file.

    An empty file yields the defaults.

    Raises:
        ValueError: If the YAML is not a mapping, has unknown keys, or holds
            values of the wrong type.
    """
    path = Path(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must map to a dictionary at top-level.")

    allowed = {f.name for f in fields(AggregatorConfig)}
    extra = set(map(str, data.keys())) - allowed
    if extra:
        raise ValueError(
            f"Unrecognized key(s) in config {path}: {', '.join(sorted(extra))}. "
            f"Allowed keys are {sorted(allowed)}"
        )

    config = AggregatorConfig(**data)
    logger.debug("Loaded config from %s: %s", path, config)
    return config


# Global configuration instance
DEFAULT_CONFIG = AggregatorConfig()
