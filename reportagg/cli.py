"""Command-line interface for reportagg."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import List, Optional

import yaml

from reportagg.aggregate import aggregate_files
from reportagg.config import DEFAULT_CONFIG, AggregatorConfig, load_config
from reportagg.io import dumps_consolidated, write_consolidated
from reportagg.logging import get_logger, set_global_log_level

logger = get_logger(__name__)


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    """Return grammatically correct unit for count n."""
    if n == 1:
        return singular
    return plural or (singular + "s")


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _resolve_config(
    config_path: Optional[Path], jobs: Optional[int], strict: bool
) -> AggregatorConfig:
    """Combine the optional config file with explicit command-line flags."""
    base = load_config(config_path) if config_path is not None else DEFAULT_CONFIG
    return base.override(jobs=jobs, strict=True if strict else None)


def _aggregate(
    output: Path,
    inputs: List[Path],
    config: AggregatorConfig,
    stdout: bool,
    quiet: bool,
) -> int:
    """Aggregate ``inputs`` into ``output`` and return the exit status.

    Per-file failures are logged and skipped. The status is 0 unless writing
    the output fails, or ``config.strict`` is set and some input failed.
    """
    _start_time = perf_counter()
    logger.info(
        f"Aggregating {len(inputs)} report {_plural(len(inputs), 'file')} into {output}"
    )

    batch = aggregate_files(inputs, config)

    try:
        written = write_consolidated(output, batch.output, indent=config.indent)
    except OSError as e:
        logger.error(f"Failed to write output {output}: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to write output {output}: {e}", file=sys.stderr)
        return 1

    if stdout:
        print(dumps_consolidated(batch.output, indent=config.indent))
    elif not quiet:
        print(
            f"✅ {len(batch.output)} {_plural(len(batch.output), 'gateway')} "
            f"written to: {written}"
        )

    if batch.failures:
        print(
            f"⚠️  Skipped {len(batch.failures)} "
            f"{_plural(len(batch.failures), 'file')} with errors",
            file=sys.stderr,
        )

    _elapsed = perf_counter() - _start_time
    logger.info(f"Aggregation completed in {_format_duration(_elapsed)}")

    if batch.failures and config.strict:
        logger.error("Strict mode: exiting non-zero because some inputs failed")
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reportagg",
        description=(
            "Merge per-gateway test reports into one summary keyed by gateway URL."
        ),
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    verbosity.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML file with aggregation settings",
    )
    parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=None,
        help="Worker threads for reading reports (default: 1)",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Also print the consolidated JSON to stdout",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any input file could not be processed",
    )
    parser.add_argument("output", type=Path, help="Path of the consolidated JSON")
    parser.add_argument(
        "inputs", type=Path, nargs="*", help="Per-run JSON report files"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``reportagg`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = build_parser()

    effective_args = sys.argv[1:] if argv is None else argv

    # If no arguments are provided, show help and exit cleanly
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    try:
        config = _resolve_config(args.config, args.jobs, args.strict)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Invalid configuration: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    status = _aggregate(
        output=args.output,
        inputs=args.inputs,
        config=config,
        stdout=args.stdout,
        quiet=args.quiet,
    )
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
