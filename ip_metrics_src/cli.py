"""Command-line entry point for IP daily metrics.

Reads a unified database document (JSON) and prints derived metrics as
JSON on stdout.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from .aggregator import aggregate_metrics, derive_metrics_range
from .config import DeriveOptions, config
from .deriver import derive_daily_metrics
from .reports import MetricsReporter
from .units import FACILITY

logger = logging.getLogger(__name__)


class IPMetricsInputError(ValueError):
    """An input file could not be read or parsed."""


def load_json_file(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise IPMetricsInputError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise IPMetricsInputError(f"{path} is not valid JSON: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="IP Daily Metrics")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser):
        p.add_argument("--db", required=True, help="Unified database JSON file")
        p.add_argument("--unit", default=FACILITY, help="Unit identifier or 'facility'")
        p.add_argument("--options", help="JSON file with derivation options")

    daily = sub.add_parser("daily", help="Derive metrics for one day")
    add_common(daily)
    daily.add_argument("--date", required=True, help="Target date")

    for name, help_text in (
        ("range", "Derive one snapshot per day in a range"),
        ("aggregate", "Aggregate a range into period totals"),
        ("report", "Period summary with prior-period comparison"),
    ):
        p = sub.add_parser(name, help=help_text)
        add_common(p)
        p.add_argument("--start", required=True, help="First day (inclusive)")
        p.add_argument("--end", required=True, help="Last day (inclusive)")

    weekly = sub.add_parser("weekly", help="Seven-day summary")
    add_common(weekly)
    weekly.add_argument("--week-end", help="Last day of the week (default: last Sunday)")

    return parser


def run(args: argparse.Namespace) -> Any:
    document = load_json_file(args.db)
    options = DeriveOptions.from_dict(load_json_file(args.options)) if args.options else None

    if args.command == "daily":
        return derive_daily_metrics(document, args.date, args.unit, options).to_dict()
    if args.command == "range":
        return [s.to_dict() for s in derive_metrics_range(document, args.start, args.end, args.unit, options)]
    if args.command == "aggregate":
        snapshots = derive_metrics_range(document, args.start, args.end, args.unit, options)
        return aggregate_metrics(snapshots, args.unit, args.start, args.end).to_dict()

    reporter = MetricsReporter(options)
    if args.command == "report":
        return reporter.generate_period_summary(document, args.start, args.end, args.unit)
    return reporter.generate_weekly_summary(document, args.week_end, args.unit)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.debug else getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        result = run(args)
    except IPMetricsInputError as e:
        logger.error(f"Input error: {e}")
        return 1

    print(json.dumps(result, indent=2))
    return 0
