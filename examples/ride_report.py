"""Example: Ride ridership and rating report from JSON exports.

Reads ticket-sale and review exports (JSON arrays as returned by the park
backend), filters them to a reporting window and prints one row per ride
with ridership, revenue, average riders per day and average rating.

Usage:
    python examples/ride_report.py --tickets tickets.json --reviews reviews.json \
        --start 2025-01-01 --end 2025-01-31 --sort average_per_day --desc
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from park_core.formatters import format_ride_stats
from park_core.records import RecordKind, normalize_sources
from park_core.reporting import (
    DateRange,
    Dimension,
    FilterSpec,
    NumericRange,
    SortDirection,
    SortSpec,
    aggregate,
    daily_series,
    filter_records,
    filter_stats,
    sort_stats,
)


@dataclass
class Args:
    tickets: Path
    reviews: Optional[Path]
    start: Optional[str]
    end: Optional[str]
    sort: Optional[str]
    desc: bool
    min_rating: Optional[float]
    daily: bool
    quiet: bool


def parse_args() -> Args:
    p = argparse.ArgumentParser(description="Per-ride ridership and rating report")
    p.add_argument("--tickets", type=Path, required=True, help="Ticket sales JSON export")
    p.add_argument("--reviews", type=Path, help="Ride reviews JSON export")
    p.add_argument("--start", help="First day of the reporting window (YYYY-MM-DD)")
    p.add_argument("--end", help="Last day of the reporting window (YYYY-MM-DD)")
    p.add_argument("--sort", help="Stat to sort by (e.g. total_ridership, average_rating)")
    p.add_argument("--desc", action="store_true", help="Sort descending")
    p.add_argument("--min-rating", type=float, help="Hide rides rated below this")
    p.add_argument("--daily", action="store_true", help="Also print the daily ridership table")
    p.add_argument("--quiet", action="store_true", help="Less logging")

    a = p.parse_args()
    return Args(
        tickets=a.tickets,
        reviews=a.reviews,
        start=a.start,
        end=a.end,
        sort=a.sort,
        desc=a.desc,
        min_rating=a.min_rating,
        daily=a.daily,
        quiet=a.quiet,
    )


def read_json(path: Path) -> list:
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    sources = {RecordKind.TICKET: read_json(args.tickets)}
    if args.reviews:
        sources[RecordKind.REVIEW] = read_json(args.reviews)

    window = DateRange.from_strings(args.start, args.end)
    spec = FilterSpec(date_range=window)
    spec.validate()

    records = filter_records(normalize_sources(sources).records, spec)
    stats = aggregate(records, Dimension.RIDE, date_range_hint=window)

    if args.min_rating is not None:
        stats = filter_stats(stats, [NumericRange("average_rating", min=args.min_rating)])
    direction = SortDirection.DESCENDING if args.desc else SortDirection.ASCENDING
    stats = sort_stats(stats, SortSpec(args.sort, direction))

    print(format_ride_stats(stats))

    if args.daily:
        print("\nDaily ridership:")
        print(daily_series(records))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(130)
