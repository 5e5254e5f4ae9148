"""Aggregation Engine: per-ride, per-item and per-worker rollups.

Every function takes canonical records that have already been filtered and
returns new frozen snapshots; nothing is cached between calls.

Rollups where a number would be misleading carry explicit sentinels instead:

- ``average_rating`` / ``average_per_day`` are NA when there is nothing to
  divide by
- an empty item group has most profitable ``Extremum(None, 0)`` and least
  profitable ``Extremum(None, NO_REVENUE)``
- a cancellation rate with no cancelled requests (or no usable dates) is 0

Examples:
    >>> from park_core.reporting import Dimension, aggregate
    >>> rides = aggregate(records, Dimension.RIDE)
    >>> [(s.ride_name, s.total_ridership, s.average_per_day) for s in rides]
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from park_core.config import ReportConfig
from park_core.records.models import CanonicalRecord, MaintenanceStatus, RecordKind
from park_core.reporting.types import (
    NA,
    NO_REVENUE,
    CancellationRate,
    DateRange,
    Dimension,
    Extremum,
    GroupStat,
    ItemStat,
    ProfitabilityReport,
    RideStat,
    SalesSummary,
    StatusSummary,
    Tally,
    WorkerStat,
    frozen_mapping,
)
from park_core.utils import as_date, days_inclusive, month_span

logger = logging.getLogger(__name__)

# Display order of sale kinds in summaries
SALE_KIND_ORDER = (RecordKind.TICKET, RecordKind.MERCHANDISE, RecordKind.FOOD)


def _of_kind(records: Iterable[CanonicalRecord], *kinds: RecordKind) -> List[CanonicalRecord]:
    return [r for r in records if r.kind in kinds]


def _units(record: CanonicalRecord) -> int:
    """Units sold by a sale record; a missing quantity counts as one."""
    quantity = getattr(record, "quantity", None)
    return 1 if quantity is None else quantity


# ============================================================================
# Ride dimension
# ============================================================================


def ride_stats(
    records: Iterable[CanonicalRecord],
    date_range_hint: Optional[DateRange] = None,
    ride_names: Optional[Sequence[str]] = None,
    config: Optional[ReportConfig] = None,
) -> Tuple[RideStat, ...]:
    """Ridership, revenue and rating rollup per ride.

    Tickets provide ridership (one ticket = one rider) and revenue; reviews
    provide the average rating. The per-day average is normalized by the
    explicit reporting window when ``date_range_hint`` has both bounds,
    otherwise by the number of distinct calendar days on which that ride
    sold a dated ticket.

    Args:
        records: Filtered canonical records (other kinds are ignored).
        date_range_hint: Reporting window selected by the user, if any.
        ride_names: Ride catalog. Rides listed here appear even without any
            tickets or reviews, in catalog order, ahead of uncatalogued rides.
        config: Supplies the label for tickets without a ride.

    Returns:
        One RideStat per ride.

    Examples:
        >>> stats = ride_stats(records, DateRange.from_strings("2025-01-01", "2025-01-10"))
        >>> stats[0].active_day_count
        10
    """
    config = config or ReportConfig()
    records = list(records)
    tickets = _of_kind(records, RecordKind.TICKET)
    reviews = _of_kind(records, RecordKind.REVIEW)
    unknown = config.unknown_label

    sales = pd.DataFrame(
        {
            "ride": [t.ride_name or unknown for t in tickets],
            "revenue": [t.revenue for t in tickets],
            "day": [as_date(t.purchase_date) if t.purchase_date is not None else None for t in tickets],
        },
        columns=["ride", "revenue", "day"],
    )
    ratings = pd.DataFrame(
        {
            "ride": [r.ride_name or unknown for r in reviews],
            "score": [r.score for r in reviews],
        },
        columns=["ride", "score"],
    )

    by_ride: Dict[str, Dict[str, Any]] = {}
    if not sales.empty:
        grouped = sales.groupby("ride", sort=False).agg(
            count=("revenue", "size"),
            revenue=("revenue", "sum"),
            days=("day", "nunique"),
        )
        for ride, row in grouped.iterrows():
            by_ride.setdefault(ride, {}).update(
                count=int(row["count"]), revenue=float(row["revenue"]), days=int(row["days"])
            )
    if not ratings.empty:
        grouped = ratings.groupby("ride", sort=False)["score"].agg(["mean", "size"])
        for ride, row in grouped.iterrows():
            by_ride.setdefault(ride, {}).update(rating=float(row["mean"]), reviews=int(row["size"]))

    order = list(dict.fromkeys(list(ride_names or []) + list(by_ride)))
    window_days = None
    if date_range_hint is not None and date_range_hint.is_closed:
        # A reversed window still counts as one day
        window_days = max(1, days_inclusive(date_range_hint.start, date_range_hint.end))

    stats = []
    for ride in order:
        values = by_ride.get(ride, {})
        count = values.get("count", 0)
        active_days = window_days if window_days is not None else values.get("days", 0)
        stats.append(
            RideStat(
                group_key=ride,
                count=count,
                revenue=values.get("revenue", 0.0),
                average_rating=values.get("rating", NA),
                total_reviews=values.get("reviews", 0),
                active_day_count=active_days,
                average_per_day=count / active_days if active_days > 0 else NA,
            )
        )

    logger.debug("Built ride stats for %d ride(s) from %d ticket(s)", len(stats), len(tickets))
    return tuple(stats)


# ============================================================================
# Item dimension and profitability
# ============================================================================


def item_stats(
    records: Iterable[CanonicalRecord],
    config: Optional[ReportConfig] = None,
) -> Tuple[ItemStat, ...]:
    """Sales count, units and revenue per (sale kind, item name).

    Tickets are grouped by ticket type, falling back to the ride name.
    Items appear in order of first sale.
    """
    config = config or ReportConfig()
    sales = _of_kind(records, *SALE_KIND_ORDER)
    if not sales:
        return ()

    df = pd.DataFrame(
        {
            "kind": [s.kind.value for s in sales],
            "item": [s.item_name or config.unknown_label for s in sales],
            "revenue": [s.revenue for s in sales],
            "quantity": [_units(s) for s in sales],
        }
    )
    grouped = df.groupby(["kind", "item"], sort=False).agg(
        count=("revenue", "size"),
        revenue=("revenue", "sum"),
        quantity=("quantity", "sum"),
    )

    return tuple(
        ItemStat(
            group_key=item,
            count=int(row["count"]),
            revenue=float(row["revenue"]),
            kind=RecordKind(kind),
            quantity=int(row["quantity"]),
        )
        for (kind, item), row in grouped.iterrows()
    )


def item_profitability(
    records: Iterable[CanonicalRecord],
    config: Optional[ReportConfig] = None,
) -> ProfitabilityReport:
    """Most and least profitable items among the given sales.

    Items are ordered by revenue, highest first; items with equal revenue
    keep their order of first sale. The most profitable item is the first
    of that order and the least profitable the last.

    Returns:
        ProfitabilityReport. With no sales, most_profitable is
        ``Extremum(None, 0.0)`` and least_profitable is
        ``Extremum(None, NO_REVENUE)``.

    Examples:
        >>> report = item_profitability([])
        >>> report.most_profitable.has_data, report.least_profitable.revenue
        (False, inf)
    """
    ranked = sorted(item_stats(records, config), key=lambda s: s.revenue, reverse=True)
    if not ranked:
        return ProfitabilityReport(
            items=(),
            most_profitable=Extremum(name=None, revenue=0.0),
            least_profitable=Extremum(name=None, revenue=NO_REVENUE),
            total_revenue=0.0,
        )

    return ProfitabilityReport(
        items=tuple(ranked),
        most_profitable=Extremum(name=ranked[0].name, revenue=ranked[0].revenue),
        least_profitable=Extremum(name=ranked[-1].name, revenue=ranked[-1].revenue),
        total_revenue=float(sum(s.revenue for s in ranked)),
    )


def profitability_by_kind(
    records: Iterable[CanonicalRecord],
    config: Optional[ReportConfig] = None,
) -> Dict[RecordKind, ProfitabilityReport]:
    """Profitability report per sale kind (every sale kind present)."""
    records = list(records)
    return {kind: item_profitability(_of_kind(records, kind), config) for kind in SALE_KIND_ORDER}


# ============================================================================
# Worker dimension and maintenance rollups
# ============================================================================


def worker_stats(records: Iterable[CanonicalRecord]) -> Tuple[WorkerStat, ...]:
    """Completed, in-progress and cancelled tallies per assigned employee.

    Requests without an assignee are skipped. Workers are ordered by
    completed count, highest first; ties keep first-assignment order.
    """
    tallies: Dict[Any, Dict[str, Any]] = {}
    for request in _of_kind(records, RecordKind.MAINTENANCE):
        key = request.assignee_id if request.assignee_id is not None else request.assignee_name
        if key is None:
            continue
        entry = tallies.setdefault(
            key, {"name": request.assignee_name, "statuses": Counter(), "last": None}
        )
        if entry["name"] is None:
            entry["name"] = request.assignee_name
        entry["statuses"][request.status] += 1
        if request.status == MaintenanceStatus.COMPLETED and request.completion_date is not None:
            if entry["last"] is None or request.completion_date > entry["last"]:
                entry["last"] = request.completion_date

    stats = []
    for key, entry in tallies.items():
        statuses = entry["statuses"]
        total = sum(statuses.values())
        stats.append(
            WorkerStat(
                group_key=key,
                count=total,
                revenue=0.0,
                name=entry["name"],
                completed=statuses[MaintenanceStatus.COMPLETED],
                in_progress=statuses[MaintenanceStatus.IN_PROGRESS],
                cancelled=statuses[MaintenanceStatus.CANCELLED],
                total=total,
                last_completed_date=entry["last"],
            )
        )

    return tuple(sorted(stats, key=lambda s: s.completed, reverse=True))


def cancellation_rate(records: Iterable[CanonicalRecord]) -> CancellationRate:
    """Cancelled maintenance requests per calendar month.

    The month span runs from the earliest to the latest cancellation date
    (completion date, else request date), counting both end months. Every
    cancelled request counts toward the numerator, dated or not.

    Examples:
        Cancellations on Jan 5, Jan 20 and Mar 2 span 3 months:

        >>> cancellation_rate(requests).rate
        1.0
    """
    cancelled = [
        r for r in _of_kind(records, RecordKind.MAINTENANCE) if r.status == MaintenanceStatus.CANCELLED
    ]
    dates = [
        d for d in (r.completion_date or r.request_date for r in cancelled) if d is not None
    ]
    if not cancelled or not dates:
        return CancellationRate(cancelled_count=len(cancelled), month_span=0, rate=0.0)

    first, last = min(dates), max(dates)
    span = month_span(first, last)
    rate = len(cancelled) / span if span > 0 else 0.0
    return CancellationRate(
        cancelled_count=len(cancelled),
        month_span=span,
        rate=rate,
        first_date=first,
        last_date=last,
    )


def status_summary(
    records: Iterable[CanonicalRecord],
    config: Optional[ReportConfig] = None,
) -> StatusSummary:
    """Maintenance request counts per status, overall and per ride."""
    config = config or ReportConfig()
    requests = _of_kind(records, RecordKind.MAINTENANCE)

    counts = Counter(r.status for r in requests)
    by_ride: Dict[MaintenanceStatus, Counter] = {status: Counter() for status in MaintenanceStatus}
    for r in requests:
        by_ride[r.status][r.ride_name or config.unknown_label] += 1

    return StatusSummary(
        total=len(requests),
        counts=frozen_mapping({status: counts[status] for status in MaintenanceStatus}),
        by_ride=frozen_mapping({status: frozen_mapping(rides) for status, rides in by_ride.items()}),
    )


# ============================================================================
# Sales summary and chart series
# ============================================================================


def _most_common(values: Iterable[Optional[str]]) -> Tally:
    # Ties go to the value seen first
    counts = Counter(v for v in values if v)
    if not counts:
        return Tally(key=None, count=0)
    key = max(counts, key=counts.__getitem__)
    return Tally(key=key, count=counts[key])


def sales_summary(records: Iterable[CanonicalRecord]) -> SalesSummary:
    """Headline figures of the unified sales report.

    Examples:
        >>> summary = sales_summary(records)
        >>> summary.most_common_payment
        Tally(key='Credit Card', count=12)
    """
    sales = _of_kind(records, *SALE_KIND_ORDER)

    revenue_by_kind = {kind: 0.0 for kind in SALE_KIND_ORDER}
    for s in sales:
        revenue_by_kind[s.kind] += s.revenue

    dated = [s for s in sales if s.record_date is not None]
    distinct_days = len({as_date(s.record_date) for s in dated})
    dated_total = sum(s.revenue for s in dated)

    return SalesSummary(
        total_revenue=float(sum(revenue_by_kind.values())),
        revenue_by_kind=frozen_mapping(revenue_by_kind),
        most_common_kind=_most_common(s.kind.display_name for s in sales),
        most_common_item=_most_common(s.item_name for s in sales),
        most_common_payment=_most_common(s.payment_method for s in sales),
        distinct_days=distinct_days,
        average_spent_per_day=dated_total / distinct_days if distinct_days else NA,
    )


def daily_series(
    records: Iterable[CanonicalRecord],
    config: Optional[ReportConfig] = None,
) -> pd.DataFrame:
    """Daily ridership per ride as a date x ride table.

    Each dated ticket contributes its quantity, or 1 when it has none.
    Undated tickets are left out.

    Returns:
        DataFrame indexed by calendar date with one column per ride,
        zero-filled; empty when there are no dated tickets.
    """
    config = config or ReportConfig()
    tickets = [t for t in _of_kind(records, RecordKind.TICKET) if t.purchase_date is not None]
    if not tickets:
        return pd.DataFrame()

    df = pd.DataFrame(
        {
            "date": [as_date(t.purchase_date) for t in tickets],
            "ride": [t.ride_name or config.unknown_label for t in tickets],
            "riders": [_units(t) for t in tickets],
        }
    )
    return df.pivot_table(index="date", columns="ride", values="riders", aggfunc="sum", fill_value=0)


def _frame_value(value: Any) -> Any:
    if value is NA:
        return np.nan
    if isinstance(value, Enum):
        return value.value
    return value


def stats_to_frame(stats: Iterable[GroupStat]) -> pd.DataFrame:
    """Tabular view of group stats; NA metrics become NaN."""
    rows = [{k: _frame_value(v) for k, v in asdict(s).items()} for s in stats]
    return pd.DataFrame(rows)


# ============================================================================
# Dispatch
# ============================================================================


def aggregate(
    records: Iterable[CanonicalRecord],
    dimension: Dimension | str,
    date_range_hint: Optional[DateRange] = None,
    ride_names: Optional[Sequence[str]] = None,
    config: Optional[ReportConfig] = None,
) -> Tuple[GroupStat, ...]:
    """Group records along a dimension and compute its metrics.

    Args:
        records: Filtered canonical records.
        dimension: Dimension.RIDE, Dimension.ITEM or Dimension.WORKER.
        date_range_hint: Explicit reporting window, used by the ride
            dimension to normalize per-day averages.
        ride_names: Ride catalog for the ride dimension.
        config: Report configuration.

    Returns:
        Tuple of RideStat, ItemStat or WorkerStat.

    Raises:
        ValueError: If dimension is not a known Dimension value.
    """
    dimension = Dimension(dimension)
    records = list(records)

    if dimension == Dimension.RIDE:
        stats: Tuple[GroupStat, ...] = ride_stats(records, date_range_hint, ride_names, config)
    elif dimension == Dimension.ITEM:
        stats = item_stats(records, config)
    else:
        stats = worker_stats(records)

    logger.debug(
        "Aggregated %d record(s) by %s into %d group(s)",
        len(records),
        dimension.value,
        len(stats),
    )
    return stats
