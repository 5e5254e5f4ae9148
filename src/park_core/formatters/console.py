"""Console output formatting utilities."""

from __future__ import annotations

import re
from typing import Any, Iterable

from park_core.reporting.api import ReportResult
from park_core.reporting.types import (
    NA,
    Extremum,
    ProfitabilityReport,
    RideStat,
    WorkerStat,
    is_missing,
)

NOT_AVAILABLE = "N/A"


def sanitize_for_console(text: str) -> str:
    """Remove non-ASCII characters and HTML tags from text.

    This prevents UnicodeEncodeError on consoles with a legacy code page.
    """
    text = re.sub(r"[^\x00-\x7F]+", "", text)
    text = re.sub(r"<[^>]+>", "", text)
    return text


def format_currency(value: Any) -> str:
    """Format an amount as dollars; sentinels render as N/A.

    Examples:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(float("inf"))
        'N/A'
    """
    if is_missing(value):
        return NOT_AVAILABLE
    return f"${value:,.2f}"


def format_number(value: Any, decimals: int = 2) -> str:
    """Format a metric; NA and non-finite values render as N/A."""
    if is_missing(value):
        return NOT_AVAILABLE
    if isinstance(value, int):
        return f"{value:,}"
    return f"{value:,.{decimals}f}"


def format_extremum(extremum: Extremum) -> str:
    """Render a most/least profitable entry, or N/A when there was no data."""
    if not extremum.has_data:
        return NOT_AVAILABLE
    return f"{extremum.name} ({format_currency(extremum.revenue)})"


def format_profitability(report: ProfitabilityReport) -> str:
    lines = [
        f"Total revenue:    {format_currency(report.total_revenue)}",
        f"Most profitable:  {format_extremum(report.most_profitable)}",
        f"Least profitable: {format_extremum(report.least_profitable)}",
    ]
    return "\n".join(lines)


def format_ride_stats(stats: Iterable[RideStat]) -> str:
    """Build a fixed-width ride summary table."""
    stats = list(stats)
    if not stats:
        return "No ride data available."

    lines = [
        f"{'Ride':<24} {'Riders':>8} {'Revenue':>12} {'Per day':>8} {'Rating':>7} {'Reviews':>8}",
        "-" * 72,
    ]
    for s in stats:
        lines.append(
            f"{str(s.ride_name)[:24]:<24} {s.total_ridership:>8,} {format_currency(s.revenue):>12} "
            f"{format_number(s.average_per_day):>8} {format_number(s.average_rating):>7} "
            f"{s.total_reviews:>8,}"
        )
    return "\n".join(lines)


def format_worker_stats(stats: Iterable[WorkerStat]) -> str:
    """Build a fixed-width maintenance worker table."""
    stats = list(stats)
    if not stats:
        return "No assigned maintenance requests."

    lines = [
        f"{'Worker':<24} {'Done':>6} {'Active':>7} {'Cancel':>7} {'Total':>6} {'Last completed':>15}",
        "-" * 70,
    ]
    for s in stats:
        last = s.last_completed_date.strftime("%Y-%m-%d") if s.last_completed_date else NOT_AVAILABLE
        lines.append(
            f"{str(s.name or s.group_key)[:24]:<24} {s.completed:>6} {s.in_progress:>7} "
            f"{s.cancelled:>7} {s.total:>6} {last:>15}"
        )
    return "\n".join(lines)


def format_report_for_console(result: ReportResult) -> str:
    """Build a human-readable summary of a report run.

    Args:
        result: ReportResult from run_report().

    Returns:
        Text with the sales headline, maintenance status counts,
        profitability and the current page of records.
    """
    lines = []
    sales = result.sales
    lines.append("Park Report")
    lines.append("=" * 60)
    lines.append(f"Records: {len(result.records)} (dropped {result.dropped} malformed)")
    lines.append("")

    lines.append("Sales:")
    lines.append(f"  Total revenue:      {format_currency(sales.total_revenue)}")
    for kind, revenue in sales.revenue_by_kind.items():
        lines.append(f"  {kind.display_name + ':':<20}{format_currency(revenue)}")
    lines.append(f"  Avg spent per day:  {format_currency(sales.average_spent_per_day)}")
    lines.append(f"  Top item:           {sales.most_common_item.key or NOT_AVAILABLE}")
    lines.append(f"  Top payment:        {sales.most_common_payment.key or NOT_AVAILABLE}")
    lines.append("")

    lines.append("Profitability:")
    lines.extend("  " + line for line in format_profitability(result.profitability).splitlines())
    lines.append("")

    statuses = result.statuses
    if statuses.total:
        lines.append("Maintenance:")
        for status, count in statuses.counts.items():
            if count:
                lines.append(f"  {status.value + ':':<14}{count}")
        rate = result.cancellations
        rate_str = NOT_AVAILABLE if rate.month_span == 0 else f"{rate.rate:.2f} / month"
        lines.append(f"  Cancellation rate: {rate_str}")
        lines.append("")

    page = result.page
    lines.append(f"Page {page.page_number} of {page.total_pages}:")
    lines.append("-" * 60)
    for record in page.items:
        when = record.record_date.strftime("%Y-%m-%d") if record.record_date else NOT_AVAILABLE
        label = record.label or NA
        lines.append(f"  {when}  {record.kind.display_name:<12} {str(label):<24} {format_currency(record.revenue)}")

    return "\n".join(lines)
