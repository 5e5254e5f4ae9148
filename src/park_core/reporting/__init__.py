"""Reporting engine: filter, sort, aggregate and paginate canonical records.

Example:
    >>> from park_core.reporting import DateRange, Dimension, FilterSpec, aggregate, filter_records
    >>>
    >>> spec = FilterSpec(date_range=DateRange.from_strings("2025-01-01", "2025-01-10"))
    >>> january = filter_records(records, spec)
    >>> rides = aggregate(january, Dimension.RIDE, date_range_hint=spec.date_range)
"""

from park_core.reporting.aggregate import (
    aggregate,
    cancellation_rate,
    daily_series,
    item_profitability,
    item_stats,
    profitability_by_kind,
    ride_stats,
    sales_summary,
    stats_to_frame,
    status_summary,
    worker_stats,
)
from park_core.reporting.api import ReportResult, run_report
from park_core.reporting.filters import filter_records, filter_stats, last_n_days, today_range
from park_core.reporting.pagination import page_count, paginate
from park_core.reporting.sorting import sort_records, sort_stats, status_priority
from park_core.reporting.types import (
    NA,
    NO_REVENUE,
    CancellationRate,
    DateRange,
    Dimension,
    Extremum,
    FilterSpec,
    GroupStat,
    ItemStat,
    NumericRange,
    Page,
    ProfitabilityReport,
    RideStat,
    SalesSummary,
    SortDirection,
    SortSpec,
    StatusSummary,
    Tally,
    WorkerStat,
    is_missing,
)

__all__ = [
    "NA",
    "NO_REVENUE",
    "CancellationRate",
    "DateRange",
    "Dimension",
    "Extremum",
    "FilterSpec",
    "GroupStat",
    "ItemStat",
    "NumericRange",
    "Page",
    "ProfitabilityReport",
    "ReportResult",
    "RideStat",
    "SalesSummary",
    "SortDirection",
    "SortSpec",
    "StatusSummary",
    "Tally",
    "WorkerStat",
    "aggregate",
    "cancellation_rate",
    "daily_series",
    "filter_records",
    "filter_stats",
    "is_missing",
    "item_profitability",
    "item_stats",
    "last_n_days",
    "page_count",
    "paginate",
    "profitability_by_kind",
    "ride_stats",
    "run_report",
    "sales_summary",
    "sort_records",
    "sort_stats",
    "stats_to_frame",
    "status_priority",
    "status_summary",
    "today_range",
    "worker_stats",
]
