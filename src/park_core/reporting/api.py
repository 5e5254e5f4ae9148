"""Public API for the park report pipeline.

This module provides a clean, in-memory API that takes raw source
collections and returns one table page plus the summary aggregates shown
next to it, without reading or writing files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple

from park_core.config import ReportConfig
from park_core.records.models import CanonicalRecord, RecordKind
from park_core.records.normalize import normalize_sources
from park_core.reporting.aggregate import (
    cancellation_rate,
    item_profitability,
    sales_summary,
    status_summary,
)
from park_core.reporting.filters import filter_records
from park_core.reporting.pagination import paginate
from park_core.reporting.sorting import sort_records
from park_core.reporting.types import (
    CancellationRate,
    FilterSpec,
    Page,
    ProfitabilityReport,
    SalesSummary,
    SortSpec,
    StatusSummary,
    frozen_mapping,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportResult:
    """Result of the report pipeline.

    Attributes:
        page: Requested page of the filtered, sorted records.
        records: All filtered, sorted records (every page).
        dropped: Number of raw records rejected as malformed.
        drop_reasons: Dropped records per reason.
        sales: Sales summary over the filtered records.
        statuses: Maintenance status summary over the filtered records.
        profitability: Item profitability over the filtered sales.
        cancellations: Cancellation rate over the filtered requests.
    """

    page: Page
    records: Tuple[CanonicalRecord, ...]
    dropped: int
    drop_reasons: Mapping[str, int]
    sales: SalesSummary
    statuses: StatusSummary
    profitability: ProfitabilityReport
    cancellations: CancellationRate


def run_report(
    sources: Mapping[RecordKind | str, Iterable[Mapping[str, Any]]],
    filter_spec: Optional[FilterSpec] = None,
    sort_spec: Optional[SortSpec] = None,
    page: int = 1,
    config: Optional[ReportConfig] = None,
) -> ReportResult:
    """Normalize, filter, sort and paginate source records in memory.

    This function:
    - does NOT read or write any files,
    - does NOT fetch from any backend (sources must be fully materialized),
    - does NOT print (logging only).

    Args:
        sources: Mapping of record kind to that source's raw records, as
            returned by the data providers.
        filter_spec: Inclusion criteria; None keeps every record.
        sort_spec: Table sort key and direction; None keeps source order.
        page: Requested 1-based page; out-of-range values are clamped.
        config: Report configuration (page size, labels, status priorities).

    Returns:
        ReportResult with the page, the full filtered collection and the
        summary aggregates.

    Raises:
        ConfigError: If the filter spec or configuration is invalid.

    Examples:
        >>> from park_core.reporting import FilterSpec, SortDirection, SortSpec, run_report
        >>> result = run_report(
        ...     {"maintenance": maintenance_json},
        ...     FilterSpec(status_set=frozenset({"Open", "InProgress"})),
        ...     SortSpec("status", SortDirection.DESCENDING),
        ... )
        >>> result.page.items[0].status
        <MaintenanceStatus.OPEN: 'Open'>
    """
    config = config or ReportConfig()
    config.validate()
    if filter_spec is not None:
        filter_spec.validate()

    normalized = normalize_sources(sources)
    filtered = filter_records(normalized.records, filter_spec)
    ordered = sort_records(filtered, sort_spec, config)
    served = paginate(ordered, config.page_size, page)

    logger.info(
        "Report: %d normalized, %d after filters, page %d of %d",
        len(normalized.records),
        len(ordered),
        served.page_number,
        served.total_pages,
    )

    return ReportResult(
        page=served,
        records=tuple(ordered),
        dropped=normalized.dropped,
        drop_reasons=frozen_mapping(normalized.drop_reasons),
        sales=sales_summary(ordered),
        statuses=status_summary(ordered, config),
        profitability=item_profitability(ordered, config),
        cancellations=cancellation_rate(ordered),
    )
