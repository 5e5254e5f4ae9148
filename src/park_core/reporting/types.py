"""Shared types for the reporting engine.

Declarative inputs (FilterSpec, SortSpec, DateRange, NumericRange), result
snapshots (GroupStat family, profitability and rate reports, Page) and the
display sentinels used where a number would be misleading.

All result types are frozen dataclasses: every engine call builds new
instances and never mutates earlier results.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Tuple, Union

import numpy as np

from park_core.exceptions import ConfigError
from park_core.records.models import MaintenanceStatus, RecordKind
from park_core.utils import parse_date


class _NotApplicable:
    """Singleton "not applicable" marker (renders as ``N/A``).

    Used for averages and rates whose denominator is zero. It is falsy and
    is not a number, so it cannot leak into arithmetic unnoticed.
    """

    _instance: Optional[_NotApplicable] = None

    def __new__(cls) -> _NotApplicable:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "N/A"

    __str__ = __repr__

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _NotApplicable:
        return self

    def __deepcopy__(self, memo: dict) -> _NotApplicable:
        return self

    def __reduce__(self) -> str:
        return "NA"


NA = _NotApplicable()

# Revenue placeholder for "least profitable" when a group is empty.
# Callers must render it as "no data", never as a number.
NO_REVENUE = np.inf

MaybeFloat = Union[float, _NotApplicable]


def is_missing(value: Any) -> bool:
    """True for None, NA and non-finite revenue sentinels."""
    if value is None or value is NA:
        return True
    if isinstance(value, float) and not np.isfinite(value):
        return True
    return False


# ============================================================================
# Filter specification
# ============================================================================


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date range. A None bound imposes no constraint.

    Attributes:
        start: First included day.
        end: Last included day (the whole day, up to 23:59:59.999).
    """

    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def from_strings(cls, start: str | None = None, end: str | None = None) -> DateRange:
        """Build a range from YYYY-MM-DD strings; blank strings are unbounded."""
        return cls(
            start=parse_date(start) if start else None,
            end=parse_date(end) if end else None,
        )

    @property
    def is_bounded(self) -> bool:
        return self.start is not None or self.end is not None

    @property
    def is_closed(self) -> bool:
        """True when both bounds are set (an explicit reporting window)."""
        return self.start is not None and self.end is not None


@dataclass(frozen=True)
class NumericRange:
    """Inclusive bounds on a numeric field. A None bound imposes no constraint.

    Attributes:
        field: Record attribute (or stat metric) the bounds apply to.
        min: Lower bound, inclusive.
        max: Upper bound, inclusive.
    """

    field: str
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_bounded(self) -> bool:
        return self.min is not None or self.max is not None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


# Numeric fields whose bounds may not be negative
_MONEY_FIELDS = {"price", "revenue"}


@dataclass(frozen=True)
class FilterSpec:
    """Declarative inclusion criteria; every clause is optional.

    Attributes:
        date_range: Record date must fall within the range.
        status_set: Maintenance requests must have one of these statuses
            (strings are matched case-insensitively).
        category_equals: Exact, case-sensitive match against ``category_field``.
        category_field: Record attribute compared by ``category_equals``;
            None uses the record's label (ride or item name).
        numeric_range: Bounds on one numeric record field.
        source_toggles: Record kinds to include; None includes all.
        payment_method: Case-insensitive payment method match (sales only).
        item_names: Sales must be for one of these item names.
        search: Case-insensitive substring over kind label, label and
            customer name.
    """

    date_range: Optional[DateRange] = None
    status_set: Optional[FrozenSet[Union[MaintenanceStatus, str]]] = None
    category_equals: Optional[str] = None
    category_field: Optional[str] = None
    numeric_range: Optional[NumericRange] = None
    source_toggles: Optional[FrozenSet[RecordKind]] = None
    payment_method: Optional[str] = None
    item_names: Optional[FrozenSet[str]] = None
    search: Optional[str] = None

    def validate(self) -> None:
        """Reject contradictory or invalid caller-supplied values.

        Raises:
            ConfigError: If the date range ends before it starts, a numeric
                range has min above max, or a money bound is negative.
        """
        dr = self.date_range
        if dr is not None and dr.is_closed and dr.start > dr.end:
            raise ConfigError(f"Start date {dr.start} is after end date {dr.end}")

        nr = self.numeric_range
        if nr is not None:
            if nr.min is not None and nr.max is not None and nr.min > nr.max:
                raise ConfigError(f"Minimum {nr.field} {nr.min} is greater than maximum {nr.max}")
            if nr.field in _MONEY_FIELDS:
                for bound in (nr.min, nr.max):
                    if bound is not None and bound < 0:
                        raise ConfigError(f"{nr.field} bounds cannot be negative, got {bound}")

    def with_changes(self, **changes: Any) -> FilterSpec:
        """Return a copy with some clauses replaced."""
        return replace(self, **changes)


# ============================================================================
# Sort specification
# ============================================================================


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def flipped(self) -> SortDirection:
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


@dataclass(frozen=True)
class SortSpec:
    """Single active sort key and direction. ``key=None`` means unsorted."""

    key: Optional[str] = None
    direction: SortDirection = SortDirection.ASCENDING

    def toggle(self, key: str) -> SortSpec:
        """Return the spec after the user selects ``key``.

        Selecting the active key flips the direction; selecting a new key
        starts Ascending.

        Examples:
            >>> SortSpec().toggle("price")
            SortSpec(key='price', direction=<SortDirection.ASCENDING: 'asc'>)
            >>> SortSpec().toggle("price").toggle("price").direction
            <SortDirection.DESCENDING: 'desc'>
        """
        if key == self.key:
            return SortSpec(key=key, direction=self.direction.flipped())
        return SortSpec(key=key, direction=SortDirection.ASCENDING)


# ============================================================================
# Aggregation results
# ============================================================================


class Dimension(str, Enum):
    """Grouping dimension for aggregate()."""

    RIDE = "ride"
    ITEM = "item"
    WORKER = "worker"


@dataclass(frozen=True)
class GroupStat:
    """Metrics for one value of a grouping dimension.

    Attributes:
        group_key: The dimension value (ride name, item name, worker id).
        count: Number of records in the group.
        revenue: Summed revenue of the group's records.
    """

    group_key: Any
    count: int
    revenue: float


@dataclass(frozen=True)
class RideStat(GroupStat):
    """Ridership and rating rollup for one ride.

    Attributes:
        average_rating: Mean review score, NA when the ride has no reviews.
        total_reviews: Number of reviews.
        active_day_count: Days the per-day rate is normalized by.
        average_per_day: count / active_day_count, NA when no days.
    """

    average_rating: MaybeFloat = NA
    total_reviews: int = 0
    active_day_count: int = 0
    average_per_day: MaybeFloat = NA

    @property
    def ride_name(self) -> str:
        return self.group_key

    @property
    def total_ridership(self) -> int:
        return self.count


@dataclass(frozen=True)
class ItemStat(GroupStat):
    """Sales rollup for one catalog item (ticket type, merchandise, menu item)."""

    kind: Optional[RecordKind] = None
    quantity: int = 0

    @property
    def name(self) -> Any:
        return self.group_key


@dataclass(frozen=True)
class WorkerStat(GroupStat):
    """Maintenance performance of one assignee.

    ``count`` equals ``total``; ``revenue`` is always 0.
    """

    name: Optional[str] = None
    completed: int = 0
    in_progress: int = 0
    cancelled: int = 0
    total: int = 0
    last_completed_date: Optional[datetime] = None


@dataclass(frozen=True)
class Extremum:
    """Name and revenue of the most or least profitable item.

    ``name`` is None when there was no data; revenue is then 0 (most) or
    NO_REVENUE (least).
    """

    name: Optional[str]
    revenue: float

    @property
    def has_data(self) -> bool:
        return self.name is not None


@dataclass(frozen=True)
class ProfitabilityReport:
    """Per-item revenue breakdown with extrema.

    Attributes:
        items: Item stats ordered by revenue, highest first.
        most_profitable: Item with the highest revenue.
        least_profitable: Item with the lowest revenue.
        total_revenue: Sum over all items.
    """

    items: Tuple[ItemStat, ...]
    most_profitable: Extremum
    least_profitable: Extremum
    total_revenue: float


@dataclass(frozen=True)
class CancellationRate:
    """Cancelled maintenance requests per calendar month.

    Attributes:
        cancelled_count: Number of cancelled requests.
        month_span: Calendar months between the first and last cancellation,
            inclusive (0 when there were none).
        rate: cancelled_count / month_span, 0 when there is nothing to divide.
        first_date: Earliest cancellation date considered.
        last_date: Latest cancellation date considered.
    """

    cancelled_count: int
    month_span: int
    rate: float
    first_date: Optional[datetime] = None
    last_date: Optional[datetime] = None


@dataclass(frozen=True)
class Tally:
    """Most common value of a categorical field and how often it occurred."""

    key: Optional[str]
    count: int


@dataclass(frozen=True)
class StatusSummary:
    """Maintenance request counts per status and per ride.

    Attributes:
        total: Number of maintenance requests considered.
        counts: Requests per status (every status present, zero if none).
        by_ride: For each status, requests per ride name.
    """

    total: int
    counts: Mapping[MaintenanceStatus, int]
    by_ride: Mapping[MaintenanceStatus, Mapping[str, int]]

    def count(self, status: MaintenanceStatus | str) -> int:
        return self.counts.get(MaintenanceStatus.parse(status), 0)


@dataclass(frozen=True)
class SalesSummary:
    """Headline figures of the unified sales report.

    Attributes:
        total_revenue: Revenue over all sales.
        revenue_by_kind: Revenue per sale kind (every sale kind present).
        most_common_kind: Sale kind with the most records.
        most_common_item: Item sold most often (by record count).
        most_common_payment: Most used payment method.
        distinct_days: Calendar days with at least one dated sale.
        average_spent_per_day: total of dated sales / distinct_days, NA if none.
    """

    total_revenue: float
    revenue_by_kind: Mapping[RecordKind, float]
    most_common_kind: Tally
    most_common_item: Tally
    most_common_payment: Tally
    distinct_days: int
    average_spent_per_day: MaybeFloat


def frozen_mapping(data: Mapping) -> Mapping:
    """Read-only view of a mapping for embedding in result snapshots."""
    return MappingProxyType(dict(data))


# ============================================================================
# Pagination
# ============================================================================


@dataclass(frozen=True)
class Page:
    """One page of a sorted collection.

    Attributes:
        items: Items on this page.
        page_number: 1-based page number actually served (after clamping).
        total_pages: Number of pages, at least 1.
        total_items: Size of the whole collection.
        page_size: Maximum items per page.
    """

    items: Tuple[Any, ...]
    page_number: int
    total_pages: int
    total_items: int
    page_size: int = 10

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1
