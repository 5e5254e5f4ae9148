"""Filter Engine: evaluate a FilterSpec against canonical records.

Each clause of a FilterSpec becomes a predicate; a record is kept when every
predicate accepts it. Clauses are evaluated in a fixed order:

1. Source toggle (record kind)
2. Date range (inclusive, end of day = 23:59:59.999)
3. Status set (maintenance requests only, case-insensitive)
4. Category equality (exact, case-sensitive)
5. Numeric range
6. Payment method, item selection and free-text search

An absent clause accepts everything. Results keep the input order, and
filtering is idempotent: re-filtering a result with the same FilterSpec returns
the same records.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Callable, Iterable, List, Optional, Sequence

from park_core.records.models import SALE_KINDS, CanonicalRecord, MaintenanceStatus, RecordKind
from park_core.reporting.types import NA, DateRange, FilterSpec, GroupStat, NumericRange
from park_core.utils import end_of_day, start_of_day

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]

# Record attributes the numeric-range clause understands
NUMERIC_FIELDS = frozenset(
    {"price", "revenue", "quantity", "score", "id", "customer_id", "assignee_id", "reviewer_id"}
)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _source_clause(kinds: Iterable[RecordKind]) -> Predicate:
    allowed = frozenset(RecordKind(k) for k in kinds)
    return lambda record: record.kind in allowed


def _date_clause(date_range: DateRange) -> Predicate:
    lower = start_of_day(date_range.start) if date_range.start is not None else None
    upper = end_of_day(date_range.end) if date_range.end is not None else None

    def accept(record: CanonicalRecord) -> bool:
        when = record.record_date
        if when is None:
            # Unparsable dates never satisfy a bounded range
            return False
        if lower is not None and when < lower:
            return False
        if upper is not None and when > upper:
            return False
        return True

    return accept


def _status_clause(statuses: Iterable[MaintenanceStatus | str]) -> Predicate:
    allowed = frozenset(MaintenanceStatus.parse(s) for s in statuses)

    def accept(record: CanonicalRecord) -> bool:
        if record.kind != RecordKind.MAINTENANCE:
            return True
        return record.status in allowed

    return accept


def _category_clause(expected: str, field_name: Optional[str]) -> Predicate:
    def accept(record: CanonicalRecord) -> bool:
        value = record.label if field_name is None else getattr(record, field_name, None)
        return value == expected

    return accept


def _numeric_clause(numeric_range: NumericRange) -> Predicate:
    def accept(record: CanonicalRecord) -> bool:
        value = _number(getattr(record, numeric_range.field, None))
        if value is None:
            return False
        return numeric_range.contains(value)

    return accept


def _payment_clause(method: str) -> Predicate:
    wanted = method.strip().lower()

    def accept(record: CanonicalRecord) -> bool:
        if record.kind not in SALE_KINDS:
            return True
        return (record.payment_method or "").strip().lower() == wanted

    return accept


def _item_clause(item_names: Iterable[str]) -> Predicate:
    selected = frozenset(item_names)

    def accept(record: CanonicalRecord) -> bool:
        if record.kind not in SALE_KINDS:
            return True
        return record.item_name in selected

    return accept


def _search_clause(text: str) -> Predicate:
    needle = text.strip().lower()

    def accept(record: CanonicalRecord) -> bool:
        haystack = (
            record.kind.display_name,
            record.label or "",
            getattr(record, "customer_name", None) or "",
        )
        return any(needle in value.lower() for value in haystack)

    return accept


def build_predicates(spec: FilterSpec) -> List[Predicate]:
    """Translate a FilterSpec into its ordered list of clause predicates.

    Empty ``status_set`` and ``item_names`` are treated like absent clauses
    (no selection means no constraint). An empty ``source_toggles`` set, in
    contrast, disables every source.

    Args:
        spec: Filter specification.

    Returns:
        Predicates in evaluation order; an empty list accepts everything.
    """
    predicates: List[Predicate] = []

    if spec.source_toggles is not None:
        predicates.append(_source_clause(spec.source_toggles))

    if spec.date_range is not None and spec.date_range.is_bounded:
        predicates.append(_date_clause(spec.date_range))

    if spec.status_set:
        predicates.append(_status_clause(spec.status_set))

    if spec.category_equals is not None:
        predicates.append(_category_clause(spec.category_equals, spec.category_field))

    nr = spec.numeric_range
    if nr is not None and nr.is_bounded:
        if nr.field in NUMERIC_FIELDS:
            predicates.append(_numeric_clause(nr))
        else:
            logger.debug("Ignoring numeric range on unknown field '%s'", nr.field)

    if spec.payment_method:
        predicates.append(_payment_clause(spec.payment_method))

    if spec.item_names:
        predicates.append(_item_clause(spec.item_names))

    if spec.search and spec.search.strip():
        predicates.append(_search_clause(spec.search))

    return predicates


def filter_records(
    records: Iterable[CanonicalRecord],
    spec: Optional[FilterSpec] = None,
) -> List[CanonicalRecord]:
    """Return the records that satisfy every clause of spec, in input order.

    Args:
        records: Canonical records to filter.
        spec: Filter specification; None keeps everything.

    Returns:
        New list with the matching records.

    Examples:
        >>> from park_core.reporting.types import DateRange, FilterSpec
        >>> spec = FilterSpec(date_range=DateRange.from_strings("2025-01-01", "2025-01-31"))
        >>> january = filter_records(records, spec)
    """
    records = list(records)
    if spec is None:
        return records

    predicates = build_predicates(spec)
    result = [r for r in records if all(accept(r) for accept in predicates)]

    logger.debug(
        "Filtered %d record(s) down to %d using %d clause(s)",
        len(records),
        len(result),
        len(predicates),
    )
    return result


def filter_stats(stats: Iterable[GroupStat], ranges: Sequence[NumericRange]) -> List[GroupStat]:
    """Keep the group stats whose metrics fall within every range.

    Used for the "stat filters" of summary tables (minimum average rating,
    maximum ridership, ...). A stat whose metric is N/A or unset fails any
    bound on that metric; a range naming a metric the stat does not have is
    ignored.

    Args:
        stats: Group stats to filter.
        ranges: Bounds keyed by stat attribute name.

    Returns:
        New list with the matching stats, in input order.
    """
    stats = list(stats)
    active = [r for r in ranges if r.is_bounded]

    def accept(stat: GroupStat) -> bool:
        for numeric_range in active:
            if not hasattr(stat, numeric_range.field):
                continue
            value = getattr(stat, numeric_range.field)
            if value is NA or _number(value) is None:
                return False
            if not numeric_range.contains(value):
                return False
        return True

    return [s for s in stats if accept(s)]


def last_n_days(days: int, today: Optional[date] = None) -> DateRange:
    """Date range from ``days`` days ago through today (quick filter preset).

    Examples:
        >>> last_n_days(7, today=date(2025, 1, 15))
        DateRange(start=datetime.date(2025, 1, 8), end=datetime.date(2025, 1, 15))
    """
    today = today or date.today()
    return DateRange(start=today - timedelta(days=days), end=today)


def today_range(today: Optional[date] = None) -> DateRange:
    """Date range covering only today."""
    today = today or date.today()
    return DateRange(start=today, end=today)
