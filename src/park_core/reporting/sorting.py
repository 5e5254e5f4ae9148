"""Sort Engine: stable single-key ordering of records and group stats.

Every sortable column has a value extractor that also decides how missing
values compare:

- Text keys compare case-sensitively; missing values become "" and so come
  first in Ascending order.
- Numeric keys treat missing values as 0; date keys treat them as the epoch.
- The status key compares urgency priorities instead of text
  (Open=1, InProgress=2, Assigned=3, Completed=4, Cancelled=5, unknown=99).
  Descending shows the most urgent first, which means sorting by
  *ascending* priority number. This inversion relative to every other
  column is intentional and must be kept as is.

Sorting is stable: records that compare equal keep their input order, in
both directions. An unknown key leaves the order untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

from park_core.config import UNKNOWN_STATUS_PRIORITY, ReportConfig
from park_core.reporting.types import NA, GroupStat, SortDirection, SortSpec
from park_core.utils import EPOCH

logger = logging.getLogger(__name__)

T = TypeVar("T")

TEXT = "text"
NUMBER = "number"
DATE = "date"
STATUS = "status"


@dataclass(frozen=True)
class SortKey:
    """A sortable column.

    Attributes:
        name: Key name used in SortSpec.key.
        extract: Returns the comparable value of an item.
        value_type: TEXT, NUMBER, DATE or STATUS.
    """

    name: str
    extract: Callable[[Any], Any]
    value_type: str


def _text(attr: str) -> Callable[[Any], str]:
    def extract(item: Any) -> str:
        value = getattr(item, attr, None)
        return "" if value is None else str(value)

    return extract


def _number(attr: str) -> Callable[[Any], float]:
    def extract(item: Any) -> float:
        value = getattr(item, attr, None)
        if value is NA or isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        return value

    return extract


def _identifier(attr: str) -> Callable[[Any], tuple]:
    # Identifiers may be numeric or textual; numbers sort before text
    def extract(item: Any) -> tuple:
        value = getattr(item, attr, None)
        if value is None:
            return (0, 0, "")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return (0, value, "")
        return (1, 0, str(value))

    return extract


def _date(attr: str) -> Callable[[Any], datetime]:
    def extract(item: Any) -> datetime:
        value = getattr(item, attr, None)
        return value if isinstance(value, datetime) else EPOCH

    return extract


def _kind_label(item: Any) -> str:
    return item.kind.display_name


def _keys(*keys: SortKey) -> Dict[str, SortKey]:
    return {k.name: k for k in keys}


RECORD_SORT_KEYS: Dict[str, SortKey] = _keys(
    SortKey("id", _identifier("id"), NUMBER),
    SortKey("kind", _kind_label, TEXT),
    SortKey("ride_name", _text("ride_name"), TEXT),
    SortKey("customer_name", _text("customer_name"), TEXT),
    SortKey("item_name", _text("item_name"), TEXT),
    SortKey("payment_method", _text("payment_method"), TEXT),
    SortKey("reporter_name", _text("reporter_name"), TEXT),
    SortKey("assignee_name", _text("assignee_name"), TEXT),
    SortKey("issue_description", _text("issue_description"), TEXT),
    SortKey("price", _number("price"), NUMBER),
    SortKey("revenue", _number("revenue"), NUMBER),
    SortKey("quantity", _number("quantity"), NUMBER),
    SortKey("score", _number("score"), NUMBER),
    SortKey("purchase_date", _date("purchase_date"), DATE),
    SortKey("request_date", _date("request_date"), DATE),
    SortKey("completion_date", _date("completion_date"), DATE),
    SortKey("review_date", _date("review_date"), DATE),
    SortKey("date", _date("record_date"), DATE),
    SortKey("status", lambda record: getattr(record, "status", None), STATUS),
)

STAT_SORT_KEYS: Dict[str, SortKey] = _keys(
    SortKey("group_key", _text("group_key"), TEXT),
    SortKey("ride_name", _text("group_key"), TEXT),
    SortKey("name", _text("name"), TEXT),
    SortKey("count", _number("count"), NUMBER),
    SortKey("total_ridership", _number("count"), NUMBER),
    SortKey("revenue", _number("revenue"), NUMBER),
    SortKey("quantity", _number("quantity"), NUMBER),
    SortKey("average_rating", _number("average_rating"), NUMBER),
    SortKey("total_reviews", _number("total_reviews"), NUMBER),
    SortKey("average_per_day", _number("average_per_day"), NUMBER),
    SortKey("active_day_count", _number("active_day_count"), NUMBER),
    SortKey("completed", _number("completed"), NUMBER),
    SortKey("in_progress", _number("in_progress"), NUMBER),
    SortKey("cancelled", _number("cancelled"), NUMBER),
    SortKey("total", _number("total"), NUMBER),
    SortKey("last_completed_date", _date("last_completed_date"), DATE),
)


def status_priority(status: Any, config: Optional[ReportConfig] = None) -> int:
    """Urgency priority of a maintenance status (lower is more urgent).

    Examples:
        >>> from park_core.records import MaintenanceStatus
        >>> status_priority(MaintenanceStatus.OPEN)
        1
        >>> status_priority(None)
        99
    """
    config = config or ReportConfig()
    value = getattr(status, "value", status)
    if not isinstance(value, str):
        return UNKNOWN_STATUS_PRIORITY
    return config.priority_for(value)


def sort_by(
    items: Iterable[T],
    spec: Optional[SortSpec],
    keys: Mapping[str, SortKey],
    config: Optional[ReportConfig] = None,
) -> List[T]:
    """Stable-sort items by the SortSpec key using the given key registry.

    Args:
        items: Items to sort (left unmodified).
        spec: Active sort key and direction; None or ``key=None`` keeps order.
        keys: Registry of sortable keys for this kind of item.
        config: Supplies status priorities; defaults to ReportConfig().

    Returns:
        New sorted list.
    """
    items = list(items)
    if spec is None or spec.key is None:
        return items

    sort_key = keys.get(spec.key)
    if sort_key is None:
        logger.debug("Unknown sort key '%s'; leaving order unchanged", spec.key)
        return items

    descending = spec.direction == SortDirection.DESCENDING

    if sort_key.value_type == STATUS:
        config = config or ReportConfig()
        # Descending = most urgent first = ascending priority number
        return sorted(
            items,
            key=lambda item: status_priority(sort_key.extract(item), config),
            reverse=not descending,
        )

    return sorted(items, key=sort_key.extract, reverse=descending)


def sort_records(records: Iterable[T], spec: Optional[SortSpec], config: Optional[ReportConfig] = None) -> List[T]:
    """Sort canonical records for a table view.

    Examples:
        >>> from park_core.reporting.types import SortDirection, SortSpec
        >>> by_urgency = sort_records(requests, SortSpec("status", SortDirection.DESCENDING))
    """
    return sort_by(records, spec, RECORD_SORT_KEYS, config)


def sort_stats(stats: Iterable[GroupStat], spec: Optional[SortSpec]) -> List[GroupStat]:
    """Sort group stats for a summary table; N/A metrics sort as 0."""
    return sort_by(stats, spec, STAT_SORT_KEYS)
