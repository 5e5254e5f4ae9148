"""Canonical records and the Record Normalizer.

This module provides the record variants the reporting engine operates on
and the functions that build them from source-specific mappings:

- **Ticket**, **MerchandiseSale**, **FoodOrderLine**: revenue-bearing sales
- **MaintenanceRequest**: ride work orders with a lifecycle status
- **Review**: ride ratings (score 1-5)

Example:
    >>> from park_core.records import RecordKind, normalize_sources
    >>>
    >>> result = normalize_sources({
    ...     RecordKind.TICKET: ticket_sales_json,
    ...     RecordKind.MAINTENANCE: maintenance_json,
    ... })
    >>> result.records[:3]
    >>> result.dropped
"""

from park_core.records.models import (
    SALE_KINDS,
    CanonicalRecord,
    FoodOrderLine,
    MaintenanceRequest,
    MaintenanceStatus,
    MerchandiseSale,
    RecordKind,
    Review,
    Ticket,
)
from park_core.records.normalize import (
    NormalizeResult,
    normalize,
    normalize_many,
    normalize_sources,
    resolve_field,
)

__all__ = [
    "SALE_KINDS",
    "CanonicalRecord",
    "FoodOrderLine",
    "MaintenanceRequest",
    "MaintenanceStatus",
    "MerchandiseSale",
    "NormalizeResult",
    "RecordKind",
    "Review",
    "Ticket",
    "normalize",
    "normalize_many",
    "normalize_sources",
    "resolve_field",
]
