"""Park Core - reporting and aggregation for theme park operations data.

This package turns raw backend exports (ticket, merchandise and food sales,
maintenance requests, ride reviews) into the figures shown on the park's
reporting screens:

- **Records**: canonical, frozen record variants built from
  source-specific field names
- **Reporting**: filter, sort, aggregate and paginate canonical records
- **Formatters**: console rendering of reports, with N/A sentinels

Module Structure:
    park_core.records: Canonical records and the record normalizer
    park_core.reporting: Filter, sort, aggregation and pagination engines
    park_core.formatters: Console output
    park_core.config: ReportConfig (page size, labels, status priorities)

Quick Start:
    >>> from park_core import ReportConfig
    >>> from park_core.records import RecordKind, normalize_sources
    >>> from park_core.reporting import DateRange, Dimension, FilterSpec, aggregate, filter_records
    >>>
    >>> records = normalize_sources({
    ...     RecordKind.TICKET: ticket_sales_json,
    ...     RecordKind.REVIEW: reviews_json,
    ... }).records
    >>>
    >>> window = DateRange.from_strings("2025-01-01", "2025-01-31")
    >>> january = filter_records(records, FilterSpec(date_range=window))
    >>> rides = aggregate(january, Dimension.RIDE, date_range_hint=window)
    >>> print(rides[0].average_per_day)
"""

__version__ = "0.1.0"

from park_core.config import ReportConfig
from park_core.exceptions import ConfigError, DataQualityError, ParkAPIError

__all__ = [
    "ConfigError",
    "DataQualityError",
    "ParkAPIError",
    "ReportConfig",
    "__version__",
]
