"""Record Normalizer: map source-specific records onto canonical records.

Source providers return plain mappings whose field names depend on the
endpoint that produced them (see park_core.records.aliases). This module
resolves each canonical field once, coerces it to its canonical type, and
builds the frozen record dataclass.

Malformed records (no identifying key, no monetary/date anchor, review score
outside 1..5) are dropped and counted, never raised. A date that is present
but unparsable is kept as None: the record still counts toward aggregations
that do not need dates, and date-bounded filters exclude it.

Examples:
    >>> from park_core.records import RecordKind, normalize_many
    >>> result = normalize_many(
    ...     [{"ticketId": 1, "price": 25.0, "purchaseDate": "2025-01-15T10:00:00"},
    ...      {"price": 25.0}],
    ...     RecordKind.TICKET,
    ... )
    >>> len(result.records), result.dropped
    (1, 1)
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from park_core.exceptions import DataQualityError
from park_core.records.aliases import (
    DATE,
    IDENTIFIER,
    INTEGER,
    NUMBER,
    STATUS,
    FieldRule,
    field_rules,
    first_present,
)
from park_core.records.models import (
    RECORD_TYPES,
    CanonicalRecord,
    MaintenanceStatus,
    RecordKind,
)
from park_core.utils import parse_timestamp

logger = logging.getLogger(__name__)

# Currency symbols and spaces around a number ("$ 1,234.50")
_CURRENCY_RE = re.compile(r"[^\d.\-]")

MIN_REVIEW_SCORE = 1
MAX_REVIEW_SCORE = 5


class _Invalid:
    """Marker for a value that was present but could not be coerced."""

    def __repr__(self) -> str:
        return "INVALID"


INVALID = _Invalid()


@dataclass(frozen=True)
class NormalizeResult:
    """Outcome of normalizing one or more source collections.

    Attributes:
        records: Canonical records, in source order.
        dropped: Number of raw records rejected as malformed.
        drop_reasons: Count of dropped records per reason, e.g.
            ``{"ticket: missing id": 2}``.
    """

    records: Tuple[CanonicalRecord, ...]
    dropped: int = 0
    drop_reasons: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "drop_reasons", MappingProxyType(dict(self.drop_reasons)))

    def __add__(self, other: NormalizeResult) -> NormalizeResult:
        reasons = Counter(self.drop_reasons)
        reasons.update(other.drop_reasons)
        return NormalizeResult(
            records=self.records + other.records,
            dropped=self.dropped + other.dropped,
            drop_reasons=dict(reasons),
        )


def clean_text(x: Any) -> Optional[str]:
    """Return stripped text with inner whitespace collapsed, or None if blank.

    Examples:
        >>> clean_text("  Coaster   A ")
        'Coaster A'
        >>> clean_text("   ") is None
        True
    """
    if x is None or (isinstance(x, float) and math.isnan(x)):
        return None
    s = re.sub(r"\s+", " ", str(x)).strip()
    return s or None


def to_float(x: Any) -> Optional[float]:
    """Parse a monetary amount from a number or a currency-formatted string.

    Handles plain numbers, numeric strings (including scientific notation),
    and US-formatted amounts with currency symbols and thousands separators
    ("$1,234.50"). Currency stripping only applies when the text does not
    parse as a number as is.

    Returns:
        Parsed float, or None if the value is not a finite number.

    Examples:
        >>> to_float("$1,234.50")
        1234.5
        >>> to_float("free") is None
        True
    """
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        v = float(x)
    else:
        try:
            v = float(str(x).strip())
        except ValueError:
            v = _strip_currency(x)
        if v is None:
            return None
    if math.isnan(v) or math.isinf(v):
        return None
    return v


def _strip_currency(x: Any) -> Optional[float]:
    """Parse an amount after removing currency symbols and separators."""
    s = _CURRENCY_RE.sub("", str(x).replace(",", ""))
    if not s:
        return None
    try:
        return float(s)
    except ValueError:
        return None


def to_int(x: Any) -> Optional[int]:
    """Parse a whole number; fractional values are rounded.

    Examples:
        >>> to_int("3")
        3
        >>> to_int(4.0)
        4
    """
    f = to_float(x)
    if f is None:
        return None
    return int(round(f))


def to_identifier(x: Any) -> Any:
    """Normalize an identifier: integral numbers become int, text is stripped."""
    if isinstance(x, bool):
        return None
    if isinstance(x, float):
        return int(x) if x.is_integer() else x
    if isinstance(x, str):
        s = x.strip()
        if s.isdigit():
            return int(s)
        return s or None
    return x


def _coerce(value: Any, rule: FieldRule) -> Any:
    """Coerce a raw value to the rule's type.

    Returns None for absent values and INVALID for values that are present
    but cannot be coerced.
    """
    if rule.value_type == STATUS:
        return MaintenanceStatus.parse(value)
    if value is None:
        return None
    if rule.value_type == NUMBER:
        v = to_float(value)
        return INVALID if v is None else v
    if rule.value_type == INTEGER:
        v = to_int(value)
        return INVALID if v is None else v
    if rule.value_type == DATE:
        v = parse_timestamp(value)
        return INVALID if v is None else v
    if rule.value_type == IDENTIFIER:
        return to_identifier(value)
    return clean_text(value)


def resolve_field(raw: Mapping[str, Any], kind: RecordKind, field_name: str) -> Any:
    """Resolve one canonical field from a raw record through its aliases.

    Args:
        raw: Source record as returned by a data provider.
        kind: Record kind the source belongs to.
        field_name: Canonical field name (e.g. "price", "purchase_date").

    Returns:
        The coerced value, None if no alias is present, or None if the value
        is present but cannot be coerced.

    Raises:
        KeyError: If field_name is not a canonical field of kind.
    """
    rule = field_rules(kind)[field_name]
    value = _coerce(first_present(raw, rule), rule)
    return None if value is INVALID else value


def _drop_reason(kind: RecordKind, field_name: str, value: Any) -> Optional[str]:
    """Return why a required field makes the record unusable, or None."""
    if value is None:
        return f"{kind.value}: missing {field_name}"
    if value is INVALID and field_name != _date_anchor(kind):
        return f"{kind.value}: invalid {field_name}"
    if field_name == "price" and value is not INVALID and value < 0:
        return f"{kind.value}: negative price"
    if field_name == "score" and value is not INVALID and not (
        MIN_REVIEW_SCORE <= value <= MAX_REVIEW_SCORE
    ):
        return f"{kind.value}: score out of range"
    return None


def _date_anchor(kind: RecordKind) -> Optional[str]:
    if kind == RecordKind.MAINTENANCE:
        return "request_date"
    if kind == RecordKind.REVIEW:
        return None
    return "purchase_date"


def _normalize_one(raw: Mapping[str, Any], kind: RecordKind) -> Tuple[Optional[CanonicalRecord], Optional[str]]:
    if not isinstance(raw, Mapping):
        return None, f"{kind.value}: not a mapping"

    values: Dict[str, Any] = {}
    for field_name, rule in field_rules(kind).items():
        value = _coerce(first_present(raw, rule), rule)
        if rule.required:
            reason = _drop_reason(kind, field_name, value)
            if reason:
                return None, reason
        if value is INVALID:
            # Present but unusable: keep the record, leave the field unset
            logger.debug("Unparsable %s on %s record %r", field_name, kind.value, raw)
            value = None
        values[field_name] = value

    return RECORD_TYPES[kind](**values), None


def normalize(raw: Mapping[str, Any], kind: RecordKind | str) -> Optional[CanonicalRecord]:
    """Normalize a single raw record.

    Args:
        raw: Source record mapping.
        kind: Record kind (RecordKind or its string value).

    Returns:
        The canonical record, or None if the record is malformed.
    """
    kind = RecordKind(kind)
    record, reason = _normalize_one(raw, kind)
    if reason:
        logger.debug("Dropped %s record: %s", kind.value, reason)
    return record


def normalize_many(
    raw_records: Iterable[Mapping[str, Any]],
    kind: RecordKind | str,
    *,
    strict: bool = False,
) -> NormalizeResult:
    """Normalize a fully materialized source collection.

    Args:
        raw_records: Records from one source provider.
        kind: Record kind of the whole collection.
        strict: If True, raise instead of dropping malformed records.

    Returns:
        NormalizeResult with the canonical records and drop counts.

    Raises:
        DataQualityError: If strict is True and any record is malformed.
    """
    kind = RecordKind(kind)
    records = []
    reasons: Counter = Counter()

    for raw in raw_records or []:
        record, reason = _normalize_one(raw, kind)
        if reason:
            if strict:
                raise DataQualityError(f"Malformed {kind.value} record ({reason}): {raw!r}")
            reasons[reason] += 1
            continue
        records.append(record)

    dropped = sum(reasons.values())
    if dropped:
        logger.warning(
            "Dropped %d malformed %s record(s): %s", dropped, kind.value, dict(reasons)
        )
    logger.debug("Normalized %d %s record(s)", len(records), kind.value)

    return NormalizeResult(records=tuple(records), dropped=dropped, drop_reasons=dict(reasons))


def normalize_sources(
    sources: Mapping[RecordKind | str, Iterable[Mapping[str, Any]]],
    *,
    strict: bool = False,
) -> NormalizeResult:
    """Normalize several source collections and combine the results.

    Records keep the order of the mapping, then source order within each
    collection.

    Args:
        sources: Mapping of record kind to that source's raw records.
        strict: If True, raise instead of dropping malformed records.

    Returns:
        Combined NormalizeResult.
    """
    result = NormalizeResult(records=())
    for kind, raw_records in sources.items():
        result = result + normalize_many(raw_records, kind, strict=strict)

    logger.info(
        "Normalized %d record(s) from %d source(s), dropped %d",
        len(result.records),
        len(sources),
        result.dropped,
    )
    return result
