"""Field-alias table for source records.

The same logical field reaches the engine under different names depending on
which backend endpoint (and which version of it) produced the record:
camelCase API projections (``purchaseDate``), database column names
(``Purchase_Date``), snake_case exports (``purchase_date``) and nested
objects (``ride.ride_Name``, ``assignee.employee_ID``).

Each canonical field has an ordered tuple of aliases. An alias is either a
dotted path into nested mappings, or a tuple of dotted paths whose non-empty
values are joined with a space (used for first/last name pairs). The first
alias that yields a present, non-null value wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple, Union

from park_core.records.models import RecordKind

Alias = Union[str, Tuple[str, ...]]

# Field value types, used by the normalizer to coerce raw values
TEXT = "text"
NUMBER = "number"
INTEGER = "integer"
DATE = "date"
STATUS = "status"
IDENTIFIER = "identifier"


@dataclass(frozen=True)
class FieldRule:
    """How to locate and coerce one canonical field.

    Attributes:
        aliases: Source names to try, in priority order.
        value_type: One of TEXT, NUMBER, INTEGER, DATE, STATUS, IDENTIFIER.
        required: Whether a record lacking this field is dropped.
    """

    aliases: Tuple[Alias, ...]
    value_type: str = TEXT
    required: bool = False


_PAYMENT_METHOD = FieldRule(("paymentMethod", "payment_method", "Payment_Method", "PaymentMethod"))
_PRICE = FieldRule(("price", "amount", "Price", "totalPrice", "total_price"), NUMBER, required=True)
_PURCHASE_DATE = FieldRule(
    ("purchaseDate", "purchase_date", "Purchase_Date", "PurchaseDate", "date"),
    DATE,
    required=True,
)
_QUANTITY = FieldRule(("quantity", "Quantity", "qty"), INTEGER)
_CUSTOMER_NAME = FieldRule(
    (
        "customerName",
        "customer_name",
        "Customer_Name",
        ("customer.firstName", "customer.lastName"),
        ("customer.FirstName", "customer.LastName"),
    )
)
_RIDE_NAME = FieldRule(
    ("rideName", "ride_name", "Ride_Name", "ride.ride_Name", "ride.rideName", "ride.Ride_Name")
)

FIELD_ALIASES: Dict[RecordKind, Dict[str, FieldRule]] = {
    RecordKind.TICKET: {
        "id": FieldRule(("ticketId", "ticket_id", "Ticket_ID", "id"), IDENTIFIER, required=True),
        "ride_name": _RIDE_NAME,
        "customer_id": FieldRule(("customerId", "customer_id", "Customer_ID"), IDENTIFIER),
        "customer_name": _CUSTOMER_NAME,
        "price": _PRICE,
        "payment_method": _PAYMENT_METHOD,
        "purchase_date": _PURCHASE_DATE,
        "ticket_type": FieldRule(("ticketType", "ticket_type", "typeName", "Type_Name")),
    },
    RecordKind.MERCHANDISE: {
        "id": FieldRule(
            ("commoditySaleId", "commodity_sale_id", "Commodity_SaleID", "saleId", "id"),
            IDENTIFIER,
            required=True,
        ),
        "item_name": FieldRule(
            ("commodityName", "itemName", "item_name", "Commodity_Name", "name")
        ),
        "price": _PRICE,
        "quantity": _QUANTITY,
        "payment_method": _PAYMENT_METHOD,
        "purchase_date": _PURCHASE_DATE,
        "customer_name": _CUSTOMER_NAME,
    },
    RecordKind.FOOD: {
        "id": FieldRule(
            ("saleId", "menuSaleId", "sale_id", "Menu_ID", "orderItemId", "id"),
            IDENTIFIER,
            required=True,
        ),
        "item_name": FieldRule(("menuItem", "itemName", "item_name", "foodName", "Food_Name", "name")),
        "price": _PRICE,
        "quantity": _QUANTITY,
        "payment_method": _PAYMENT_METHOD,
        "purchase_date": _PURCHASE_DATE,
        "customer_name": _CUSTOMER_NAME,
    },
    RecordKind.MAINTENANCE: {
        "id": FieldRule(
            ("requestId", "request_id", "RequestId", "Request_ID", "id"), IDENTIFIER, required=True
        ),
        "ride_name": _RIDE_NAME,
        "status": FieldRule(("status", "Status"), STATUS),
        "reporter_name": FieldRule(
            (
                "reporterName",
                "reporter_name",
                ("reporter.firstName", "reporter.lastName"),
                ("reporter.FirstName", "reporter.LastName"),
            )
        ),
        "assignee_id": FieldRule(
            (
                "assigneeId",
                "assignee_id",
                "assignee.employeeId",
                "assignee.employee_ID",
                "assignedTo",
                "AssignedTo",
            ),
            IDENTIFIER,
        ),
        "assignee_name": FieldRule(
            (
                "assigneeName",
                "assignee_name",
                ("assignee.firstName", "assignee.lastName"),
                ("assignee.FirstName", "assignee.LastName"),
            )
        ),
        "request_date": FieldRule(
            ("requestDate", "request_date", "RequestDate", "Request_Date"), DATE, required=True
        ),
        "completion_date": FieldRule(
            ("completionDate", "completion_date", "CompletionDate", "Completion_Date"), DATE
        ),
        "issue_description": FieldRule(
            ("issueDescription", "issue_description", "IssueDescription", "description")
        ),
    },
    RecordKind.REVIEW: {
        "ride_name": FieldRule(_RIDE_NAME.aliases, TEXT, required=True),
        "score": FieldRule(("score", "rating", "Score", "Rating"), INTEGER, required=True),
        "reviewer_id": FieldRule(
            ("reviewerId", "customerId", "customer_id", "Customer_ID"), IDENTIFIER
        ),
        "id": FieldRule(("reviewId", "review_id", "Review_ID", "id"), IDENTIFIER),
        "review_date": FieldRule(("date", "reviewDate", "review_date", "Date"), DATE),
    },
}


def _lookup_path(raw: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted path through nested mappings; None when absent."""
    current: Any = raw
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def lookup_alias(raw: Mapping[str, Any], alias: Alias) -> Any:
    """Return the raw value an alias points at, or None.

    Composite aliases join their non-empty parts with a single space and
    yield None when every part is empty.
    """
    if isinstance(alias, tuple):
        parts = [_lookup_path(raw, p) for p in alias]
        text = " ".join(str(p).strip() for p in parts if p is not None and str(p).strip())
        return text or None
    return _lookup_path(raw, alias)


def first_present(raw: Mapping[str, Any], rule: FieldRule) -> Any:
    """Return the first present, non-null value among a rule's aliases.

    Blank strings count as absent so that a later alias can still supply
    the value.
    """
    for alias in rule.aliases:
        value = lookup_alias(raw, alias)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def field_rules(kind: RecordKind) -> Dict[str, FieldRule]:
    """Return the canonical field rules for a record kind."""
    return FIELD_ALIASES[RecordKind(kind)]
