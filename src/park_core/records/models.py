"""Canonical record variants.

Every source collection (ticket sales, merchandise sales, food order lines,
maintenance requests, ride reviews) is normalized into one of the frozen
dataclasses below. Together they form the CanonicalRecord tagged union; the
tag is the ``kind`` class attribute.

Shared accessors used by the filter, sort and aggregation engines:

- ``record_date``: the date used for range filtering (purchase, request or
  review date), or None when the source date was unparsable
- ``label``: the ride or item name used for category filters
- ``revenue``: the non-negative monetary amount (0 for non-sale variants)

Optional fields that the source did not provide are None.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Union


class RecordKind(str, Enum):
    """Variant tag of a canonical record."""

    TICKET = "ticket"
    MERCHANDISE = "merchandise"
    FOOD = "food"
    MAINTENANCE = "maintenance"
    REVIEW = "review"

    @property
    def display_name(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    RecordKind.TICKET: "Tickets",
    RecordKind.MERCHANDISE: "Merchandise",
    RecordKind.FOOD: "Food",
    RecordKind.MAINTENANCE: "Maintenance",
    RecordKind.REVIEW: "Reviews",
}

SALE_KINDS = frozenset({RecordKind.TICKET, RecordKind.MERCHANDISE, RecordKind.FOOD})


class MaintenanceStatus(str, Enum):
    """Lifecycle state of a maintenance request."""

    OPEN = "Open"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: object) -> MaintenanceStatus:
        """Map free-form status text onto a status, case-insensitively.

        Backends report "In Progress", "in_progress" and "InProgress" for the
        same state. Unrecognized or missing text maps to UNKNOWN.

        Examples:
            >>> MaintenanceStatus.parse("in progress")
            <MaintenanceStatus.IN_PROGRESS: 'InProgress'>
            >>> MaintenanceStatus.parse(None)
            <MaintenanceStatus.UNKNOWN: 'Unknown'>
        """
        if isinstance(value, MaintenanceStatus):
            return value
        if value is None:
            return cls.UNKNOWN
        key = "".join(ch for ch in str(value).lower() if ch.isalnum())
        return _STATUS_ALIASES.get(key, cls.UNKNOWN)


_STATUS_ALIASES = {
    "open": MaintenanceStatus.OPEN,
    "assigned": MaintenanceStatus.ASSIGNED,
    "inprogress": MaintenanceStatus.IN_PROGRESS,
    "completed": MaintenanceStatus.COMPLETED,
    "cancelled": MaintenanceStatus.CANCELLED,
    "canceled": MaintenanceStatus.CANCELLED,
}


@dataclass(frozen=True)
class Ticket:
    """A single ticket sale.

    Attributes:
        id: Ticket sale identifier.
        ride_name: Ride the ticket type grants access to.
        customer_id: Purchasing customer.
        customer_name: Purchasing customer's display name.
        price: Amount paid (non-negative).
        payment_method: Payment method label as reported by the backend.
        purchase_date: Purchase timestamp, None if unparsable.
        ticket_type: Ticket type (catalog item) that was sold.
    """

    kind: ClassVar[RecordKind] = RecordKind.TICKET

    id: object
    price: float
    purchase_date: Optional[datetime]
    ride_name: Optional[str] = None
    customer_id: Optional[object] = None
    customer_name: Optional[str] = None
    payment_method: Optional[str] = None
    ticket_type: Optional[str] = None

    @property
    def record_date(self) -> Optional[datetime]:
        return self.purchase_date

    @property
    def label(self) -> Optional[str]:
        return self.ride_name

    @property
    def item_name(self) -> Optional[str]:
        # Profitability groups tickets by type, falling back to the ride
        return self.ticket_type or self.ride_name

    @property
    def revenue(self) -> float:
        return self.price


@dataclass(frozen=True)
class MerchandiseSale:
    """A merchandise (commodity) sale line."""

    kind: ClassVar[RecordKind] = RecordKind.MERCHANDISE

    id: object
    price: float
    purchase_date: Optional[datetime]
    item_name: Optional[str] = None
    quantity: Optional[int] = None
    payment_method: Optional[str] = None
    customer_name: Optional[str] = None

    @property
    def record_date(self) -> Optional[datetime]:
        return self.purchase_date

    @property
    def label(self) -> Optional[str]:
        return self.item_name

    @property
    def revenue(self) -> float:
        return self.price


@dataclass(frozen=True)
class FoodOrderLine:
    """A food/menu order line."""

    kind: ClassVar[RecordKind] = RecordKind.FOOD

    id: object
    price: float
    purchase_date: Optional[datetime]
    item_name: Optional[str] = None
    quantity: Optional[int] = None
    payment_method: Optional[str] = None
    customer_name: Optional[str] = None

    @property
    def record_date(self) -> Optional[datetime]:
        return self.purchase_date

    @property
    def label(self) -> Optional[str]:
        return self.item_name

    @property
    def revenue(self) -> float:
        return self.price


@dataclass(frozen=True)
class MaintenanceRequest:
    """A maintenance work order for a ride.

    Attributes:
        id: Request identifier.
        request_date: When the request was filed, None if unparsable.
        status: Current lifecycle status.
        ride_name: Ride the request concerns.
        reporter_name: Employee who filed the request.
        assignee_id: Employee assigned to the request, None if unassigned.
        assignee_name: Assigned employee's display name.
        completion_date: Completion (or cancellation) timestamp, None if unset.
        issue_description: Free-text description of the problem.
    """

    kind: ClassVar[RecordKind] = RecordKind.MAINTENANCE

    id: object
    request_date: Optional[datetime]
    status: MaintenanceStatus = MaintenanceStatus.UNKNOWN
    ride_name: Optional[str] = None
    reporter_name: Optional[str] = None
    assignee_id: Optional[object] = None
    assignee_name: Optional[str] = None
    completion_date: Optional[datetime] = None
    issue_description: Optional[str] = None

    @property
    def record_date(self) -> Optional[datetime]:
        return self.request_date

    @property
    def label(self) -> Optional[str]:
        return self.ride_name

    @property
    def revenue(self) -> float:
        return 0.0


@dataclass(frozen=True)
class Review:
    """A customer review of a ride (score 1-5)."""

    kind: ClassVar[RecordKind] = RecordKind.REVIEW

    ride_name: str
    score: int
    reviewer_id: Optional[object] = None
    id: Optional[object] = None
    review_date: Optional[datetime] = None

    @property
    def record_date(self) -> Optional[datetime]:
        return self.review_date

    @property
    def label(self) -> Optional[str]:
        return self.ride_name

    @property
    def revenue(self) -> float:
        return 0.0


CanonicalRecord = Union[Ticket, MerchandiseSale, FoodOrderLine, MaintenanceRequest, Review]

RECORD_TYPES = {
    RecordKind.TICKET: Ticket,
    RecordKind.MERCHANDISE: MerchandiseSale,
    RecordKind.FOOD: FoodOrderLine,
    RecordKind.MAINTENANCE: MaintenanceRequest,
    RecordKind.REVIEW: Review,
}
