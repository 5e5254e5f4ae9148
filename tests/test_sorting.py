"""Tests for the sort engine."""

from datetime import datetime

import pytest

from park_core.config import ReportConfig
from park_core.records import MaintenanceRequest, MaintenanceStatus, Ticket
from park_core.reporting import (
    NA,
    RideStat,
    SortDirection,
    SortSpec,
    sort_records,
    sort_stats,
    status_priority,
)

ASC = SortDirection.ASCENDING
DESC = SortDirection.DESCENDING


def request(id, status, when=None) -> MaintenanceRequest:
    return MaintenanceRequest(id=id, request_date=when, status=status)


@pytest.fixture
def tickets() -> list:
    return [
        Ticket(id=1, price=10.0, purchase_date=datetime(2025, 1, 3), ride_name="b"),
        Ticket(id=2, price=5.0, purchase_date=None, ride_name="A"),
        Ticket(id=3, price=10.0, purchase_date=datetime(2025, 1, 1), ride_name=None),
        Ticket(id=4, price=5.0, purchase_date=datetime(2025, 1, 2), ride_name="a"),
    ]


class TestStatusOrdering:
    def test_descending_puts_most_urgent_first(self) -> None:
        requests = [
            request(1, MaintenanceStatus.CANCELLED),
            request(2, MaintenanceStatus.OPEN),
            request(3, MaintenanceStatus.COMPLETED),
        ]
        ordered = sort_records(requests, SortSpec("status", DESC))
        assert [r.status for r in ordered] == [
            MaintenanceStatus.OPEN,
            MaintenanceStatus.COMPLETED,
            MaintenanceStatus.CANCELLED,
        ]

    def test_ascending_puts_least_urgent_first(self) -> None:
        requests = [
            request(1, MaintenanceStatus.OPEN),
            request(2, MaintenanceStatus.UNKNOWN),
            request(3, MaintenanceStatus.IN_PROGRESS),
        ]
        ordered = sort_records(requests, SortSpec("status", ASC))
        assert [r.id for r in ordered] == [2, 3, 1]

    def test_priorities(self) -> None:
        assert status_priority(MaintenanceStatus.OPEN) == 1
        assert status_priority(MaintenanceStatus.IN_PROGRESS) == 2
        assert status_priority(MaintenanceStatus.ASSIGNED) == 3
        assert status_priority(MaintenanceStatus.COMPLETED) == 4
        assert status_priority(MaintenanceStatus.CANCELLED) == 5
        assert status_priority(MaintenanceStatus.UNKNOWN) == 99
        assert status_priority(None) == 99

    def test_configured_priorities(self) -> None:
        config = ReportConfig(status_priority={"Completed": 0})
        requests = [request(1, MaintenanceStatus.OPEN), request(2, MaintenanceStatus.COMPLETED)]
        ordered = sort_records(requests, SortSpec("status", DESC), config)
        assert [r.id for r in ordered] == [2, 1]


class TestStability:
    def test_equal_keys_keep_input_order_in_both_directions(self, tickets) -> None:
        assert [t.id for t in sort_records(tickets, SortSpec("price", ASC))] == [2, 4, 1, 3]
        assert [t.id for t in sort_records(tickets, SortSpec("price", DESC))] == [1, 3, 2, 4]

    def test_equal_statuses_keep_input_order(self) -> None:
        requests = [request(i, MaintenanceStatus.OPEN) for i in range(5)]
        for direction in (ASC, DESC):
            assert [r.id for r in sort_records(requests, SortSpec("status", direction))] == list(range(5))


class TestKeys:
    def test_text_is_case_sensitive_and_missing_sorts_first(self, tickets) -> None:
        ordered = sort_records(tickets, SortSpec("ride_name", ASC))
        assert [t.ride_name for t in ordered] == [None, "A", "a", "b"]

    def test_missing_date_sorts_as_epoch(self, tickets) -> None:
        ordered = sort_records(tickets, SortSpec("purchase_date", ASC))
        assert [t.id for t in ordered] == [2, 3, 4, 1]

    def test_unknown_key_keeps_order(self, tickets) -> None:
        ordered = sort_records(tickets, SortSpec("height", DESC))
        assert ordered == tickets
        assert ordered is not tickets

    def test_no_key_keeps_order(self, tickets) -> None:
        assert sort_records(tickets, SortSpec()) == tickets
        assert sort_records(tickets, None) == tickets


def test_na_rating_sorts_as_zero() -> None:
    stats = [
        RideStat(group_key="A", count=1, revenue=0.0, average_rating=3.0),
        RideStat(group_key="B", count=1, revenue=0.0, average_rating=NA),
        RideStat(group_key="C", count=1, revenue=0.0, average_rating=4.5),
    ]
    ordered = sort_stats(stats, SortSpec("average_rating", ASC))
    assert [s.group_key for s in ordered] == ["B", "A", "C"]


def test_toggle_flips_direction_of_active_key() -> None:
    spec = SortSpec().toggle("price")
    assert spec == SortSpec("price", ASC)
    assert spec.toggle("price") == SortSpec("price", DESC)
    assert spec.toggle("price").toggle("revenue") == SortSpec("revenue", ASC)
