"""Tests for the filter engine."""

from datetime import date, datetime

import pytest

from park_core.exceptions import ConfigError
from park_core.records import (
    FoodOrderLine,
    MaintenanceRequest,
    MaintenanceStatus,
    MerchandiseSale,
    RecordKind,
    Review,
    Ticket,
)
from park_core.reporting import (
    NA,
    DateRange,
    FilterSpec,
    NumericRange,
    RideStat,
    filter_records,
    filter_stats,
    last_n_days,
    today_range,
)


@pytest.fixture
def records() -> list:
    return [
        Ticket(id=1, price=25.0, purchase_date=datetime(2025, 1, 1, 9), ride_name="Thunder Coaster",
               customer_name="Ada Lovelace", payment_method="Credit Card"),
        Ticket(id=2, price=15.0, purchase_date=datetime(2025, 1, 10, 23, 59, 59), ride_name="Carousel",
               payment_method="cash"),
        Ticket(id=3, price=30.0, purchase_date=None, ride_name="Thunder Coaster"),
        MerchandiseSale(id=4, price=18.5, purchase_date=datetime(2025, 1, 5), item_name="Plush Bear",
                        quantity=2, payment_method="Cash"),
        FoodOrderLine(id=5, price=4.0, purchase_date=datetime(2025, 1, 11), item_name="Churro"),
        MaintenanceRequest(id=6, request_date=datetime(2025, 1, 3), status=MaintenanceStatus.OPEN,
                           ride_name="Carousel"),
        MaintenanceRequest(id=7, request_date=datetime(2025, 1, 4), status=MaintenanceStatus.COMPLETED,
                           ride_name="Thunder Coaster"),
        Review(ride_name="Carousel", score=5, review_date=datetime(2025, 1, 6)),
    ]


def ids(records) -> list:
    return [r.id for r in records if r.kind != RecordKind.REVIEW]


class TestDateRange:
    def test_end_day_is_inclusive_to_the_last_millisecond(self, records) -> None:
        spec = FilterSpec(date_range=DateRange(date(2025, 1, 1), date(2025, 1, 10)))
        result = filter_records(records, spec)
        assert ids(result) == [1, 2, 4, 6, 7]

    def test_unparsable_dates_never_match_a_bounded_range(self, records) -> None:
        spec = FilterSpec(date_range=DateRange(start=date(2024, 1, 1)))
        assert 3 not in ids(filter_records(records, spec))

    def test_unbounded_range_keeps_undated_records(self, records) -> None:
        spec = FilterSpec(date_range=DateRange())
        assert 3 in ids(filter_records(records, spec))

    def test_from_strings(self) -> None:
        dr = DateRange.from_strings("2025-01-01", "")
        assert dr.start == date(2025, 1, 1)
        assert dr.end is None
        assert not dr.is_closed


class TestClauses:
    def test_no_spec_keeps_everything_in_order(self, records) -> None:
        assert filter_records(records) == records
        assert filter_records(records, FilterSpec()) == records

    def test_status_set_applies_to_maintenance_only(self, records) -> None:
        spec = FilterSpec(status_set=frozenset({"open"}))
        result = filter_records(records, spec)
        assert 6 in ids(result)
        assert 7 not in ids(result)
        assert 1 in ids(result)

    def test_empty_status_set_is_no_constraint(self, records) -> None:
        assert filter_records(records, FilterSpec(status_set=frozenset())) == records

    def test_category_is_exact_and_case_sensitive(self, records) -> None:
        assert ids(filter_records(records, FilterSpec(category_equals="Carousel"))) == [2, 6]
        assert filter_records(records, FilterSpec(category_equals="carousel")) == []

    def test_category_on_named_field(self, records) -> None:
        spec = FilterSpec(category_equals="Cash", category_field="payment_method")
        assert ids(filter_records(records, spec)) == [4]

    def test_numeric_range(self, records) -> None:
        spec = FilterSpec(numeric_range=NumericRange("price", min=15, max=25))
        assert ids(filter_records(records, spec)) == [1, 2, 4]

    def test_numeric_range_on_unknown_field_is_ignored(self, records) -> None:
        spec = FilterSpec(numeric_range=NumericRange("height", min=100))
        assert filter_records(records, spec) == records

    def test_source_toggles(self, records) -> None:
        spec = FilterSpec(source_toggles=frozenset({RecordKind.FOOD, RecordKind.MERCHANDISE}))
        assert ids(filter_records(records, spec)) == [4, 5]

    def test_empty_source_toggles_disable_everything(self, records) -> None:
        assert filter_records(records, FilterSpec(source_toggles=frozenset())) == []

    def test_payment_method_is_case_insensitive(self, records) -> None:
        spec = FilterSpec(payment_method="CASH", source_toggles=frozenset({RecordKind.TICKET, RecordKind.MERCHANDISE}))
        assert ids(filter_records(records, spec)) == [2, 4]

    def test_item_names(self, records) -> None:
        spec = FilterSpec(item_names=frozenset({"Churro"}), source_toggles=frozenset({RecordKind.FOOD, RecordKind.TICKET}))
        assert ids(filter_records(records, spec)) == [5]

    def test_search(self, records) -> None:
        assert ids(filter_records(records, FilterSpec(search="lovelace"))) == [1]
        assert ids(filter_records(records, FilterSpec(search="food"))) == [5]


def test_filtering_is_idempotent(records) -> None:
    spec = FilterSpec(
        date_range=DateRange(date(2025, 1, 1), date(2025, 1, 10)),
        numeric_range=NumericRange("price", min=0, max=20),
    )
    once = filter_records(records, spec)
    assert filter_records(once, spec) == once


class TestValidation:
    def test_start_after_end(self) -> None:
        with pytest.raises(ConfigError):
            FilterSpec(date_range=DateRange(date(2025, 2, 1), date(2025, 1, 1))).validate()

    def test_min_above_max(self) -> None:
        with pytest.raises(ConfigError):
            FilterSpec(numeric_range=NumericRange("score", min=5, max=1)).validate()

    def test_negative_price_bound(self) -> None:
        with pytest.raises(ConfigError):
            FilterSpec(numeric_range=NumericRange("price", min=-1)).validate()


class TestStatFilters:
    def test_na_rating_fails_any_rating_bound(self) -> None:
        stats = [
            RideStat(group_key="A", count=3, revenue=0.0, average_rating=4.5),
            RideStat(group_key="B", count=9, revenue=0.0, average_rating=NA),
        ]
        assert [s.group_key for s in filter_stats(stats, [NumericRange("average_rating", min=4)])] == ["A"]
        assert [s.group_key for s in filter_stats(stats, [NumericRange("count", max=5)])] == ["A"]


def test_quick_date_presets() -> None:
    assert last_n_days(7, today=date(2025, 1, 15)) == DateRange(date(2025, 1, 8), date(2025, 1, 15))
    assert today_range(date(2025, 1, 15)) == DateRange(date(2025, 1, 15), date(2025, 1, 15))
