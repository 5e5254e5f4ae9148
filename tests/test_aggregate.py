"""Tests for the aggregation engine.

These tests verify ride, item and worker rollups, the empty-group
sentinels, day normalization of ridership averages and the monthly
cancellation rate.
"""

from datetime import date, datetime

import numpy as np
import pytest

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
    NO_REVENUE,
    DateRange,
    Dimension,
    aggregate,
    cancellation_rate,
    daily_series,
    item_profitability,
    profitability_by_kind,
    ride_stats,
    sales_summary,
    stats_to_frame,
    status_summary,
    worker_stats,
)


def ticket(id, ride, day, price=10.0, **kwargs) -> Ticket:
    when = datetime(2025, 1, day, 12) if day else None
    return Ticket(id=id, price=price, purchase_date=when, ride_name=ride, **kwargs)


def maintenance(id, status, requested, completed=None, **kwargs) -> MaintenanceRequest:
    return MaintenanceRequest(
        id=id, request_date=requested, status=status, completion_date=completed, **kwargs
    )


class TestRideStats:
    @pytest.fixture
    def coaster_tickets(self) -> list:
        # 10 tickets over 5 distinct days
        return [ticket(i, "Thunder Coaster", day) for i, day in enumerate([1, 1, 2, 2, 3, 3, 4, 4, 5, 5])]

    def test_average_per_day_over_distinct_sale_days(self, coaster_tickets) -> None:
        (stat,) = ride_stats(coaster_tickets)
        assert stat.total_ridership == 10
        assert stat.active_day_count == 5
        assert stat.average_per_day == 2.0
        assert stat.revenue == 100.0

    def test_explicit_range_normalizes_by_range_length(self, coaster_tickets) -> None:
        window = DateRange(date(2025, 1, 1), date(2025, 1, 10))
        (stat,) = ride_stats(coaster_tickets, window)
        assert stat.active_day_count == 10
        assert stat.average_per_day == 1.0

    def test_reversed_range_counts_as_one_day(self, coaster_tickets) -> None:
        window = DateRange(date(2025, 1, 10), date(2025, 1, 1))
        (stat,) = ride_stats(coaster_tickets, window)
        assert stat.active_day_count == 1
        assert stat.average_per_day == 10.0

    def test_half_open_range_falls_back_to_sale_days(self, coaster_tickets) -> None:
        (stat,) = ride_stats(coaster_tickets, DateRange(start=date(2025, 1, 1)))
        assert stat.active_day_count == 5

    def test_ratings(self) -> None:
        records = [
            ticket(1, "Carousel", 1),
            Review(ride_name="Carousel", score=4),
            Review(ride_name="Carousel", score=5),
        ]
        (stat,) = ride_stats(records)
        assert stat.average_rating == 4.5
        assert stat.total_reviews == 2

    def test_ride_without_reviews_or_days_has_na_averages(self) -> None:
        (stat,) = ride_stats([ticket(1, "Carousel", None)])
        assert stat.average_rating is NA
        assert stat.active_day_count == 0
        assert stat.average_per_day is NA

    def test_catalog_rides_without_activity_are_listed(self) -> None:
        stats = ride_stats([ticket(1, "Log Flume", 1)], ride_names=["Carousel", "Log Flume"])
        assert [s.ride_name for s in stats] == ["Carousel", "Log Flume"]
        assert stats[0].total_ridership == 0
        assert stats[0].average_per_day is NA

    def test_empty_input(self) -> None:
        assert ride_stats([]) == ()


class TestProfitability:
    def test_most_and_least_profitable(self) -> None:
        records = [
            MerchandiseSale(id=1, price=10.0, purchase_date=None, item_name="Cap"),
            MerchandiseSale(id=2, price=30.0, purchase_date=None, item_name="Plush Bear"),
            MerchandiseSale(id=3, price=15.0, purchase_date=None, item_name="Cap"),
            MerchandiseSale(id=4, price=5.0, purchase_date=None, item_name="Pin"),
        ]
        report = item_profitability(records)
        assert [s.name for s in report.items] == ["Plush Bear", "Cap", "Pin"]
        assert report.most_profitable.name == "Plush Bear"
        assert report.least_profitable.name == "Pin"
        assert report.least_profitable.revenue == 5.0
        assert report.total_revenue == 60.0

    def test_ties_keep_first_sale_order(self) -> None:
        records = [
            FoodOrderLine(id=1, price=4.0, purchase_date=None, item_name="Churro"),
            FoodOrderLine(id=2, price=4.0, purchase_date=None, item_name="Soda"),
        ]
        report = item_profitability(records)
        assert report.most_profitable.name == "Churro"
        assert report.least_profitable.name == "Soda"

    def test_empty_group_sentinels(self) -> None:
        report = item_profitability([])
        assert report.most_profitable.name is None
        assert report.most_profitable.revenue == 0
        assert report.least_profitable.name is None
        assert report.least_profitable.revenue == NO_REVENUE
        assert np.isinf(report.least_profitable.revenue)
        assert not report.least_profitable.has_data

    def test_by_kind_covers_every_sale_kind(self) -> None:
        reports = profitability_by_kind([ticket(1, "Carousel", 1, ticket_type="Child")])
        assert set(reports) == {RecordKind.TICKET, RecordKind.MERCHANDISE, RecordKind.FOOD}
        assert reports[RecordKind.TICKET].most_profitable.name == "Child"
        assert not reports[RecordKind.FOOD].most_profitable.has_data


class TestItemDimension:
    def test_missing_quantity_counts_as_one(self) -> None:
        records = [
            MerchandiseSale(id=1, price=10.0, purchase_date=None, item_name="Cap", quantity=3),
            MerchandiseSale(id=2, price=10.0, purchase_date=None, item_name="Cap"),
        ]
        (stat,) = aggregate(records, Dimension.ITEM)
        assert stat.count == 2
        assert stat.quantity == 4
        assert stat.kind is RecordKind.MERCHANDISE

    def test_zero_quantity_stays_zero(self) -> None:
        records = [
            MerchandiseSale(id=1, price=0.0, purchase_date=None, item_name="Cap", quantity=0),
            MerchandiseSale(id=2, price=10.0, purchase_date=None, item_name="Cap", quantity=2),
        ]
        (stat,) = aggregate(records, Dimension.ITEM)
        assert stat.quantity == 2

    def test_same_name_in_different_kinds_is_separate(self) -> None:
        records = [
            MerchandiseSale(id=1, price=10.0, purchase_date=None, item_name="Combo"),
            FoodOrderLine(id=2, price=8.0, purchase_date=None, item_name="Combo"),
        ]
        assert len(aggregate(records, "item")) == 2


class TestWorkers:
    def test_tallies_sorted_by_completed(self) -> None:
        records = [
            maintenance(1, MaintenanceStatus.COMPLETED, datetime(2025, 1, 1), datetime(2025, 1, 2),
                        assignee_id=7, assignee_name="Grace"),
            maintenance(2, MaintenanceStatus.IN_PROGRESS, datetime(2025, 1, 3), assignee_id=8,
                        assignee_name="Alan"),
            maintenance(3, MaintenanceStatus.COMPLETED, datetime(2025, 1, 4), datetime(2025, 1, 9),
                        assignee_id=8, assignee_name="Alan"),
            maintenance(4, MaintenanceStatus.COMPLETED, datetime(2025, 1, 5), datetime(2025, 1, 6),
                        assignee_id=8, assignee_name="Alan"),
            maintenance(5, MaintenanceStatus.OPEN, datetime(2025, 1, 5)),
        ]
        stats = worker_stats(records)
        assert [s.name for s in stats] == ["Alan", "Grace"]
        alan = stats[0]
        assert (alan.completed, alan.in_progress, alan.cancelled, alan.total) == (2, 1, 0, 3)
        assert alan.last_completed_date == datetime(2025, 1, 9)

    def test_worker_without_completions(self) -> None:
        (stat,) = aggregate(
            [maintenance(1, MaintenanceStatus.CANCELLED, datetime(2025, 1, 1), assignee_id=3)],
            Dimension.WORKER,
        )
        assert stat.cancelled == 1
        assert stat.last_completed_date is None


class TestCancellationRate:
    def test_three_cancellations_over_three_months(self) -> None:
        records = [
            maintenance(1, MaintenanceStatus.CANCELLED, datetime(2025, 1, 2), datetime(2025, 1, 5)),
            maintenance(2, MaintenanceStatus.CANCELLED, datetime(2025, 1, 20)),
            maintenance(3, MaintenanceStatus.CANCELLED, datetime(2025, 2, 1), datetime(2025, 3, 2)),
            maintenance(4, MaintenanceStatus.COMPLETED, datetime(2024, 6, 1), datetime(2024, 6, 2)),
        ]
        result = cancellation_rate(records)
        assert result.cancelled_count == 3
        assert result.month_span == 3
        assert result.rate == 1.0

    def test_span_crosses_year_boundary(self) -> None:
        records = [
            maintenance(1, MaintenanceStatus.CANCELLED, datetime(2024, 11, 30)),
            maintenance(2, MaintenanceStatus.CANCELLED, datetime(2025, 2, 1)),
        ]
        assert cancellation_rate(records).month_span == 4

    def test_no_cancellations_is_zero(self) -> None:
        result = cancellation_rate([maintenance(1, MaintenanceStatus.OPEN, datetime(2025, 1, 1))])
        assert result.rate == 0
        assert result.month_span == 0

    def test_undated_cancellations_are_zero(self) -> None:
        result = cancellation_rate([maintenance(1, MaintenanceStatus.CANCELLED, None)])
        assert result.cancelled_count == 1
        assert result.rate == 0


def test_status_summary_lists_every_status() -> None:
    records = [
        maintenance(1, MaintenanceStatus.OPEN, None, ride_name="Carousel"),
        maintenance(2, MaintenanceStatus.OPEN, None),
        maintenance(3, MaintenanceStatus.COMPLETED, None, ride_name="Carousel"),
        ticket(4, "Carousel", 1),
    ]
    summary = status_summary(records)
    assert summary.total == 3
    assert summary.count("open") == 2
    assert summary.count(MaintenanceStatus.CANCELLED) == 0
    assert set(summary.counts) == set(MaintenanceStatus)
    assert dict(summary.by_ride[MaintenanceStatus.OPEN]) == {"Carousel": 1, "Unknown": 1}


class TestSalesSummary:
    def test_headline_figures(self) -> None:
        records = [
            ticket(1, "Carousel", 1, price=10.0, payment_method="Cash"),
            ticket(2, "Carousel", 2, price=20.0, payment_method="Credit Card"),
            ticket(3, "Carousel", None, price=5.0, payment_method="Cash"),
            FoodOrderLine(id=4, price=6.0, purchase_date=datetime(2025, 1, 2), item_name="Churro"),
        ]
        summary = sales_summary(records)
        assert summary.total_revenue == 41.0
        assert summary.revenue_by_kind[RecordKind.TICKET] == 35.0
        assert summary.revenue_by_kind[RecordKind.MERCHANDISE] == 0.0
        assert summary.most_common_kind.key == "Tickets"
        assert summary.most_common_item.key == "Carousel"
        assert summary.most_common_payment.key == "Cash"
        assert summary.distinct_days == 2
        assert summary.average_spent_per_day == 18.0

    def test_no_sales(self) -> None:
        summary = sales_summary([])
        assert summary.total_revenue == 0
        assert summary.average_spent_per_day is NA
        assert summary.most_common_item.key is None


def test_daily_series_pivots_riders_by_day_and_ride() -> None:
    records = [
        ticket(1, "Carousel", 1),
        ticket(2, "Carousel", 1),
        ticket(3, "Log Flume", 2),
        ticket(4, "Log Flume", None),
    ]
    series = daily_series(records)
    assert list(series.columns) == ["Carousel", "Log Flume"]
    assert series.loc[date(2025, 1, 1), "Carousel"] == 2
    assert series.loc[date(2025, 1, 1), "Log Flume"] == 0
    assert series["Log Flume"].sum() == 1


def test_daily_series_empty() -> None:
    assert daily_series([]).empty


def test_stats_to_frame_maps_na_to_nan() -> None:
    frame = stats_to_frame(ride_stats([ticket(1, "Carousel", None)]))
    assert frame.loc[0, "group_key"] == "Carousel"
    assert np.isnan(frame.loc[0, "average_rating"])


def test_aggregate_rejects_unknown_dimension() -> None:
    with pytest.raises(ValueError):
        aggregate([], "color")
