"""Tests for stats service."""

from datetime import date

import pytest

from cookiecogs.models import DailyRecord, DateRange, Product, SalesChannel


@pytest.fixture
def products(sample_history):
    return sample_history.products


def test_recorded_days(stats, products):
    assert stats.recorded_days(products) == ["2025-01-14", "2025-01-15", "2025-01-16"]


def test_last_n_days(stats, products):
    period = stats.last_n_days(products, 2)

    assert period.start == date(2025, 1, 15)
    assert period.end == date(2025, 1, 16)


def test_day_totals(stats, products):
    totals = stats.day_totals(products, "2025-01-16")

    assert totals.sold == 19
    assert totals.prepared == 30
    assert totals.produced == 30
    assert totals.staff_consumption == 1
    assert totals.revenue == pytest.approx(48.0)
    assert totals.by_channel[SalesChannel.LOCATION] == 13
    assert totals.waste_rate == pytest.approx(100 / 30)
    assert totals.efficiency == pytest.approx(1900 / 30)


def test_day_without_records(stats, products):
    totals = stats.day_totals(products, "2024-12-24")

    assert totals.sold == 0
    assert totals.waste_rate == 0.0
    assert totals.efficiency == 0.0


def test_all_days_limit(stats, products):
    days = stats.all_days(products, limit=2)
    assert [d.date for d in days] == ["2025-01-15", "2025-01-16"]


def test_period_totals_all_channels(stats, products):
    totals = stats.period_totals(products, product_ids=[1])[0]

    assert totals.sold == 36
    assert totals.produced == 60
    assert totals.revenue == pytest.approx(90.0)
    assert totals.cost == pytest.approx(45.0)
    assert totals.margin == pytest.approx(45.0)
    assert totals.by_channel[SalesChannel.UBEREATS] == 9


def test_period_totals_single_channel(stats, products):
    totals = stats.period_totals(products, product_ids=[1], channel=SalesChannel.WOLT)[0]

    assert totals.sold == 6
    assert totals.revenue == pytest.approx(15.0)


def test_staff_consumption_has_no_revenue(stats, products):
    totals = stats.period_totals(products, product_ids=[1], channel=SalesChannel.STAFF)[0]

    assert totals.sold == 3
    assert totals.revenue == 0.0


def test_period_totals_date_range(stats, products):
    period = DateRange(start=date(2025, 1, 15))
    totals = stats.period_totals(products, period, product_ids=[1])[0]

    assert totals.sold == 26


def test_legacy_aggregate_counts_as_sold(stats):
    product = Product(id=1, name="Old", price=2.0)
    product.history["2024-06-01"] = DailyRecord(legacy_sold=7)

    totals = stats.period_totals([product])[0]

    assert totals.sold == 7
    assert totals.revenue == pytest.approx(14.0)


def test_channel_breakdown(stats, products):
    breakdown = stats.channel_breakdown(products)

    assert breakdown[SalesChannel.LOCATION] == 36
    assert breakdown[SalesChannel.WOLT] == 6
    assert breakdown[SalesChannel.STAFF] == 3
    assert breakdown[SalesChannel.WEBSITE] == 0


def test_dashboard_totals(stats, sample_history):
    totals = stats.dashboard_totals(sample_history.products, sample_history.warn_levels)

    assert totals.total_sold == 51
    assert totals.total_revenue == pytest.approx(129.0)
    # Seed stock is zero everywhere
    assert totals.low_stock_count == 9


def test_category_breakdown(stats, products):
    categories = {c.category: c for c in stats.category_breakdown(products)}

    assert categories["Classic"].sold == 36
    assert categories["Seasonal"].revenue == pytest.approx(39.0)
    assert categories["Premium"].sold == 0


def test_top_sellers(stats, products):
    top = stats.top_sellers(products, limit=2)
    assert [t["name"] for t in top] == ["Chocolate Chip", "Lemon"]


def test_sales_trend(stats):
    product = Product(id=1, name="Trend")
    for i, sold in enumerate([10, 10, 10, 20, 20, 20]):
        product.history[f"2025-01-0{i + 1}"] = DailyRecord(verkauft_location=sold)

    trend = stats.sales_trend([product])

    assert trend.recent_average == 20.0
    assert trend.previous_average == 10.0
    assert trend.percent_change == 100.0


def test_sales_trend_without_older_days(stats, products):
    trend = stats.sales_trend(products)

    assert len(trend.days) == 3
    assert trend.percent_change == 0.0
