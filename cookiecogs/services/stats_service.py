"""
Stats Service - Aggregates daily records across channels and products

Pure functions over product lists. Nothing is cached; totals are derived
from the raw per-day records on every call.
"""

from typing import Dict, List, Optional

from cookiecogs.config.constants import DEFAULT_WARN_LEVEL, TREND_RECENT_DAYS, TREND_WINDOW_DAYS
from cookiecogs.models import (
    CategoryTotals,
    DailyRecord,
    DashboardTotals,
    DateRange,
    DayTotals,
    Product,
    ProductPeriodTotals,
    SalesChannel,
    SalesTrend,
    StockStatus,
)
from cookiecogs.models.common import today_iso
from cookiecogs.services.catalog_service import stock_status


def channel_sold(record: DailyRecord, channel: Optional[SalesChannel] = None) -> int:
    """Units sold on a record, across revenue channels or for one channel."""
    if channel is None:
        return record.sold
    return record.get_channel(channel)


class StatsService:
    """Computes sales, production and revenue aggregates."""

    # =========================================================================
    # Days
    # =========================================================================

    def recorded_days(self, products: List[Product]) -> List[str]:
        """Every date with at least one record, ascending."""
        return sorted({day for p in products for day in p.history})

    def last_n_days(self, products: List[Product], n: int) -> DateRange:
        """Range spanning the last `n` recorded days."""
        days = self.recorded_days(products)[-n:] if n > 0 else []
        if not days:
            return DateRange()
        return DateRange(start=days[0], end=days[-1])

    def day_totals(self, products: List[Product], day: str) -> DayTotals:
        by_channel = {c: 0 for c in SalesChannel}
        totals = DayTotals(date=day, by_channel=by_channel)

        for product in products:
            record = product.history.get(day)
            if record is None:
                continue
            totals.sold += record.sold
            totals.prepared += record.prepared
            totals.used += record.used
            totals.trash += record.trash
            totals.new += record.new
            totals.produced += record.produziert
            totals.staff_consumption += record.mitarbeiter_verbrauch
            totals.revenue += record.sold * product.price
            for channel in SalesChannel:
                by_channel[channel] += record.get_channel(channel)

        totals.revenue = round(totals.revenue, 2)
        return totals

    def all_days(self, products: List[Product], limit: Optional[int] = None) -> List[DayTotals]:
        """Day totals for every recorded day, newest last."""
        days = self.recorded_days(products)
        if limit:
            days = days[-limit:]
        return [self.day_totals(products, day) for day in days]

    def today(self, products: List[Product]) -> DayTotals:
        return self.day_totals(products, today_iso())

    # =========================================================================
    # Periods
    # =========================================================================

    def period_totals(
        self,
        products: List[Product],
        period: Optional[DateRange] = None,
        product_ids: Optional[List[int]] = None,
        channel: Optional[SalesChannel] = None,
    ) -> List[ProductPeriodTotals]:
        """
        Per-product totals over a date range.

        Args:
            period: Inclusive range; open ends are unbounded
            product_ids: Restrict to these products
            channel: Count only this channel as sold (STAFF counts staff use)
        """
        period = period or DateRange()
        selected = [p for p in products if product_ids is None or p.id in product_ids]
        result = []

        for product in selected:
            totals = ProductPeriodTotals(
                product_id=product.id,
                name=product.name,
                category=product.category,
                by_channel={c: 0 for c in SalesChannel},
            )
            for day, record in product.history.items():
                if not period.contains(day):
                    continue
                totals.produced += record.produziert
                totals.sold += channel_sold(record, channel)
                totals.staff_consumption += record.mitarbeiter_verbrauch
                totals.trash += record.trash
                for c in SalesChannel:
                    totals.by_channel[c] += record.get_channel(c)

            revenue_units = 0 if channel is SalesChannel.STAFF else totals.sold
            totals.revenue = round(revenue_units * product.price, 2)
            totals.cost = round(totals.produced * product.production_price, 2)
            result.append(totals)

        return result

    def channel_breakdown(
        self,
        products: List[Product],
        period: Optional[DateRange] = None,
    ) -> Dict[SalesChannel, int]:
        breakdown = {c: 0 for c in SalesChannel}
        for totals in self.period_totals(products, period):
            for channel, value in totals.by_channel.items():
                breakdown[channel] += value
        return breakdown

    # =========================================================================
    # Lifetime views
    # =========================================================================

    def dashboard_totals(self, products: List[Product], warn_levels: Dict[str, int]) -> DashboardTotals:
        return DashboardTotals(
            total_sold=sum(p.sold for p in products),
            total_stock=sum(p.stock for p in products),
            total_prepared=sum(p.prepared for p in products),
            total_revenue=round(sum(p.sold * p.price for p in products), 2),
            low_stock_count=sum(
                1 for p in products
                if stock_status(p.stock, warn_levels.get(p.name) or DEFAULT_WARN_LEVEL) != StockStatus.GOOD
            ),
        )

    def category_breakdown(self, products: List[Product]) -> List[CategoryTotals]:
        categories: Dict[str, CategoryTotals] = {}
        for product in products:
            entry = categories.setdefault(product.category, CategoryTotals(category=product.category))
            entry.sold += product.sold
            entry.revenue = round(entry.revenue + product.sold * product.price, 2)
        return list(categories.values())

    def top_sellers(self, products: List[Product], limit: int = 5) -> List[Dict]:
        ranked = sorted(products, key=lambda p: p.sold, reverse=True)[:limit]
        return [
            {
                "product_id": p.id,
                "name": p.name,
                "category": p.category,
                "sold": p.sold,
                "revenue": round(p.sold * p.price, 2),
            }
            for p in ranked
        ]

    def sales_trend(self, products: List[Product]) -> SalesTrend:
        """Average daily sales of the last 3 recorded days vs. the days before (within 7)."""
        days = self.recorded_days(products)[-TREND_WINDOW_DAYS:]
        recent = days[-TREND_RECENT_DAYS:]
        older = days[:-TREND_RECENT_DAYS]

        def avg(selection: List[str]) -> float:
            if not selection:
                return 0.0
            return sum(self.day_totals(products, d).sold for d in selection) / len(selection)

        recent_avg = avg(recent)
        older_avg = avg(older)
        change = ((recent_avg - older_avg) / older_avg) * 100 if older_avg > 0 else 0.0

        return SalesTrend(
            days=days,
            recent_average=round(recent_avg, 2),
            previous_average=round(older_avg, 2),
            percent_change=round(change, 1),
        )
