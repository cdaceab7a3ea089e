"""Dashboard facade: loaded orders + filters + aggregation."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Iterable, Optional

from shopee_analytics.domain.filters import FilterCriteria
from shopee_analytics.domain.models import (
    ABCSummary,
    BestDayResult,
    DashboardMetrics,
    DateCoverage,
    FilterOptions,
    HourSales,
    Order,
    ProductDetails,
    ProductStats,
    StateRevenue,
    SummaryCards,
    VariationSales,
    WeekdaySales,
)
from shopee_analytics.infra.readers import Content, load_orders
from shopee_analytics.services.aggregation_service import AggregationService
from shopee_analytics.services.filter_service import apply_filters


class DashboardService:
    """
    Service for the dashboard views over one loaded export.

    The orders are stored as an immutable tuple; every call filters and
    aggregates from scratch.
    """

    def __init__(self, orders: Iterable[Order], aggregator: AggregationService | None = None):
        """Initialize the service with the decoded orders."""
        self.orders: tuple[Order, ...] = tuple(orders)
        self.aggregator = aggregator or AggregationService()

    @classmethod
    def from_file(
        cls,
        content: Content,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
        aggregator: AggregationService | None = None,
    ) -> DashboardService:
        """Build the service from raw file content (CSV, JSON or XLSX)."""
        return cls(load_orders(content, filename=filename, content_type=content_type), aggregator)

    def filtered(self, criteria: Optional[FilterCriteria] = None) -> list[Order]:
        return apply_filters(self.orders, criteria)

    def metrics(self, criteria: Optional[FilterCriteria] = None) -> DashboardMetrics:
        """Get the main dashboard metrics for the given filters."""
        return self.aggregator.aggregate(self.filtered(criteria))

    def abc_curve(self, criteria: Optional[FilterCriteria] = None) -> ABCSummary:
        return self.aggregator.abc_curve(self.filtered(criteria))

    def best_days(self, criteria: Optional[FilterCriteria] = None, limit: Optional[int] = None) -> BestDayResult:
        return self.aggregator.best_days(self.filtered(criteria), limit)

    def sales_by_hour(self, criteria: Optional[FilterCriteria] = None) -> list[HourSales]:
        return self.aggregator.sales_by_hour(self.filtered(criteria))

    def sales_by_weekday(self, criteria: Optional[FilterCriteria] = None) -> list[WeekdaySales]:
        return self.aggregator.sales_by_weekday(self.filtered(criteria))

    def variation_ranking(
        self, criteria: Optional[FilterCriteria] = None, limit: Optional[int] = None
    ) -> list[VariationSales]:
        return self.aggregator.variation_ranking(self.filtered(criteria), limit)

    def state_ranking(
        self, criteria: Optional[FilterCriteria] = None, limit: Optional[int] = None
    ) -> list[StateRevenue]:
        return self.aggregator.state_ranking(self.filtered(criteria), limit)

    def product_table(self, criteria: Optional[FilterCriteria] = None) -> list[ProductStats]:
        return self.aggregator.product_table(self.filtered(criteria))

    def product_details(
        self, product_name: str, criteria: Optional[FilterCriteria] = None
    ) -> Optional[ProductDetails]:
        return self.aggregator.product_details(self.filtered(criteria), product_name)

    def summary_cards(self, today: date, criteria: Optional[FilterCriteria] = None) -> SummaryCards:
        return self.aggregator.summary_cards(self.filtered(criteria), today)

    def filter_options(self) -> FilterOptions:
        """Options always come from the full, unfiltered export."""
        return self.aggregator.filter_options(self.orders)

    def date_coverage(self) -> DateCoverage:
        return self.aggregator.date_coverage(self.orders)

    def snapshot(self, criteria: Optional[FilterCriteria] = None, limit: int = 10) -> Dict[str, Any]:
        """
        Every dashboard section as plain data for the presentation layer.
        """
        orders = self.filtered(criteria)
        agg = self.aggregator
        best = agg.best_days(orders)
        abc = agg.abc_curve(orders)
        return {
            "metrics": agg.aggregate(orders).to_dict(),
            "abc_curve": {
                "counts": abc.counts,
                "top": [asdict(item) for item in abc.top(limit)],
            },
            "best_day": asdict(best.best_day) if best.best_day else None,
            "top_days": [
                {**asdict(day), "avg_ticket": day.avg_ticket} for day in best.top_days
            ],
            "sales_by_hour": [
                {"hour": h.label, "orders": h.orders, "revenue": h.revenue}
                for h in agg.sales_by_hour(orders)
            ],
            "sales_by_weekday": [asdict(w) for w in agg.sales_by_weekday(orders)],
            "variations": [asdict(v) for v in agg.variation_ranking(orders)],
            "states": [
                {"state": s.state, "revenue": s.revenue, "orders": s.orders, "avg_ticket": s.avg_ticket}
                for s in agg.state_ranking(orders)
            ],
        }
