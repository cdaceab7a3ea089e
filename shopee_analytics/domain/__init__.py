"""
Modelos de domínio e DTOs para a aplicação.
Camada de domínio independente de infraestrutura.
"""

from .dates import parse_date
from .models import (
    ABCItem,
    ABCSummary,
    BestDayResult,
    DailyRevenue,
    DashboardMetrics,
    DateCoverage,
    DaySales,
    FilterOptions,
    HourSales,
    MonthlyRevenue,
    Order,
    ProductDetails,
    ProductRevenue,
    ProductStats,
    StateRevenue,
    StatusCount,
    SummaryCards,
    VariationSales,
    WeekdaySales,
)
from .filters import FilterCriteria

__all__ = [
    "ABCItem",
    "ABCSummary",
    "BestDayResult",
    "DailyRevenue",
    "DashboardMetrics",
    "DateCoverage",
    "DaySales",
    "FilterCriteria",
    "FilterOptions",
    "HourSales",
    "MonthlyRevenue",
    "Order",
    "ProductDetails",
    "ProductRevenue",
    "ProductStats",
    "StateRevenue",
    "StatusCount",
    "SummaryCards",
    "VariationSales",
    "WeekdaySales",
    "parse_date",
]
