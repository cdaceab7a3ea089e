"""
Analytics de exports de pedidos da Shopee.

Fluxo: arquivo (CSV, JSON, XLSX) -> ``load_orders`` -> ``apply_filters``
-> ``aggregate`` -> métricas para a camada de apresentação.
"""

from shopee_analytics.core.config import settings
from shopee_analytics.core.errors import ErrorCategory, IngestionError
from shopee_analytics.core.logging import init_logging
from shopee_analytics.domain import DashboardMetrics, FilterCriteria, Order, parse_date
from shopee_analytics.services import (
    AggregationService,
    DashboardService,
    RecordDecoder,
    aggregate,
    apply_filters,
)
from shopee_analytics.infra.readers import load_orders

if settings.LOG_AUTO_CONFIGURE:
    init_logging()

__version__ = "1.0.0"

__all__ = [
    "aggregate",
    "AggregationService",
    "apply_filters",
    "DashboardMetrics",
    "DashboardService",
    "ErrorCategory",
    "FilterCriteria",
    "init_logging",
    "IngestionError",
    "load_orders",
    "Order",
    "parse_date",
    "RecordDecoder",
]
