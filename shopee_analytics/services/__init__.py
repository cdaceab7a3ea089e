"""
Serviços de domínio: decodificação, filtros e agregação.
"""

from .aggregation_service import AggregationService, aggregate, growth_rate  # noqa: F401
from .dashboard_service import DashboardService  # noqa: F401
from .decoder import RecordDecoder, coerce_number, coerce_text, decode  # noqa: F401
from .filter_service import apply_filters  # noqa: F401

__all__ = [
    "aggregate",
    "AggregationService",
    "apply_filters",
    "coerce_number",
    "coerce_text",
    "DashboardService",
    "decode",
    "growth_rate",
    "RecordDecoder",
]
