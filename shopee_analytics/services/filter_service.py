"""Filter engine over in-memory order lists."""

from __future__ import annotations

from typing import Iterable, Optional

from shopee_analytics.domain.filters import FilterCriteria
from shopee_analytics.domain.models import Order


def apply_filters(orders: Iterable[Order], criteria: Optional[FilterCriteria] = None) -> list[Order]:
    """
    Keep the orders that satisfy every active criterion.

    Input order is preserved. A missing ``criteria`` keeps everything.
    """
    if criteria is None:
        return list(orders)
    predicates = criteria.to_predicates()
    if not predicates:
        return list(orders)
    return [order for order in orders if all(p(order) for p in predicates)]


__all__ = ["apply_filters"]
