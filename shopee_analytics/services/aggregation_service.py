"""
Motor de agregação das métricas do dashboard.

Todas as operações são funções puras da lista recebida: nada é cacheado
entre chamadas e a entrada nunca é modificada. Somas monetárias usam
``math.fsum``, que dá o mesmo resultado qualquer que seja a ordem dos
pedidos.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from shopee_analytics.core.config import settings
from shopee_analytics.core.logging import StructuredLogger, get_logger
from shopee_analytics.domain import columns
from shopee_analytics.domain.dates import day_key, month_key, parse_date
from shopee_analytics.domain.models import (
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
from shopee_analytics.services.decoder import coerce_number

DatedOrder = Tuple[Order, datetime]


def _revenue(order: Order) -> float:
    return coerce_number(order.total_value)


def _quantity(order: Order) -> int:
    return int(coerce_number(order.quantity))


class _Bucket:
    """Acumulador de um grupo: receita, quantidade, linhas e preço."""

    __slots__ = ("revenues", "prices", "quantity", "count")

    def __init__(self):
        self.revenues: List[float] = []
        self.prices: List[float] = []
        self.quantity = 0
        self.count = 0

    def add(self, order: Order) -> None:
        self.revenues.append(_revenue(order))
        self.prices.append(coerce_number(order.unit_price_agreed))
        self.quantity += _quantity(order)
        self.count += 1

    @property
    def revenue(self) -> float:
        return math.fsum(self.revenues)

    @property
    def price_sum(self) -> float:
        return math.fsum(self.prices)


def _group(orders: Iterable[Order], key) -> Dict[str, _Bucket]:
    """Agrupa preservando a ordem de primeira ocorrência."""
    buckets: Dict[str, _Bucket] = {}
    for order in orders:
        k = key(order)
        bucket = buckets.get(k)
        if bucket is None:
            bucket = buckets[k] = _Bucket()
        bucket.add(order)
    return buckets


def _state_of(order: Order) -> str:
    return order.state.strip() or columns.STATE_NOT_INFORMED


def _product_of(order: Order) -> str:
    return order.product_name.strip() or columns.PRODUCT_NOT_INFORMED


def _status_of(order: Order) -> str:
    return order.status.strip() or columns.STATUS_NOT_INFORMED


def _variation_of(order: Order) -> str:
    return order.variation_name.strip() or columns.NO_VARIATION


def growth_rate(current: float, previous: float) -> float:
    """Variação percentual; 0 quando não há base de comparação."""
    if previous == 0:
        return 0.0
    return ((current - previous) / previous) * 100


class AggregationService:
    """Service for dashboard aggregation logic."""

    def __init__(
        self,
        logger: StructuredLogger | None = None,
        top_products_limit: Optional[int] = None,
        abc_a_threshold: Optional[float] = None,
        abc_b_threshold: Optional[float] = None,
    ):
        self.logger = logger or get_logger(__name__)
        self.top_products_limit = top_products_limit or settings.TOP_PRODUCTS_LIMIT
        self.abc_a_threshold = settings.ABC_A_THRESHOLD if abc_a_threshold is None else abc_a_threshold
        self.abc_b_threshold = settings.ABC_B_THRESHOLD if abc_b_threshold is None else abc_b_threshold

    # ------------------------------------------------------------------
    # Datas
    # ------------------------------------------------------------------

    def _dated(self, orders: Sequence[Order]) -> List[DatedOrder]:
        """Pares (pedido, data) para os pedidos com data reconhecida."""
        dated: List[DatedOrder] = []
        unparseable: List[str] = []
        for order in orders:
            created = parse_date(order.created_at)
            if created is None:
                if order.created_at.strip():
                    unparseable.append(order.created_at)
                continue
            dated.append((order, created))

        if unparseable:
            self.logger.warning(
                "Datas não reconhecidas ignoradas nas séries temporais",
                count=len(unparseable),
                sample=unparseable[0],
            )
        return dated

    # ------------------------------------------------------------------
    # Métricas principais
    # ------------------------------------------------------------------

    def aggregate(self, orders: Iterable[Order]) -> DashboardMetrics:
        """Calcula todas as métricas do dashboard para a lista recebida."""
        orders = list(orders)
        if not orders:
            return DashboardMetrics.empty()

        total_revenue = math.fsum(_revenue(o) for o in orders)
        total_orders = len(orders)
        dated = self._dated(orders)

        days: Dict[str, List[float]] = {}
        months: Dict[str, List[float]] = {}
        for order, created in dated:
            days.setdefault(day_key(created), []).append(_revenue(order))
            months.setdefault(month_key(created), []).append(_revenue(order))

        daily_revenue = [DailyRevenue(day=d, revenue=math.fsum(v)) for d, v in sorted(days.items())]
        monthly_revenue = [MonthlyRevenue(month=m, revenue=math.fsum(v)) for m, v in sorted(months.items())]

        status_distribution = [
            StatusCount(status=status, count=bucket.count)
            for status, bucket in _group(orders, _status_of).items()
        ]

        self.logger.debug(
            "Métricas agregadas",
            orders=total_orders,
            dated_orders=len(dated),
            days=len(daily_revenue),
        )

        return DashboardMetrics(
            total_revenue=total_revenue,
            total_orders=total_orders,
            average_order_value=total_revenue / total_orders,
            daily_revenue=daily_revenue,
            state_revenue=self._states(orders),
            top_products=self._products(orders)[: self.top_products_limit],
            status_distribution=status_distribution,
            monthly_revenue=monthly_revenue,
        )

    def _states(self, orders: Sequence[Order]) -> List[StateRevenue]:
        rows = [
            StateRevenue(state=state, revenue=bucket.revenue, orders=bucket.count)
            for state, bucket in _group(orders, _state_of).items()
        ]
        rows.sort(key=lambda r: (-r.revenue, r.state))
        return rows

    def _products(self, orders: Sequence[Order]) -> List[ProductRevenue]:
        rows = [
            ProductRevenue(product=product, quantity=bucket.quantity, revenue=bucket.revenue)
            for product, bucket in _group(orders, _product_of).items()
        ]
        # Empate de receita: nome ascendente
        rows.sort(key=lambda r: (-r.revenue, r.product))
        return rows

    # ------------------------------------------------------------------
    # Análises estendidas
    # ------------------------------------------------------------------

    def abc_curve(self, orders: Iterable[Order]) -> ABCSummary:
        """
        Classifica os produtos pela receita acumulada.

        A enquanto o acumulado for <= limite A, B enquanto <= limite B,
        C no restante. Sem receita total, todos ficam em C.
        """
        products = self._products(list(orders))
        total = math.fsum(p.revenue for p in products)

        items: List[ABCItem] = []
        running = 0.0
        for rank, product in enumerate(products, start=1):
            running += product.revenue
            if total > 0:
                percentage = (product.revenue * 100.0) / total
                cumulative = (running * 100.0) / total
            else:
                percentage = cumulative = 0.0

            if total > 0 and cumulative <= self.abc_a_threshold:
                category = "A"
            elif total > 0 and cumulative <= self.abc_b_threshold:
                category = "B"
            else:
                category = "C"

            items.append(
                ABCItem(
                    product=product.product,
                    quantity=product.quantity,
                    revenue=product.revenue,
                    percentage=percentage,
                    cumulative_percentage=cumulative,
                    category=category,
                    rank=rank,
                )
            )
        return ABCSummary(items=items)

    def _days(self, orders: Sequence[Order]) -> List[DaySales]:
        buckets: Dict[str, _Bucket] = {}
        for order, created in self._dated(orders):
            buckets.setdefault(day_key(created), _Bucket()).add(order)
        return [
            DaySales(day=day, orders=bucket.count, revenue=bucket.revenue)
            for day, bucket in sorted(buckets.items())
        ]

    def best_days(self, orders: Iterable[Order], limit: Optional[int] = None) -> BestDayResult:
        """Dias com maior receita. Só entram dias com vendas."""
        limit = limit or settings.TOP_DAYS_LIMIT
        ranked = sorted(self._days(list(orders)), key=lambda d: (-d.revenue, d.day))
        if not ranked:
            return BestDayResult()
        return BestDayResult(best_day=ranked[0], top_days=ranked[:limit])

    def sales_by_hour(self, orders: Iterable[Order]) -> List[HourSales]:
        """Sempre 24 faixas (00:00 a 23:00), mesmo sem vendas."""
        buckets = [_Bucket() for _ in range(24)]
        for order, created in self._dated(list(orders)):
            buckets[created.hour].add(order)
        return [
            HourSales(hour=hour, orders=bucket.count, revenue=bucket.revenue)
            for hour, bucket in enumerate(buckets)
        ]

    def sales_by_weekday(self, orders: Iterable[Order]) -> List[WeekdaySales]:
        """Sempre 7 dias, de Domingo a Sábado."""
        buckets = [_Bucket() for _ in columns.WEEKDAY_NAMES]
        for order, created in self._dated(list(orders)):
            # datetime.weekday(): segunda = 0
            buckets[(created.weekday() + 1) % 7].add(order)
        return [
            WeekdaySales(weekday=name, orders=bucket.count, revenue=bucket.revenue)
            for name, bucket in zip(columns.WEEKDAY_NAMES, buckets)
        ]

    def best_hour(self, orders: Iterable[Order]) -> Optional[HourSales]:
        hours = self.sales_by_hour(orders)
        if not any(h.orders for h in hours):
            return None
        # max() devolve o primeiro máximo: empate fica com a hora mais cedo
        return max(hours, key=lambda h: h.revenue)

    def best_weekday(self, orders: Iterable[Order]) -> Optional[WeekdaySales]:
        weekdays = self.sales_by_weekday(orders)
        if not any(w.orders for w in weekdays):
            return None
        return max(weekdays, key=lambda w: w.revenue)

    def state_ranking(self, orders: Iterable[Order], limit: Optional[int] = None) -> List[StateRevenue]:
        limit = limit or settings.TOP_STATES_LIMIT
        return self._states(list(orders))[:limit]

    def variation_ranking(self, orders: Iterable[Order], limit: Optional[int] = None) -> List[VariationSales]:
        """Variações ordenadas por quantidade vendida."""
        limit = limit or settings.TOP_VARIATIONS_LIMIT
        rows = [
            VariationSales(
                variation=variation,
                quantity=bucket.quantity,
                revenue=bucket.revenue,
                orders=bucket.count,
            )
            for variation, bucket in _group(orders, _variation_of).items()
        ]
        rows.sort(key=lambda r: (-r.quantity, r.variation))
        return rows[:limit]

    def product_table(self, orders: Iterable[Order]) -> List[ProductStats]:
        rows = [
            ProductStats(
                product=product,
                quantity=bucket.quantity,
                revenue=bucket.revenue,
                orders=bucket.count,
                price_sum=bucket.price_sum,
            )
            for product, bucket in _group(orders, _product_of).items()
        ]
        rows.sort(key=lambda r: (-r.revenue, r.product))
        return rows

    def product_details(self, orders: Iterable[Order], product_name: str) -> Optional[ProductDetails]:
        """Detalhes das linhas cujo nome de produto é exatamente ``product_name``."""
        lines = [o for o in orders if o.product_name == product_name]
        if not lines:
            return None

        bucket = _Bucket()
        for order in lines:
            bucket.add(order)

        dated = sorted(self._dated(lines), key=lambda pair: pair[1])
        status_counts: Dict[str, int] = {}
        for order in lines:
            status = _status_of(order)
            status_counts[status] = status_counts.get(status, 0) + 1

        return ProductDetails(
            product=product_name,
            stats=ProductStats(
                product=product_name,
                quantity=bucket.quantity,
                revenue=bucket.revenue,
                orders=bucket.count,
                price_sum=bucket.price_sum,
            ),
            first_sale=dated[0][0].created_at if dated else None,
            last_sale=dated[-1][0].created_at if dated else None,
            states=sorted({o.state for o in lines if o.state}),
            status_counts=status_counts,
        )

    def summary_cards(self, orders: Iterable[Order], today: date) -> SummaryCards:
        orders = list(orders)
        total_revenue = math.fsum(_revenue(o) for o in orders)
        total_orders = len(orders)
        today_key = today.isoformat()
        revenue_today = math.fsum(
            _revenue(order) for order, created in self._dated(orders) if day_key(created) == today_key
        )
        return SummaryCards(
            total_revenue=total_revenue,
            total_orders=total_orders,
            average_order_value=total_revenue / total_orders if total_orders else 0.0,
            unique_products=len({o.product_name for o in orders}),
            revenue_today=revenue_today,
        )

    def date_coverage(self, orders: Iterable[Order]) -> DateCoverage:
        """Dias e meses com dados, para montar o seletor de período."""
        instants = [created for _, created in self._dated(list(orders))]
        if not instants:
            return DateCoverage()
        return DateCoverage(
            min_date=min(instants),
            max_date=max(instants),
            days=sorted({day_key(i) for i in instants}),
            months=sorted({month_key(i) for i in instants}),
        )

    @staticmethod
    def filter_options(orders: Iterable[Order]) -> FilterOptions:
        orders = list(orders)
        return FilterOptions(
            statuses=sorted({o.status for o in orders if o.status}),
            states=sorted({o.state for o in orders if o.state}),
            products=sorted({o.product_name for o in orders if o.product_name}),
        )


def aggregate(orders: Iterable[Order]) -> DashboardMetrics:
    """Atalho para ``AggregationService().aggregate``."""
    return AggregationService().aggregate(orders)


__all__ = ["AggregationService", "aggregate", "growth_rate"]
