"""
Modelos de domínio e DTOs.
Representam os conceitos de negócio independentes da infraestrutura.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from shopee_analytics.domain import columns


@dataclass(frozen=True)
class Order:
    """
    Uma linha de item de pedido do export.

    Vários itens podem compartilhar o mesmo ``order_id``. Colunas numéricas
    da allow-list ficam em ``numbers``; as demais colunas de texto sem
    atributo próprio ficam em ``extras``.
    """

    order_id: str = ""
    status: str = ""
    product_name: str = ""
    variation_name: str = ""
    quantity: int = 0
    unit_price_agreed: float = 0.0
    total_value: float = 0.0
    created_at: str = ""
    state: str = ""
    buyer_username: str = ""
    numbers: Mapping[str, float] = field(default_factory=dict)
    extras: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "numbers", MappingProxyType(dict(self.numbers)))
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))

    def get(self, column: str, default: Any = None) -> Any:
        """Valor de uma coluna do export pelo nome original."""
        if column in columns.TEXT_FIELDS:
            return getattr(self, columns.TEXT_FIELDS[column])
        if column in self.numbers:
            return self.numbers[column]
        return self.extras.get(column, default)

    def to_dict(self) -> Dict[str, Any]:
        """Mapeamento no formato do export (cabeçalho -> valor)."""
        payload: Dict[str, Any] = {
            header: getattr(self, attr) for header, attr in columns.TEXT_FIELDS.items()
        }
        payload.update(self.numbers)
        payload.update(self.extras)
        return payload


# -----------------------------------------------------------------------------
# Métricas do dashboard
# -----------------------------------------------------------------------------


@dataclass
class DailyRevenue:
    """Receita agregada por dia (chave ISO ``YYYY-MM-DD``)."""

    day: str
    revenue: float


@dataclass
class MonthlyRevenue:
    """Receita agregada por mês (chave ``YYYY-MM``)."""

    month: str
    revenue: float


@dataclass
class StateRevenue:
    """Receita por UF de entrega."""

    state: str
    revenue: float
    orders: int = 0

    @property
    def avg_ticket(self) -> float:
        if self.orders == 0:
            return 0.0
        return self.revenue / self.orders


@dataclass
class ProductRevenue:
    """Produto com quantidade e receita somadas."""

    product: str
    quantity: int
    revenue: float


@dataclass
class StatusCount:
    status: str
    count: int


@dataclass
class DashboardMetrics:
    """Resultado completo de uma agregação. Recalculado a cada chamada."""

    total_revenue: float
    total_orders: int
    average_order_value: float
    daily_revenue: List[DailyRevenue] = field(default_factory=list)
    state_revenue: List[StateRevenue] = field(default_factory=list)
    top_products: List[ProductRevenue] = field(default_factory=list)
    status_distribution: List[StatusCount] = field(default_factory=list)
    monthly_revenue: List[MonthlyRevenue] = field(default_factory=list)
    # Sem dados de visitantes no export
    conversion_rate: float = 0.0

    @classmethod
    def empty(cls) -> "DashboardMetrics":
        return cls(total_revenue=0.0, total_orders=0, average_order_value=0.0)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# -----------------------------------------------------------------------------
# Análises estendidas
# -----------------------------------------------------------------------------


@dataclass
class ABCItem:
    """Produto classificado na curva ABC."""

    product: str
    quantity: int
    revenue: float
    percentage: float
    cumulative_percentage: float
    category: str
    rank: int


@dataclass
class ABCSummary:
    items: List[ABCItem] = field(default_factory=list)

    @property
    def counts(self) -> Dict[str, int]:
        stats = {"A": 0, "B": 0, "C": 0}
        for item in self.items:
            stats[item.category] += 1
        return stats

    def top(self, limit: int = 10) -> List[ABCItem]:
        return self.items[:limit]


@dataclass
class DaySales:
    """Vendas de um dia com dados."""

    day: str
    orders: int
    revenue: float

    @property
    def avg_ticket(self) -> float:
        if self.orders == 0:
            return 0.0
        return self.revenue / self.orders


@dataclass
class BestDayResult:
    best_day: Optional[DaySales] = None
    top_days: List[DaySales] = field(default_factory=list)


@dataclass
class HourSales:
    """Vendas por hora do dia (0-23)."""

    hour: int
    orders: int
    revenue: float

    @property
    def label(self) -> str:
        return f"{self.hour:02d}:00"


@dataclass
class WeekdaySales:
    weekday: str
    orders: int
    revenue: float


@dataclass
class VariationSales:
    """Ranking de variações (cor, tamanho, ...)."""

    variation: str
    quantity: int
    revenue: float
    orders: int

    @property
    def avg_ticket(self) -> float:
        if self.orders == 0:
            return 0.0
        return self.revenue / self.orders


@dataclass
class ProductStats:
    """Linha da tabela de produtos."""

    product: str
    quantity: int
    revenue: float
    orders: int
    price_sum: float = 0.0

    @property
    def avg_ticket(self) -> float:
        if self.orders == 0:
            return 0.0
        return self.revenue / self.orders

    @property
    def avg_price(self) -> float:
        """Soma dos preços acordados dividida pela quantidade vendida."""
        if self.quantity == 0:
            return 0.0
        return self.price_sum / self.quantity


@dataclass
class ProductDetails:
    """Detalhamento de um único produto."""

    product: str
    stats: ProductStats
    first_sale: Optional[str]
    last_sale: Optional[str]
    states: List[str] = field(default_factory=list)
    status_counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class SummaryCards:
    """Cartões de resumo do topo do dashboard."""

    total_revenue: float
    total_orders: int
    average_order_value: float
    unique_products: int
    revenue_today: float


@dataclass
class DateCoverage:
    """Intervalo de datas disponível nos dados."""

    min_date: Optional[datetime] = None
    max_date: Optional[datetime] = None
    days: List[str] = field(default_factory=list)
    months: List[str] = field(default_factory=list)

    def has_data(self, day: date) -> bool:
        return day.isoformat() in self.days


@dataclass
class FilterOptions:
    """Valores distintos para montar os seletores de filtro."""

    statuses: List[str] = field(default_factory=list)
    states: List[str] = field(default_factory=list)
    products: List[str] = field(default_factory=list)
