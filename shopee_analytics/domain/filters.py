"""
Filtros aplicáveis à lista de pedidos.
Centraliza a lógica de filtragem para evitar duplicação entre as visões.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, List, Optional

from pydantic import BaseModel, field_validator, model_validator

from shopee_analytics.domain.dates import parse_date
from shopee_analytics.domain.models import Order

OrderPredicate = Callable[[Order], bool]


class FilterCriteria(BaseModel):
    """
    Critérios opcionais, combinados com AND.

    Critério ausente significa "sem restrição". Valores inválidos (datas
    ilegíveis, listas vazias, busca em branco) também viram "sem restrição".
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    statuses: Optional[List[str]] = None
    states: Optional[List[str]] = None
    products: Optional[List[str]] = None
    search: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _coerce_date(cls, v: object) -> Optional[date]:
        if v is None or v == "":
            return None
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, date):
            return v
        parsed = parse_date(v)
        return parsed.date() if parsed else None

    @field_validator("statuses", "states", "products", mode="before")
    @classmethod
    def _clean_values(cls, v: object) -> Optional[List[str]]:
        if v is None:
            return None
        if isinstance(v, str):
            v = [v]
        # limpeza simples
        cleaned = [str(s).strip() for s in v if s is not None and str(s).strip()]
        return cleaned or None

    @field_validator("search", mode="before")
    @classmethod
    def _clean_search(cls, v: object) -> Optional[str]:
        if v is None:
            return None
        term = str(v).strip()
        return term or None

    @model_validator(mode="after")
    def _ordered_range(self) -> "FilterCriteria":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            self.start_date, self.end_date = self.end_date, self.start_date
        return self

    def is_empty(self) -> bool:
        return not self.to_predicates()

    def has_date_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def to_predicates(self) -> List[OrderPredicate]:
        """
        Converte os critérios ativos em predicados sobre ``Order``.

        Returns:
            Lista de predicados; o pedido permanece se todos retornarem True
        """
        predicates: List[OrderPredicate] = []

        if self.has_date_range():
            lower = datetime.combine(self.start_date, time.min) if self.start_date else None
            upper = datetime.combine(self.end_date, time.max) if self.end_date else None

            def _in_range(order: Order) -> bool:
                created = parse_date(order.created_at)
                if created is None:
                    return False
                if lower is not None and created < lower:
                    return False
                if upper is not None and created > upper:
                    return False
                return True

            predicates.append(_in_range)

        if self.statuses:
            statuses = frozenset(self.statuses)
            predicates.append(lambda order: order.status in statuses)

        if self.states:
            states = frozenset(self.states)
            predicates.append(lambda order: order.state in states)

        if self.products:
            needles = [p.casefold() for p in self.products]
            predicates.append(
                lambda order: any(n in order.product_name.casefold() for n in needles)
            )

        if self.search:
            term = self.search.casefold()

            def _matches_search(order: Order) -> bool:
                haystacks = (order.product_name, order.order_id, order.buyer_username, order.state)
                return any(term in h.casefold() for h in haystacks)

            predicates.append(_matches_search)

        return predicates

    def matches(self, order: Order) -> bool:
        return all(predicate(order) for predicate in self.to_predicates())
