"""Decodificação de linhas tabulares em pedidos tipados."""

from __future__ import annotations

import math
import numbers
import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from shopee_analytics.core.logging import StructuredLogger, get_logger
from shopee_analytics.domain import columns
from shopee_analytics.domain.models import Order

_NON_NUMERIC_RE = re.compile(r"[^\d,.\-]")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def coerce_number(value: Any) -> float:
    """
    Converte um valor bruto em float.

    Números nativos (planilhas) passam direto. Texto é limpo até sobrarem
    dígitos, vírgula, ponto e sinal; vírgula é o separador decimal
    brasileiro. Qualquer falha vira 0.
    """
    if _is_blank(value):
        return 0.0
    if isinstance(value, (numbers.Real, Decimal)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    if not cleaned:
        return 0.0

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            # 1.234,56
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            # 1,234.56
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        if cleaned.count(",") > 1:
            cleaned = cleaned.replace(",", "")
        else:
            cleaned = cleaned.replace(",", ".")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")

    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_text(value: Any) -> str:
    """Texto aparado; datas nativas viram ISO-8601."""
    if _is_blank(value):
        return ""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        # IDs e telefones lidos como float pela planilha
        return str(int(value))
    return str(value).strip()


def _coerce_quantity(value: float) -> int:
    return max(0, int(round(value)))


def unique_headers(headers: Sequence[Any]) -> list[str]:
    """
    Limpa os nomes de coluna e numera repetições: o export da Shopee traz
    ``Desconto do vendedor`` duas vezes, e a segunda vira
    ``Desconto do vendedor__1``. Colunas sem nome ficam vazias.
    """
    seen: dict[str, int] = {}
    cleaned: list[str] = []
    for header in headers:
        name = coerce_text(header).replace('"', "").strip()
        if name:
            count = seen.get(name, 0)
            seen[name] = count + 1
            if count:
                name = f"{name}__{count}"
        cleaned.append(name)
    return cleaned


class RecordDecoder:
    """
    Converte linhas (cabeçalho + células) ou objetos JSON em ``Order``.

    Defeitos de campo viram valores padrão; uma exceção inesperada descarta
    apenas a linha afetada.
    """

    def __init__(
        self,
        numeric_columns: Iterable[str] = columns.NUMERIC_COLUMNS,
        logger: StructuredLogger | None = None,
    ):
        self.numeric_columns = frozenset(numeric_columns)
        self.logger = logger or get_logger(__name__)

    def decode(self, headers: Sequence[str], raw_row: Sequence[Any]) -> Optional[Order]:
        """Decodifica uma linha posicional. Retorna None se todas as células estão vazias."""
        return self._decode_positional(unique_headers(headers), raw_row)

    def _decode_positional(self, headers: Sequence[str], raw_row: Sequence[Any]) -> Optional[Order]:
        cells = {}
        for index, name in enumerate(headers):
            if not name:
                continue
            cells[name] = raw_row[index] if index < len(raw_row) else None
        return self.decode_mapping(cells)

    def decode_mapping(self, record: Mapping[str, Any]) -> Optional[Order]:
        """Decodifica um objeto já chaveado pelo nome da coluna."""
        if all(_is_blank(value) for value in record.values()):
            return None

        fields: dict[str, Any] = {}
        numeric_values: dict[str, float] = {}
        extras: dict[str, str] = {}

        for raw_name, value in record.items():
            name = str(raw_name).strip()
            if not name:
                continue
            if name in self.numeric_columns:
                numeric_values[name] = coerce_number(value)
            elif name in columns.TEXT_FIELDS:
                fields[columns.TEXT_FIELDS[name]] = coerce_text(value)
            else:
                extras[name] = coerce_text(value)

        for name, attr in columns.NUMERIC_FIELDS.items():
            if name in numeric_values:
                fields[attr] = numeric_values[name]
            elif name in record:
                # coluna tipada fora da allow-list configurada
                fields[attr] = coerce_number(record[name])
        if "quantity" in fields:
            fields["quantity"] = _coerce_quantity(fields["quantity"])

        return Order(numbers=numeric_values, extras=extras, **fields)

    def decode_rows(
        self,
        headers: Sequence[str],
        rows: Iterable[Sequence[Any]],
    ) -> list[Order]:
        """
        Decodifica todas as linhas de uma tabela.

        Linhas vazias são ignoradas; uma linha que falhar é descartada e
        registrada em log, sem interromper o lote.
        """
        headers = unique_headers(headers)
        for index, header in enumerate(headers):
            if not header:
                self.logger.warning(
                    "Coluna sem nome ignorada",
                    column_index=index,
                )

        orders: list[Order] = []
        skipped = 0
        total = 0
        for row_number, raw_row in enumerate(rows, start=2):
            total += 1
            try:
                order = self._decode_positional(headers, raw_row)
            except Exception as exc:
                skipped += 1
                self.logger.warning(
                    "Linha descartada na decodificação",
                    row_number=row_number,
                    error=repr(exc),
                )
                continue
            if order is not None:
                orders.append(order)

        self.logger.info(
            "Tabela decodificada",
            rows_in=total,
            orders_out=len(orders),
            skipped_rows=skipped,
        )
        return orders

    def decode_records(self, records: Iterable[Any]) -> list[Order]:
        """Decodifica um array JSON de objetos chaveados."""
        orders: list[Order] = []
        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                self.logger.warning(
                    "Item do JSON não é um objeto",
                    position=position,
                    item_type=type(record).__name__,
                )
                continue
            try:
                order = self.decode_mapping(record)
            except Exception as exc:
                self.logger.warning(
                    "Registro descartado na decodificação",
                    position=position,
                    error=repr(exc),
                )
                continue
            if order is not None:
                orders.append(order)
        return orders


def decode(headers: Sequence[str], raw_row: Sequence[Any]) -> Optional[Order]:
    """Atalho para ``RecordDecoder().decode``."""
    return RecordDecoder().decode(headers, raw_row)


__all__ = ["RecordDecoder", "coerce_number", "coerce_text", "decode", "unique_headers"]
