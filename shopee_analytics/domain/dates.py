"""
Normalização de datas do export.

As datas chegam como texto em vários formatos (ISO, ``YYYY-MM-DD HH:mm``,
``DD/MM/YYYY``...) ou como ``datetime`` nativo vindo de planilhas. Cada
matcher é total: devolve ``None`` em vez de levantar exceção, e o primeiro
que reconhecer o valor vence. O resultado é sempre um ``datetime`` sem fuso
(horário de parede do export, sem conversão).
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from dateutil import parser as dateutil_parser

DateMatcher = Callable[[str], Optional[datetime]]

_FREEFORM_DEFAULT = datetime(1900, 1, 1)
_YEAR_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")
# Formatos já cobertos pelos padrões explícitos; se falharam, a data é inválida
_STRUCTURED_RE = re.compile(r"^(\d{4}-\d{1,2}-\d{1,2}|\d{1,2}/\d{1,2}/\d{4})")


def _wall_clock(value: datetime) -> datetime:
    return value.replace(tzinfo=None) if value.tzinfo is not None else value


def _match_iso(text: str) -> Optional[datetime]:
    if not text[:4].isdigit():
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return _wall_clock(parsed)


def _pattern(regex: str, order: Sequence[str]) -> DateMatcher:
    """
    Matcher ancorado. ``order`` nomeia os grupos capturados na sequência
    em que aparecem; campos ausentes valem zero (meia-noite).
    """
    compiled = re.compile(regex)

    def _match(text: str) -> Optional[datetime]:
        m = compiled.match(text)
        if not m:
            return None
        parts = dict(zip(order, (int(g) for g in m.groups())))
        try:
            return datetime(
                parts["year"],
                parts["month"],
                parts["day"],
                parts.get("hour", 0),
                parts.get("minute", 0),
                parts.get("second", 0),
            )
        except ValueError:
            return None

    return _match


def _match_freeform(text: str) -> Optional[datetime]:
    # Sem um ano de 4 dígitos o dateutil completaria a data com o dia atual
    if not _YEAR_RE.search(text) or _STRUCTURED_RE.match(text):
        return None
    try:
        parsed = dateutil_parser.parse(text, dayfirst=True, default=_FREEFORM_DEFAULT)
    except (ValueError, OverflowError):
        return None
    return _wall_clock(parsed)


# Ordem de prioridade: ISO estrito, padrões explícitos, texto livre
DATE_MATCHERS: tuple[DateMatcher, ...] = (
    _match_iso,
    _pattern(
        r"^(\d{4})-(\d{1,2})-(\d{1,2})[ T](\d{1,2}):(\d{2})$",
        ("year", "month", "day", "hour", "minute"),
    ),
    _pattern(r"^(\d{4})-(\d{1,2})-(\d{1,2})$", ("year", "month", "day")),
    _pattern(
        r"^(\d{1,2})/(\d{1,2})/(\d{4}) (\d{1,2}):(\d{2})$",
        ("day", "month", "year", "hour", "minute"),
    ),
    _pattern(r"^(\d{1,2})/(\d{1,2})/(\d{4})$", ("day", "month", "year")),
    _pattern(
        r"^(\d{1,2})/(\d{1,2})/(\d{4}) (\d{1,2}):(\d{2}):(\d{2})$",
        ("day", "month", "year", "hour", "minute", "second"),
    ),
    _match_freeform,
)


def parse_date(value: object, matchers: Sequence[DateMatcher] = DATE_MATCHERS) -> Optional[datetime]:
    """
    Converte texto de data/hora em ``datetime``.

    Retorna ``None`` para vazio, espaços ou formatos não reconhecidos.
    Nunca levanta exceção para dados malformados.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _wall_clock(value)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    text = str(value).strip()
    if not text:
        return None

    for matcher in matchers:
        parsed = matcher(text)
        if parsed is not None:
            return parsed
    return None


def day_key(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def month_key(value: datetime) -> str:
    return value.strftime("%Y-%m")


__all__ = ["DATE_MATCHERS", "parse_date", "day_key", "month_key"]
