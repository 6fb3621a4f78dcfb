"""Shared display helpers; every helper renders missing values as a dash."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from config import ReportConfig
from json_values import finite_number

PLACEHOLDER = "—"

Number = Union[int, float]


def _localize(text: str) -> str:
    if not ReportConfig.DOCUMENT_LANG.lower().startswith("pt"):
        return text
    return text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def format_count(value: Any) -> str:
    number = finite_number(value)
    if number is None:
        return PLACEHOLDER
    if isinstance(number, float) and not number.is_integer():
        return _localize(f"{number:,.2f}")
    return _localize(f"{int(number):,}")


def format_currency(cents: Any) -> str:
    number = finite_number(cents)
    if number is None:
        return PLACEHOLDER
    return f"{ReportConfig.CURRENCY_SYMBOL} {_localize(f'{number / 100:,.2f}')}"


def format_duration(ms: Any) -> str:
    number = finite_number(ms)
    if number is None:
        return PLACEHOLDER
    if number < 1000:
        return f"{number} ms"
    return f"{number / 1000:.1f} s"


def format_percent(value: Any) -> str:
    number = finite_number(value)
    if number is None:
        return PLACEHOLDER
    return f"{number}%"


def format_score(value: Optional[Number]) -> str:
    number = finite_number(value)
    return PLACEHOLDER if number is None else f"{number:.2f}"


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(f"{ReportConfig.DATE_FORMAT} %H:%M")


__all__ = [
    "PLACEHOLDER",
    "format_count",
    "format_currency",
    "format_duration",
    "format_percent",
    "format_score",
    "format_timestamp",
]
