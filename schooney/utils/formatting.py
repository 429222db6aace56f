"""
Locale-independent value formatting shared by CSV export and the console.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

_NEEDS_QUOTING = (",", '"', "\n", "\r")
_CENT = Decimal("0.01")


def escape_csv_value(value: Any) -> str:
    """
    Quote a field iff it contains a comma, a double quote or a newline;
    internal quotes are doubled. None becomes an empty string.
    """
    if value is None:
        return ""
    text = str(value)
    if any(token in text for token in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def format_amount(value: Any) -> str:
    """Plain two-decimal text without thousands separators ("125000.00")."""
    if value is None:
        return ""
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return f"{amount.quantize(_CENT):f}"


def format_date(value: Optional[date]) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%Y-%m-%d")


def format_datetime(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value is not None else ""


def slugify(value: str) -> str:
    """'Year 10' -> 'year-10'; keeps underscores ('not_sent')."""
    slug = re.sub(r"\s+", "-", value.strip().lower())
    return re.sub(r"[^a-z0-9_-]", "", slug)


__all__ = [
    "escape_csv_value",
    "format_amount",
    "format_date",
    "format_datetime",
    "slugify",
]
