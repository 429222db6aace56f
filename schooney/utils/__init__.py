"""
Utilities package for the Schooney record console.

Exports shared helpers for logging and locale-independent formatting.
Keep this package lightweight and free of domain-specific logic.
"""

from schooney.utils.formatting import (
    escape_csv_value,
    format_amount,
    format_date,
    format_datetime,
    slugify,
)
from schooney.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "escape_csv_value",
    "format_amount",
    "format_date",
    "format_datetime",
    "slugify",
]
