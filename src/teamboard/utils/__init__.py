"""Utility functions."""

from .datetime import DAY_MS, format_date, from_iso, from_ms, now_ms, to_iso
from .ids import generate_id

__all__ = [
    "DAY_MS",
    "format_date",
    "from_iso",
    "from_ms",
    "generate_id",
    "now_ms",
    "to_iso",
]
