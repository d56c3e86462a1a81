"""Shared utilities: datetime helpers."""

from app.shared.utils.datetime import (
    ensure_utc,
    parse_iso_date,
    parse_iso_datetime,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "parse_iso_date",
    "parse_iso_datetime",
]
