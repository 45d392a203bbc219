"""Date formatting helpers for tree item descriptions and tooltips."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime (used for created_at)."""
    return datetime.now(timezone.utc)


def get_date_str(value: datetime) -> str:
    """Format as local date, e.g. '2026-10-18'."""
    return value.astimezone().strftime("%Y-%m-%d")


def get_date_time_str(value: datetime) -> str:
    """Format as local date and time, e.g. '2026-10-18 14:03:52'."""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp written by to_dict(); naive values are taken as UTC."""
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
