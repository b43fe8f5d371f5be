"""Shared datetime helpers for enforcing UTC awareness."""

from __future__ import annotations

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime."""

    return datetime.now(UTC)


def utc_today() -> date:
    return utc_now().date()


def now_millis() -> int:
    """Milliseconds since the Unix epoch."""

    return int(utc_now().timestamp() * 1000)


def millis_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=UTC)
