"""Scriptable rate provider used across the test suite."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from app.providers.base import BaseRateProvider, ProviderError


class FakeProvider(BaseRateProvider):
    """Queued ``fetch_latest`` answers plus a per-date history table.

    Queue entries and history values may be exceptions, which are raised.
    """

    name = "fake"

    def __init__(self, latest=None, history=None):
        self.latest = list(latest or [])
        self.history = dict(history or {})
        self.latest_calls: list[str] = []
        self.history_calls: list[tuple[date, str, str]] = []

    def fetch_latest(self, base: str):
        self.latest_calls.append(base)
        if not self.latest:
            raise ProviderError("No response queued")
        result = self.latest.pop(0)
        if isinstance(result, Exception):
            raise result
        return {code: Decimal(str(value)) for code, value in result.items()}

    def fetch_historical(self, day: date, base: str, quote: str):
        self.history_calls.append((day, base, quote))
        result = self.history.get(day)
        if isinstance(result, Exception):
            raise result
        return None if result is None else Decimal(str(result))
