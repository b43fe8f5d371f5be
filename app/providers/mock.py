"""Mock provider implementation for testing and local development."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from .base import BaseRateProvider, ProviderError
from .schemas import RateTable, normalize_code

# Units of each currency per one USD.
_USD_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.85"),
    "GBP": Decimal("0.78"),
    "JPY": Decimal("150.12"),
    "CHF": Decimal("0.88"),
}


class MockRateProvider(BaseRateProvider):
    """Deterministic provider returning synthetic rate tables."""

    name = "mock"

    def fetch_latest(self, base: str) -> RateTable:
        base_currency = normalize_code(base)
        base_rate = _USD_RATES.get(base_currency)
        if base_rate is None:
            raise ProviderError(f"Mock provider has no rates for '{base_currency}'")
        return {code: value / base_rate for code, value in _USD_RATES.items()}

    def fetch_historical(self, day: date, base: str, quote: str) -> Optional[Decimal]:
        table = self.fetch_latest(base)
        rate = table.get(normalize_code(quote))
        if rate is None:
            return None
        # Small deterministic drift so the trend line is not flat.
        drift = Decimal(day.toordinal() % 7) * Decimal("0.001")
        return rate * (Decimal("1") + drift)
