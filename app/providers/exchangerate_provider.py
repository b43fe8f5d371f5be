"""Live provider backed by exchangerate-api.com (latest) and exchangerate.host (history)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from app.providers.base import BaseRateProvider, ProviderError, UpstreamError
from app.providers.schemas import RateTable, normalize_code, normalize_rates, parse_rate

from .exchangerate_client import RatesAPIClient, RatesAPIClientConfig

logger = logging.getLogger(__name__)

DEFAULT_LATEST_BASE_URL = "https://api.exchangerate-api.com/v4"
DEFAULT_HISTORICAL_BASE_URL = "https://api.exchangerate.host"
DEFAULT_HISTORICAL_TIMEOUT_SECONDS = 5.0


class ExchangeRateProvider(BaseRateProvider):
    """Provider that talks to the public exchange-rate services."""

    name = "live"

    def __init__(self, latest_client: RatesAPIClient, historical_client: RatesAPIClient) -> None:
        self._latest_client = latest_client
        self._historical_client = historical_client

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ExchangeRateProvider:
        latest_config = RatesAPIClientConfig(
            base_url=_string_or_default(config.get("LATEST_RATES_API_BASE_URL"), DEFAULT_LATEST_BASE_URL),
            timeout=_optional_timeout(config.get("LATEST_REQUEST_TIMEOUT_SECONDS")),
        )
        historical_config = RatesAPIClientConfig(
            base_url=_string_or_default(
                config.get("HISTORICAL_RATES_API_BASE_URL"), DEFAULT_HISTORICAL_BASE_URL
            ),
            timeout=float(
                config.get("HISTORICAL_REQUEST_TIMEOUT_SECONDS", DEFAULT_HISTORICAL_TIMEOUT_SECONDS)
            ),
            access_key=str(config.get("HISTORICAL_RATES_API_KEY") or ""),
        )
        return cls(RatesAPIClient(latest_config), RatesAPIClient(historical_config))

    def fetch_latest(self, base: str) -> RateTable:
        base_currency = self._normalize(base)
        payload = self._latest_client.get(f"/latest/{base_currency}")

        rates = payload.get("rates")
        if not isinstance(rates, Mapping) or not rates:
            raise UpstreamError(f"Response for {base_currency} is missing the 'rates' mapping")
        try:
            return normalize_rates(rates)
        except ValueError as exc:
            raise UpstreamError(f"Malformed rates for {base_currency}: {exc}") from exc

    def fetch_historical(self, day: date, base: str, quote: str) -> Optional[Decimal]:
        base_currency = self._normalize(base)
        quote_currency = self._normalize(quote)
        params = {"base": base_currency, "symbols": quote_currency}
        payload = self._historical_client.get(f"/{day.isoformat()}", params=params)

        rates = payload.get("rates")
        if not isinstance(rates, Mapping):
            return None
        return parse_rate(rates.get(quote_currency))

    @staticmethod
    def _normalize(value: str) -> str:
        try:
            return normalize_code(value)
        except ValueError as exc:
            raise ProviderError(str(exc)) from exc


def _string_or_default(value: Any, default: str) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    return value


def _optional_timeout(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)
