"""Provider interfaces and data structures for exchange-rate sources."""

from .base import BaseRateProvider, NetworkError, ProviderError, UpstreamError
from .exchangerate_client import RatesAPIClient, RatesAPIClientConfig
from .exchangerate_provider import ExchangeRateProvider
from .schemas import HistoricalPoint, RateTable, normalize_code, normalize_rates, parse_rate

__all__ = [
    "BaseRateProvider",
    "ProviderError",
    "NetworkError",
    "UpstreamError",
    "RateTable",
    "HistoricalPoint",
    "normalize_code",
    "normalize_rates",
    "parse_rate",
    "RatesAPIClient",
    "RatesAPIClientConfig",
    "ExchangeRateProvider",
]
