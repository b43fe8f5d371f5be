"""Abstract interface for exchange-rate providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

from .schemas import RateTable


class ProviderError(Exception):
    """Raised when an upstream provider cannot fulfill a request."""


class NetworkError(ProviderError):
    """The rate service could not be reached (timeout, connection failure)."""


class UpstreamError(ProviderError):
    """The rate service answered with an error or an unexpected payload."""


class BaseRateProvider(ABC):
    """Defines the interface all rate providers must implement."""

    name: str

    @abstractmethod
    def fetch_latest(self, base: str) -> RateTable:
        """Return the full table of rates relative to ``base``."""

    @abstractmethod
    def fetch_historical(self, day: date, base: str, quote: str) -> Optional[Decimal]:
        """Return the ``base``/``quote`` rate on ``day`` or ``None`` if the service has none."""
