"""Builds the short historical rate series shown under the converter."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from time import perf_counter
from typing import Optional

from app.logging import fetch_log_extra
from app.providers.base import BaseRateProvider, ProviderError
from app.providers.schemas import HistoricalPoint, normalize_code
from app.utils.datetime import utc_today

from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

HISTORY_LOOKBACK_DAYS = 7
DEFAULT_MAX_WORKERS = 8
FALLBACK_NOTICE = "Unable to load historical data. Using sample data."

# Static sample shown when no live point could be loaded, regardless of pair.
FALLBACK_SERIES: tuple[HistoricalPoint, ...] = (
    HistoricalPoint("2023-01-01", Decimal("1.1")),
    HistoricalPoint("2023-01-02", Decimal("1.15")),
    HistoricalPoint("2023-01-03", Decimal("1.2")),
    HistoricalPoint("2023-01-04", Decimal("1.25")),
    HistoricalPoint("2023-01-05", Decimal("1.2")),
    HistoricalPoint("2023-01-06", Decimal("1.18")),
    HistoricalPoint("2023-01-07", Decimal("1.22")),
)


class HistoryState(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class HistoryResult:
    base_currency: str
    quote_currency: str
    state: HistoryState
    points: tuple[HistoricalPoint, ...]
    notice: Optional[str] = None

    @classmethod
    def loading(cls, base: str, quote: str) -> HistoryResult:
        return cls(base_currency=base, quote_currency=quote, state=HistoryState.LOADING, points=())


def history_dates(today: date) -> list[date]:
    """Every date from ``today - 7 days`` through ``today``, both ends included (8 dates)."""

    start = today - timedelta(days=HISTORY_LOOKBACK_DAYS)
    dates: list[date] = []
    current = start
    while current <= today:
        dates.append(current)
        current += timedelta(days=1)
    return dates


class HistoricalSeriesBuilder:
    """Fetches one rate per date concurrently and assembles the ordered series."""

    def __init__(self, provider: BaseRateProvider, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self._provider = provider
        self._max_workers = max(int(max_workers), 1)

    def build(
        self,
        base: str,
        quote: str,
        *,
        today: Optional[date] = None,
        token: Optional[CancellationToken] = None,
    ) -> Optional[HistoryResult]:
        """Return the series for ``base``/``quote``, or ``None`` if ``token`` was cancelled."""

        base_currency = normalize_code(base)
        quote_currency = normalize_code(quote)
        dates = history_dates(today or utc_today())

        start = perf_counter()
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [
                executor.submit(self._fetch_point, day, base_currency, quote_currency, token)
                for day in dates
            ]
            points = [future.result() for future in futures]
        duration = (perf_counter() - start) * 1000

        if token is not None and token.cancelled:
            logger.debug("Discarding history for %s/%s: selection changed", base_currency, quote_currency)
            return None

        available = tuple(point for point in points if point.rate is not None)
        if not available:
            logger.warning(
                "No historical rates available for %s/%s; using sample series",
                base_currency,
                quote_currency,
                extra=fetch_log_extra(
                    provider=self._provider_name(),
                    base=base_currency,
                    event="history.build",
                    status="fallback",
                    duration_ms=duration,
                    cached=False,
                ),
            )
            return HistoryResult(
                base_currency=base_currency,
                quote_currency=quote_currency,
                state=HistoryState.FALLBACK,
                points=FALLBACK_SERIES,
                notice=FALLBACK_NOTICE,
            )

        logger.info(
            "Loaded %d/%d historical rates for %s/%s",
            len(available),
            len(dates),
            base_currency,
            quote_currency,
            extra=fetch_log_extra(
                provider=self._provider_name(),
                base=base_currency,
                event="history.build",
                status="success",
                duration_ms=duration,
                cached=False,
            ),
        )
        return HistoryResult(
            base_currency=base_currency,
            quote_currency=quote_currency,
            state=HistoryState.SUCCESS,
            points=available,
        )

    def _fetch_point(
        self,
        day: date,
        base: str,
        quote: str,
        token: Optional[CancellationToken],
    ) -> HistoricalPoint:
        if token is not None and token.cancelled:
            return HistoricalPoint(day.isoformat(), None)
        try:
            rate = self._provider.fetch_historical(day, base, quote)
        except ProviderError as exc:
            logger.info("Historical rate for %s %s/%s unavailable: %s", day, base, quote, exc)
            rate = None
        return HistoricalPoint(day.isoformat(), rate)

    def _provider_name(self) -> str:
        return getattr(self._provider, "name", self._provider.__class__.__name__)


def init_history_builder(app) -> HistoricalSeriesBuilder:
    builder = HistoricalSeriesBuilder(
        provider=app.extensions["rate_provider"],
        max_workers=int(app.config.get("HISTORY_MAX_WORKERS", DEFAULT_MAX_WORKERS)),
    )
    app.extensions["history_builder"] = builder
    return builder
