"""Resolves the current rate for a pair through the cache, then the provider."""

from __future__ import annotations

import logging
from decimal import Decimal
from time import perf_counter
from typing import Callable

from app.logging import fetch_log_extra
from app.providers import BaseRateProvider, ProviderError, UpstreamError, normalize_code
from app.providers.registry import get_provider
from app.utils.datetime import now_millis

from .kv_store import KeyValueStore
from .rate_cache import FRESHNESS_WINDOW_MS, RateCache

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


class RateOrchestrator:
    """Serve fresh cached rates; otherwise fetch the base table once and cache it."""

    def __init__(
        self,
        provider: BaseRateProvider,
        cache: RateCache,
        clock: Clock = now_millis,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._clock = clock

    @property
    def cache(self) -> RateCache:
        return self._cache

    @property
    def provider(self) -> BaseRateProvider:
        return self._provider

    def resolve_rate(self, base: str, quote: str, now: int | None = None) -> Decimal:
        """Return the ``base``/``quote`` rate.

        Raises:
            ProviderError: ``NetworkError`` or ``UpstreamError`` when a fetch was
                needed and failed, or the fetched table lacks ``quote``.
        """

        base_currency = normalize_code(base)
        quote_currency = normalize_code(quote)
        current = self._clock() if now is None else now

        lookup = self._cache.get_rate(base_currency, quote_currency, current)
        if lookup.is_fresh and lookup.rate is not None:
            logger.debug(
                "Serving cached rate",
                extra=fetch_log_extra(
                    provider=self._provider_name(),
                    base=base_currency,
                    quote=quote_currency,
                    event="rate.lookup",
                    status=lookup.status.value,
                    duration_ms=None,
                    cached=True,
                ),
            )
            return lookup.rate

        table = self._fetch_latest(base_currency, quote_currency)
        self._cache.store(base_currency, table, current)

        rate = table.get(quote_currency)
        if rate is None:
            raise UpstreamError(f"Rate for {quote_currency} missing from {base_currency} table")
        return rate

    def _fetch_latest(self, base: str, quote: str):
        provider_name = self._provider_name()
        start = perf_counter()
        try:
            table = self._provider.fetch_latest(base)
        except ProviderError as exc:
            duration = (perf_counter() - start) * 1000
            logger.warning(
                "Rate fetch failed: %s",
                exc,
                extra=fetch_log_extra(
                    provider=provider_name,
                    base=base,
                    quote=quote,
                    event="provider.fetch",
                    status="error",
                    duration_ms=duration,
                    cached=False,
                    error=str(exc),
                ),
            )
            raise

        duration = (perf_counter() - start) * 1000
        logger.info(
            "Rate fetch succeeded",
            extra=fetch_log_extra(
                provider=provider_name,
                base=base,
                quote=quote,
                event="provider.fetch",
                status="success",
                duration_ms=duration,
                cached=False,
            ),
        )
        return table

    def _provider_name(self) -> str:
        return getattr(self._provider, "name", self._provider.__class__.__name__)


def init_orchestrator(app) -> RateOrchestrator:
    """Create and store an orchestrator on the Flask app."""

    provider = app.extensions.get("rate_provider")
    if provider is None:
        provider = get_provider(app.config.get("FX_RATE_PROVIDER"), app.config)

    store: KeyValueStore = app.extensions["kv_store"]
    ttl_ms = int(app.config.get("RATE_CACHE_TTL_MS", FRESHNESS_WINDOW_MS))
    orchestrator = RateOrchestrator(provider=provider, cache=RateCache(store, ttl_ms=ttl_ms))
    app.extensions["fx_orchestrator"] = orchestrator
    return orchestrator
