"""Currency registry backed by the persisted currency list."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from app.providers import BaseRateProvider, normalize_code

from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

CURRENCIES_KEY = "currencies"


@dataclass
class CurrencyRegistry:
    """Provides the selectable currency codes and fast membership checks.

    The list is the key set of the ``list_base`` rate table, fetched once and
    persisted; later loads read it back from the store.
    """

    codes: list[str] = field(default_factory=list)
    store: Optional[KeyValueStore] = None
    provider: Optional[BaseRateProvider] = None
    list_base: str = "USD"

    def load(self) -> list[str]:
        """Populate ``codes`` from the store, fetching them on first use.

        Raises:
            ProviderError: If the list is not stored and the fetch fails.
        """

        stored = self._read_stored()
        if stored:
            self.codes = stored
            return self.codes

        if self.provider is None:
            return self.codes

        table = self.provider.fetch_latest(self.list_base)
        self.codes = list(table.keys())
        if self.store is not None:
            self.store.set_json(CURRENCIES_KEY, self.codes)
        logger.info("Loaded %d currencies from %s", len(self.codes), self.provider.name)
        return self.codes

    def ensure_loaded(self) -> list[str]:
        if not self.codes:
            self.load()
        return self.codes

    def is_allowed(self, code: str) -> bool:
        """Check if the given code is registered."""

        return code.upper() in self.codes

    def _read_stored(self) -> list[str]:
        if self.store is None:
            return []
        raw: Any = self.store.get_json(CURRENCIES_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed stored currency list")
            return []
        try:
            return [normalize_code(code) for code in raw]
        except ValueError as exc:
            logger.warning("Ignoring malformed stored currency list: %s", exc)
            return []


registry = CurrencyRegistry()


def init_registry(app) -> CurrencyRegistry:
    """Wire the shared registry to the app's store and provider.

    Codes are loaded lazily so the app can start without network access.
    """

    registry.codes = []
    registry.store = app.extensions["kv_store"]
    registry.provider = app.extensions["rate_provider"]
    registry.list_base = app.config.get("CURRENCY_LIST_BASE", "USD")
    app.extensions["currency_registry"] = registry
    return registry
