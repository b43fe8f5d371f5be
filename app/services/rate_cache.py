"""Hour-long cache of fetched rate tables with a single shared freshness clock.

The whole cache lives under one store key::

    {"fetched_at": <epoch millis>, "tables": {"USD": {"EUR": "0.85", ...}, ...}}

``fetched_at`` is shared by every cached base: storing a table for any base
restarts the freshness window for all of them.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from app.providers.schemas import RateTable, normalize_code, normalize_rates

from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

RATE_CACHE_KEY = "rate_cache"
FRESHNESS_WINDOW_MS = 3_600_000


class LookupStatus(str, Enum):
    FRESH = "fresh"
    STALE = "stale"
    MISSING = "missing"


@dataclass(frozen=True)
class RateLookup:
    """Outcome of a cache lookup; ``rate`` is set only when fresh."""

    status: LookupStatus
    rate: Optional[Decimal] = None

    @property
    def is_fresh(self) -> bool:
        return self.status is LookupStatus.FRESH


@dataclass(frozen=True)
class CacheEntry:
    fetched_at: int
    tables: dict[str, RateTable]


@dataclass(frozen=True)
class CacheInfo:
    bases: list[str]
    fetched_at: Optional[int]
    fresh: Optional[bool]


class RateCache:
    """Reads and writes the persisted rate cache entry."""

    def __init__(self, store: KeyValueStore, ttl_ms: int = FRESHNESS_WINDOW_MS) -> None:
        self._store = store
        self._ttl_ms = ttl_ms
        # Serializes the read-modify-write of the single shared cache entry.
        self._write_lock = threading.Lock()

    def get_rate(self, base: str, quote: str, now_millis: int) -> RateLookup:
        base_code = normalize_code(base)
        quote_code = normalize_code(quote)
        if base_code == quote_code:
            return RateLookup(LookupStatus.FRESH, Decimal("1"))

        entry = self._load()
        if entry is None:
            return RateLookup(LookupStatus.MISSING)

        rate = entry.tables.get(base_code, {}).get(quote_code)
        if rate is None:
            return RateLookup(LookupStatus.MISSING)

        if now_millis - entry.fetched_at < self._ttl_ms:
            return RateLookup(LookupStatus.FRESH, rate)
        return RateLookup(LookupStatus.STALE)

    def store(self, base: str, table: Mapping[str, Any], now_millis: int) -> None:
        """Overwrite the table for ``base`` and restart the shared freshness clock."""

        base_code = normalize_code(base)
        normalized = normalize_rates(table)
        with self._write_lock:
            entry = self._load()
            tables = dict(entry.tables) if entry is not None else {}
            tables[base_code] = normalized
            self._store.set_json(
                RATE_CACHE_KEY,
                {"fetched_at": int(now_millis), "tables": tables},
            )
        logger.debug("Cached %d rates for %s", len(tables[base_code]), base_code)

    def describe(self, now_millis: int) -> CacheInfo:
        entry = self._load()
        if entry is None:
            return CacheInfo(bases=[], fetched_at=None, fresh=None)
        return CacheInfo(
            bases=sorted(entry.tables),
            fetched_at=entry.fetched_at,
            fresh=now_millis - entry.fetched_at < self._ttl_ms,
        )

    def _load(self) -> CacheEntry | None:
        raw = self._store.get_json(RATE_CACHE_KEY)
        if raw is None:
            return None
        try:
            return _parse_entry(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding malformed rate cache entry: %s", exc)
            return None


def _parse_entry(raw: Any) -> CacheEntry:
    if not isinstance(raw, dict):
        raise TypeError("cache entry must be an object")

    fetched_at = raw.get("fetched_at")
    if isinstance(fetched_at, bool) or not isinstance(fetched_at, int):
        raise TypeError("fetched_at must be an integer")

    raw_tables = raw.get("tables")
    if not isinstance(raw_tables, dict):
        raise TypeError("tables must be an object")

    tables: dict[str, RateTable] = {}
    for base, table in raw_tables.items():
        if not isinstance(table, dict):
            raise TypeError(f"table for {base!r} must be an object")
        tables[normalize_code(base)] = normalize_rates(table)
    return CacheEntry(fetched_at=fetched_at, tables=tables)
