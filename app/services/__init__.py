"""Service layer modules."""

from .cancellation import CancellationToken
from .converter_session import ConverterSession, ConverterView, init_converter
from .currency_registry import CurrencyRegistry, init_registry, registry
from .favorites import FavoritePair, FavoritesList, FavoritesStore
from .fx_conversion import ConversionResult, convert, is_acceptable_amount, parse_amount
from .historical import (
    FALLBACK_NOTICE,
    FALLBACK_SERIES,
    HistoricalSeriesBuilder,
    HistoryResult,
    HistoryState,
    history_dates,
    init_history_builder,
)
from .kv_store import InMemoryKeyValueStore, KeyValueStore, ParseError, SQLKeyValueStore, init_store
from .orchestrator import RateOrchestrator, init_orchestrator
from .rate_cache import CacheInfo, LookupStatus, RateCache, RateLookup
