"""Converter selection state with stale-result discarding.

Every selection change bumps a generation counter and hands out a fresh
:class:`CancellationToken`, cancelling the previous one. Rate and history
results are applied only when they carry the current token, so a slow answer
for an old pair can never overwrite the display of the new one.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from app.errors import RATE_UNAVAILABLE_MESSAGE
from app.providers import ProviderError, normalize_code

from .cancellation import CancellationToken
from .favorites import FavoritePair, FavoritesList, FavoritesStore
from .fx_conversion import ConversionResult, convert, is_acceptable_amount, parse_amount
from .historical import HistoricalSeriesBuilder, HistoryResult
from .orchestrator import RateOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConverterView:
    """Immutable snapshot of everything the converter screen renders."""

    from_currency: str
    to_currency: str
    amount: str
    dark_mode: bool
    loading: bool
    rate: Optional[Decimal]
    error: Optional[str]
    conversion: Optional[ConversionResult]
    history: HistoryResult
    favorites: FavoritesList
    generation: int


class ConverterSession:
    def __init__(
        self,
        orchestrator: RateOrchestrator,
        history_builder: HistoricalSeriesBuilder,
        favorites_store: FavoritesStore,
        *,
        from_currency: str = "USD",
        to_currency: str = "EUR",
        amount: str = "1",
    ) -> None:
        self._orchestrator = orchestrator
        self._history_builder = history_builder
        self._favorites_store = favorites_store
        self._lock = threading.RLock()

        self._from = normalize_code(from_currency)
        self._to = normalize_code(to_currency)
        self._amount = amount
        self._dark_mode = False
        self._rate: Optional[Decimal] = None
        self._error: Optional[str] = None
        self._loading = True
        self._generation = 0
        self._token = CancellationToken(0, self._from, self._to)
        self._history = HistoryResult.loading(self._from, self._to)
        self._favorites: Optional[FavoritesList] = None

    # -- selection -------------------------------------------------------

    def current_token(self) -> CancellationToken:
        with self._lock:
            return self._token

    def select_pair(self, from_currency: str, to_currency: str) -> CancellationToken:
        with self._lock:
            self._from = normalize_code(from_currency)
            self._to = normalize_code(to_currency)
            return self._next_token()

    def swap(self) -> CancellationToken:
        with self._lock:
            self._from, self._to = self._to, self._from
            return self._next_token()

    def select_favorite(self, index: int) -> CancellationToken:
        """Select the pair stored at ``index``.

        Raises:
            IndexError: If ``index`` does not name a stored favorite.
        """

        with self._lock:
            favorites = self._loaded_favorites()
            if not 0 <= index < len(favorites):
                raise IndexError(f"Favorite index {index} out of range")
            pair = favorites[index]
            self._from, self._to = pair.from_currency, pair.to_currency
            return self._next_token()

    def set_amount(self, raw: str) -> bool:
        """Accept ``raw`` as the new amount unless it is negative or non-numeric."""

        if not is_acceptable_amount(raw):
            return False
        with self._lock:
            self._amount = str(raw).strip()
        return True

    def toggle_theme(self) -> bool:
        with self._lock:
            self._dark_mode = not self._dark_mode
            return self._dark_mode

    def is_current(self, token: CancellationToken) -> bool:
        with self._lock:
            return token.generation == self._generation and not token.cancelled

    # -- async results ---------------------------------------------------

    def refresh_rate(self, token: CancellationToken) -> bool:
        """Resolve the rate for ``token``'s pair and apply it if still current."""

        try:
            rate = self._orchestrator.resolve_rate(token.base, token.quote)
        except ProviderError as exc:
            logger.warning("Rate refresh for %s/%s failed: %s", token.base, token.quote, exc)
            return self.apply_rate(token, error=RATE_UNAVAILABLE_MESSAGE)
        return self.apply_rate(token, rate=rate)

    def apply_rate(
        self,
        token: CancellationToken,
        *,
        rate: Optional[Decimal] = None,
        error: Optional[str] = None,
    ) -> bool:
        with self._lock:
            if not self.is_current(token):
                logger.debug("Discarding superseded rate for %s/%s", token.base, token.quote)
                return False
            self._rate = rate if error is None else None
            self._error = error
            self._loading = False
            return True

    def refresh_history(self, token: CancellationToken) -> bool:
        result = self._history_builder.build(token.base, token.quote, token=token)
        if result is None:
            return False
        return self.apply_history(token, result)

    def apply_history(self, token: CancellationToken, result: HistoryResult) -> bool:
        with self._lock:
            if not self.is_current(token):
                logger.debug("Discarding superseded history for %s/%s", token.base, token.quote)
                return False
            self._history = result
            return True

    def refresh(self, token: CancellationToken) -> None:
        self.refresh_rate(token)
        self.refresh_history(token)

    # -- favorites -------------------------------------------------------

    @property
    def favorites(self) -> FavoritesList:
        with self._lock:
            return self._loaded_favorites()

    def add_favorite(self, pair: Optional[FavoritePair] = None) -> FavoritesList:
        """Append ``pair`` (default: the current selection) to the favorites."""

        with self._lock:
            if pair is None:
                pair = FavoritePair(self._from, self._to)
            self._favorites = self._favorites_store.add(self._loaded_favorites(), pair)
            return self._favorites

    def remove_favorite(self, index: int) -> FavoritesList:
        with self._lock:
            self._favorites = self._favorites_store.remove_at(self._loaded_favorites(), index)
            return self._favorites

    # -- rendering -------------------------------------------------------

    def view(self) -> ConverterView:
        with self._lock:
            conversion = None
            if self._rate is not None and self._error is None and not self._loading:
                conversion = convert(parse_amount(self._amount), self._rate)
            return ConverterView(
                from_currency=self._from,
                to_currency=self._to,
                amount=self._amount,
                dark_mode=self._dark_mode,
                loading=self._loading,
                rate=self._rate,
                error=self._error,
                conversion=conversion,
                history=self._history,
                favorites=self._loaded_favorites(),
                generation=self._generation,
            )

    def _loaded_favorites(self) -> FavoritesList:
        # Read from the store once; afterwards the in-memory copy is authoritative.
        if self._favorites is None:
            self._favorites = self._favorites_store.load()
        return self._favorites

    def _next_token(self) -> CancellationToken:
        self._token.cancel()
        self._generation += 1
        self._token = CancellationToken(self._generation, self._from, self._to)
        self._loading = True
        self._rate = None
        self._error = None
        self._history = HistoryResult.loading(self._from, self._to)
        return self._token


def init_converter(app) -> ConverterSession:
    """Create the process-wide converter session for the Flask app."""

    store = app.extensions["kv_store"]
    session = ConverterSession(
        orchestrator=app.extensions["fx_orchestrator"],
        history_builder=app.extensions["history_builder"],
        favorites_store=FavoritesStore(store),
        from_currency=app.config.get("DEFAULT_FROM_CURRENCY", "USD"),
        to_currency=app.config.get("DEFAULT_TO_CURRENCY", "EUR"),
        amount=app.config.get("DEFAULT_AMOUNT", "1"),
    )
    app.extensions["converter_session"] = session
    return session
