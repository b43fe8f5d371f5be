"""Persisted, ordered list of favorite currency pairs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.providers.schemas import normalize_code

from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"


@dataclass(frozen=True)
class FavoritePair:
    """Saved (from, to) combination. Duplicates are allowed; position is identity."""

    from_currency: str
    to_currency: str

    def to_dict(self) -> dict[str, str]:
        return {"from": self.from_currency, "to": self.to_currency}


FavoritesList = tuple[FavoritePair, ...]


class FavoritesStore:
    """Value-semantics operations over the single persisted favorites list."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def load(self) -> FavoritesList:
        raw = self._store.get_json(FAVORITES_KEY)
        if raw is None:
            return ()
        try:
            return _parse_favorites(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Dropping malformed favorites list: %s", exc)
            return ()

    def add(self, favorites: FavoritesList, pair: FavoritePair) -> FavoritesList:
        """Append ``pair`` and persist the new list.

        Raises:
            ValueError: If either code is blank or not ASCII; nothing is written.
        """

        pair = FavoritePair(normalize_code(pair.from_currency), normalize_code(pair.to_currency))
        updated = tuple(favorites) + (pair,)
        self._persist(updated)
        return updated

    def remove_at(self, favorites: FavoritesList, index: int) -> FavoritesList:
        """Return ``favorites`` without position ``index``.

        Raises:
            IndexError: If ``index`` is outside ``[0, len(favorites))``.
        """

        if not 0 <= index < len(favorites):
            raise IndexError(f"Favorite index {index} out of range (size {len(favorites)})")
        updated = tuple(favorites[:index]) + tuple(favorites[index + 1 :])
        self._persist(updated)
        return updated

    def _persist(self, favorites: FavoritesList) -> None:
        self._store.set_json(FAVORITES_KEY, [pair.to_dict() for pair in favorites])


def _parse_favorites(raw: Any) -> FavoritesList:
    if not isinstance(raw, list):
        raise TypeError("favorites must be a list")

    pairs: list[FavoritePair] = []
    for item in raw:
        if not isinstance(item, dict):
            raise TypeError("favorite entries must be objects")
        pairs.append(
            FavoritePair(
                from_currency=normalize_code(item.get("from")),
                to_currency=normalize_code(item.get("to")),
            )
        )
    return tuple(pairs)
