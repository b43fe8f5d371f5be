"""Durable key/value storage for cached rates, currencies and favorites."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.database import get_session
from app.models import KeyValueEntry

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when a stored value cannot be decoded."""


class KeyValueStore(ABC):
    """String-keyed persistence for serialized values."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the raw value stored under ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Persist ``value`` under ``key``, replacing any previous value."""

    def get_json(self, key: str) -> Any | None:
        """Return the decoded value under ``key``; malformed data reads as absent."""

        raw = self.get(key)
        if raw is None:
            return None
        try:
            return decode_json(raw)
        except ParseError as exc:
            logger.warning("Ignoring malformed stored value for '%s': %s", key, exc)
            return None

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, encode_json(value))


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store used by tests and the ``memory`` backend."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class SQLKeyValueStore(KeyValueStore):
    """Store backed by the ``kv_entries`` table."""

    def get(self, key: str) -> str | None:
        session = get_session()
        entry = session.get(KeyValueEntry, key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        session = get_session()
        try:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            session.commit()
        except IntegrityError:
            # Another writer inserted the key first; overwrite its row instead.
            session.rollback()
            self._update_existing(key, value)
        except SQLAlchemyError:
            session.rollback()
            raise

    @staticmethod
    def _update_existing(key: str, value: str) -> None:
        session = get_session()
        try:
            entry = session.get(KeyValueEntry, key, populate_existing=True)
            if entry is None:
                raise LookupError(f"Row for '{key}' vanished during update")
            entry.value = value
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise


def encode_json(value: Any) -> str:
    """Serialize ``value`` to JSON, writing Decimals as strings."""

    return json.dumps(value, default=_json_default, separators=(",", ":"))


def decode_json(raw: str) -> Any:
    """Decode a stored JSON document.

    Raises:
        ParseError: If ``raw`` is not valid JSON.
    """

    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ParseError(str(exc)) from exc


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def create_store(backend: str) -> KeyValueStore:
    """Instantiate the configured store backend."""

    normalized = (backend or "sql").lower()
    if normalized == "memory":
        return InMemoryKeyValueStore()
    if normalized == "sql":
        return SQLKeyValueStore()
    raise ValueError(f"Unknown store backend '{backend}'")


def init_store(app) -> KeyValueStore:
    """Attach the configured key/value store to the Flask app."""

    store = create_store(app.config.get("STORE_BACKEND", "sql"))
    app.extensions["kv_store"] = store
    return store
