"""Normalized shapes for rate tables and historical series."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

RateTable = Dict[str, Decimal]


def normalize_code(code: Any) -> str:
    """Return the canonical uppercase form of a currency code."""

    if code is None or not str(code).strip():
        raise ValueError("Currency code cannot be blank.")
    normalized = str(code).strip().upper()
    if not normalized.isascii():
        raise ValueError(f"Currency code must be ASCII: {code!r}")
    return normalized


def parse_rate(value: Any) -> Optional[Decimal]:
    """Coerce ``value`` into a positive finite Decimal, or ``None`` if unusable."""

    if value is None or isinstance(value, bool):
        return None
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate


def normalize_rates(rates: Mapping[Any, Any]) -> RateTable:
    """Normalize a raw code -> rate mapping.

    Raises:
        ValueError: If any code is blank or any rate is not positive and finite.
    """

    normalized: RateTable = {}
    for code, value in rates.items():
        rate = parse_rate(value)
        if rate is None:
            raise ValueError(f"Invalid rate for {code!r}: {value!r}")
        normalized[normalize_code(code)] = rate
    return normalized


@dataclass(frozen=True)
class HistoricalPoint:
    """Single dated rate observation; ``rate`` is ``None`` when absent."""

    date: str
    rate: Optional[Decimal]

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "rate": self.rate}
