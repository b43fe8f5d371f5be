"""Validation helpers for request payloads."""

from __future__ import annotations

from collections.abc import Sequence

from app.errors import ValidationError
from app.services.currency_registry import registry
from app.services.fx_conversion import is_acceptable_amount


def _preview_codes(codes: Sequence[str], max_items: int = 10) -> str:
    subset = list(sorted(codes))[:max_items]
    preview = ", ".join(subset)
    if len(codes) > max_items:
        preview += ", ..."
    return preview


def validate_currency_code(value: str | None, *, field: str = "currency_code") -> str:
    """Ensure the provided currency code exists in the currency list."""

    if value is None or not str(value).strip():
        raise ValidationError(f"'{field}' is required.", payload={"field": field})

    normalized = str(value).strip().upper()
    if not normalized.isascii():
        raise ValidationError(
            f"Unsupported currency code '{normalized}'. Please use a valid ISO 4217 code.",
            payload={"field": field, "code": normalized},
        )

    codes = registry.ensure_loaded()
    if not registry.is_allowed(normalized):
        hint = _preview_codes(tuple(codes)) if codes else "no codes configured"
        raise ValidationError(
            f"Unsupported currency code '{normalized}'. Allowed codes: {hint}.",
            payload={"field": field, "code": normalized},
        )

    return normalized


def validate_amount(value: str | None, *, field: str = "amount") -> str:
    """Reject negative or non-numeric amounts; blank input stays blank (converts as 0)."""

    raw = "" if value is None else str(value)
    if not is_acceptable_amount(raw):
        raise ValidationError(
            "Amount must be a non-negative number.",
            payload={"field": field, "value": raw},
        )
    return raw.strip()
