"""Parameter coercion shared by the CLI commands."""

from __future__ import annotations

import click

from app.errors import ValidationError
from app.providers import ProviderError, normalize_code
from app.validation import validate_currency_code


def currency_code(value: str, param_hint: str) -> str:
    """Normalize ``value`` or fail with a usage error naming ``param_hint``."""

    try:
        return normalize_code(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=param_hint) from exc


def known_currency_code(value: str, param_hint: str) -> str:
    """Like :func:`currency_code`, but also require membership in the currency list."""

    try:
        return validate_currency_code(value, field=param_hint)
    except ValidationError as exc:
        raise click.BadParameter(exc.message, param_hint=param_hint) from exc
    except ProviderError as exc:
        raise click.ClickException(f"Failed to fetch currencies: {exc}") from exc
