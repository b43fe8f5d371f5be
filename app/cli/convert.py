"""CLI for one-off currency conversions."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from app.providers import ProviderError
from app.services.fx_conversion import convert, is_acceptable_amount, parse_amount

from .params import currency_code


@click.command("convert")
@click.option("--from", "from_currency", default="USD", show_default=True, help="Source currency")
@click.option("--to", "to_currency", default="EUR", show_default=True, help="Target currency")
@click.option("--amount", default="1", show_default=True, help="Amount to convert")
@with_appcontext
def convert_command(from_currency: str, to_currency: str, amount: str) -> None:
    """Convert AMOUNT from one currency to another using the cached/latest rate."""

    if not is_acceptable_amount(amount):
        raise click.BadParameter("Amount must be a non-negative number.", param_hint="--amount")

    orchestrator = current_app.extensions["fx_orchestrator"]
    base = currency_code(from_currency, "--from")
    quote = currency_code(to_currency, "--to")
    try:
        rate = orchestrator.resolve_rate(base, quote)
    except ProviderError as exc:
        raise click.ClickException(f"Failed to fetch exchange rate: {exc}") from exc

    value = parse_amount(amount)
    result = convert(value, rate)
    click.echo(f"{value} {base} = {result.display_amount} {quote}")
    click.echo(f"Exchange Rate: 1 {base} = {result.display_rate} {quote}")
