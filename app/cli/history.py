"""CLI printing the recent historical rates for a pair."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from app.services.historical import HistoryState

from .params import currency_code


@click.command("history")
@click.option("--from", "from_currency", default="USD", show_default=True, help="Base currency")
@click.option("--to", "to_currency", default="EUR", show_default=True, help="Quote currency")
@with_appcontext
def history_command(from_currency: str, to_currency: str) -> None:
    """Print the last week of rates for a currency pair."""

    base = currency_code(from_currency, "--from")
    quote = currency_code(to_currency, "--to")
    builder = current_app.extensions["history_builder"]
    result = builder.build(base, quote)

    if result.state is HistoryState.FALLBACK and result.notice:
        click.echo(result.notice, err=True)
    for point in result.points:
        click.echo(f"{point.date}  {point.rate}")
