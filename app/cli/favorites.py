"""CLI for managing favorite currency pairs."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from app.services.favorites import FavoritePair

from .params import known_currency_code


@click.group("favorites")
def favorites_group() -> None:
    """List, add or remove favorite currency pairs."""


@favorites_group.command("list")
@with_appcontext
def list_favorites() -> None:
    favorites = current_app.extensions["converter_session"].favorites
    if not favorites:
        click.echo("No favorites added yet.")
        return
    for index, pair in enumerate(favorites):
        click.echo(f"{index}: {pair.from_currency} to {pair.to_currency}")


@favorites_group.command("add")
@click.argument("from_currency")
@click.argument("to_currency")
@with_appcontext
def add_favorite(from_currency: str, to_currency: str) -> None:
    session = current_app.extensions["converter_session"]
    pair = FavoritePair(
        known_currency_code(from_currency, "FROM_CURRENCY"),
        known_currency_code(to_currency, "TO_CURRENCY"),
    )
    favorites = session.add_favorite(pair)
    click.echo(f"Added {pair.from_currency} to {pair.to_currency} ({len(favorites)} favorites).")


@favorites_group.command("remove")
@click.argument("index", type=int)
@with_appcontext
def remove_favorite(index: int) -> None:
    session = current_app.extensions["converter_session"]
    try:
        session.remove_favorite(index)
    except IndexError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Removed favorite {index}.")
