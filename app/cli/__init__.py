"""CLI entry points."""

from __future__ import annotations

from flask import Flask

from .convert import convert_command
from .favorites import favorites_group
from .history import history_command


def register_cli(app: Flask) -> None:
    """Register CLI commands on the given Flask app."""

    app.cli.add_command(convert_command)
    app.cli.add_command(history_command)
    app.cli.add_command(favorites_group)
