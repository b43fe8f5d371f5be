"""Rates blueprint: one-off conversions and historical trends."""

from __future__ import annotations

from flask_smorest import Blueprint

blp = Blueprint("Rates", __name__, description="Conversion and historical rate endpoints")

from . import routes  # noqa: E402,F401
