"""Blueprint exposing the interactive converter state."""

from __future__ import annotations

from flask_smorest import Blueprint

blp = Blueprint("Converter", __name__, description="Converter selection and display state")

from . import routes  # noqa: E402,F401
