"""Route handlers driving the converter selection state."""

from __future__ import annotations

from flask import current_app
from flask.views import MethodView

from app.errors import NotFoundError, ValidationError
from app.schemas import (
    ErrorMessageSchema,
    serialize_conversion,
    serialize_favorites,
    serialize_history,
)
from app.services.converter_session import ConverterSession, ConverterView
from app.validation import validate_currency_code

from . import blp
from .schemas import ConverterStateSchema, ConverterUpdateSchema


def _session() -> ConverterSession:
    return current_app.extensions["converter_session"]


def _serialize_view(view: ConverterView) -> dict:
    return {
        "from_currency": view.from_currency,
        "to_currency": view.to_currency,
        "amount": view.amount,
        "dark_mode": view.dark_mode,
        "loading": view.loading,
        "rate": view.rate,
        "error": view.error,
        "conversion": serialize_conversion(view.conversion) if view.conversion else None,
        "history": serialize_history(view.history),
        "favorites": serialize_favorites(view.favorites)["items"],
        "generation": view.generation,
    }


@blp.route("")
class ConverterState(MethodView):
    @blp.response(200, ConverterStateSchema())
    def get(self):
        session = _session()
        if session.view().loading:
            session.refresh(session.current_token())
        return _serialize_view(session.view())

    @blp.arguments(ConverterUpdateSchema)
    @blp.response(200, ConverterStateSchema())
    def put(self, payload):
        session = _session()

        amount = payload.get("amount")
        if amount is not None and not session.set_amount(amount):
            raise ValidationError(
                "Amount must be a non-negative number.",
                payload={"field": "amount", "value": amount},
            )

        from_code = payload.get("from_currency")
        to_code = payload.get("to_currency")
        if from_code is not None or to_code is not None:
            current = session.view()
            token = session.select_pair(
                validate_currency_code(from_code or current.from_currency, field="from"),
                validate_currency_code(to_code or current.to_currency, field="to"),
            )
            session.refresh(token)

        return _serialize_view(session.view())


@blp.route("/swap")
class ConverterSwap(MethodView):
    @blp.response(200, ConverterStateSchema())
    def post(self):
        session = _session()
        session.refresh(session.swap())
        return _serialize_view(session.view())


@blp.route("/refresh")
class ConverterRefresh(MethodView):
    @blp.response(200, ConverterStateSchema())
    def post(self):
        session = _session()
        session.refresh(session.current_token())
        return _serialize_view(session.view())


@blp.route("/theme")
class ConverterTheme(MethodView):
    @blp.response(200, ConverterStateSchema())
    def post(self):
        session = _session()
        session.toggle_theme()
        return _serialize_view(session.view())


@blp.route("/favorites")
class ConverterFavorites(MethodView):
    @blp.response(201, ConverterStateSchema())
    def post(self):
        session = _session()
        session.add_favorite()
        return _serialize_view(session.view())


@blp.route("/favorites/<int:index>/select")
class ConverterFavoriteSelect(MethodView):
    @blp.alt_response(404, schema=ErrorMessageSchema, description="No favorite at that position")
    @blp.response(200, ConverterStateSchema())
    def post(self, index: int):
        session = _session()
        try:
            token = session.select_favorite(index)
        except IndexError as exc:
            raise NotFoundError(f"No favorite at position {index}.") from exc
        session.refresh(token)
        return _serialize_view(session.view())
