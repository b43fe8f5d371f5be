"""Route handlers for listing, adding and removing favorite pairs."""

from __future__ import annotations

from flask import current_app
from flask.views import MethodView

from app.errors import NotFoundError
from app.schemas import (
    ErrorMessageSchema,
    FavoriteCollectionSchema,
    FavoriteSchema,
    serialize_favorites,
)
from app.services.converter_session import ConverterSession
from app.services.favorites import FavoritePair
from app.validation import validate_currency_code

from . import blp


def _session() -> ConverterSession:
    return current_app.extensions["converter_session"]


@blp.route("")
class FavoriteCollection(MethodView):
    @blp.response(200, FavoriteCollectionSchema())
    def get(self):
        return serialize_favorites(_session().favorites)

    @blp.arguments(FavoriteSchema)
    @blp.response(201, FavoriteCollectionSchema())
    def post(self, payload):
        pair = FavoritePair(
            from_currency=validate_currency_code(payload["from_currency"], field="from"),
            to_currency=validate_currency_code(payload["to_currency"], field="to"),
        )
        return serialize_favorites(_session().add_favorite(pair))


@blp.route("/<int:index>")
class FavoriteItem(MethodView):
    @blp.alt_response(404, schema=ErrorMessageSchema, description="No favorite at that position")
    @blp.response(200, FavoriteCollectionSchema())
    def delete(self, index: int):
        try:
            favorites = _session().remove_favorite(index)
        except IndexError as exc:
            raise NotFoundError(f"No favorite at position {index}.") from exc
        return serialize_favorites(favorites)
