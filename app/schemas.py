"""Schemas and serializers shared by the API blueprints."""

from __future__ import annotations

from marshmallow import Schema, fields
from marshmallow.validate import Length

from app.services.favorites import FavoritesList
from app.services.fx_conversion import ConversionResult
from app.services.historical import HistoryResult


class HealthStatusSchema(Schema):
    status = fields.String(required=True)
    app = fields.String()


class HealthRatesSchema(Schema):
    status = fields.String(required=True)
    bases = fields.List(fields.String(), required=True)
    fetched_at = fields.String(allow_none=True)
    fresh = fields.Boolean(allow_none=True)


class CurrencyListSchema(Schema):
    items = fields.List(fields.String(), required=True)
    total = fields.Integer(required=True)


class CurrencyValidationRequestSchema(Schema):
    code = fields.String(load_default=None)


class CurrencyValidationResponseSchema(Schema):
    code = fields.String(required=True)
    message = fields.String(required=True)


class PairQuerySchema(Schema):
    from_currency = fields.String(required=True, data_key="from", validate=Length(min=1, max=12))
    to_currency = fields.String(required=True, data_key="to", validate=Length(min=1, max=12))


class ConversionQuerySchema(PairQuerySchema):
    amount = fields.String(load_default="1")


class ConversionSchema(Schema):
    converted_amount = fields.Decimal(required=True, as_string=True)
    display_amount = fields.String(required=True)
    display_rate = fields.String(required=True)


class ConversionResponseSchema(Schema):
    from_currency = fields.String(required=True, data_key="from")
    to_currency = fields.String(required=True, data_key="to")
    amount = fields.String(required=True)
    rate = fields.Decimal(required=True, as_string=True)
    conversion = fields.Nested(ConversionSchema, required=True)


class HistoricalPointSchema(Schema):
    date = fields.String(required=True)
    rate = fields.Decimal(as_string=True, allow_none=True)


class HistoryResponseSchema(Schema):
    from_currency = fields.String(required=True, data_key="from")
    to_currency = fields.String(required=True, data_key="to")
    state = fields.String(required=True)
    points = fields.List(fields.Nested(HistoricalPointSchema), required=True)
    notice = fields.String(allow_none=True)


class FavoriteSchema(Schema):
    index = fields.Integer(dump_only=True)
    from_currency = fields.String(required=True, data_key="from", validate=Length(min=1, max=12))
    to_currency = fields.String(required=True, data_key="to", validate=Length(min=1, max=12))


class FavoriteCollectionSchema(Schema):
    items = fields.List(fields.Nested(FavoriteSchema), required=True)
    total = fields.Integer(required=True)


class ErrorMessageSchema(Schema):
    message = fields.String(required=True)


def serialize_conversion(result: ConversionResult) -> dict:
    return {
        "converted_amount": result.converted_amount,
        "display_amount": result.display_amount,
        "display_rate": result.display_rate,
    }


def serialize_history(result: HistoryResult) -> dict:
    return {
        "from_currency": result.base_currency,
        "to_currency": result.quote_currency,
        "state": result.state.value,
        "points": [point.to_dict() for point in result.points],
        "notice": result.notice,
    }


def serialize_favorites(favorites: FavoritesList) -> dict:
    items = [
        {"index": index, "from_currency": pair.from_currency, "to_currency": pair.to_currency}
        for index, pair in enumerate(favorites)
    ]
    return {"items": items, "total": len(items)}
