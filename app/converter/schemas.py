"""Marshmallow schemas for the converter state endpoints."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validates_schema
from marshmallow.validate import Length

from app.schemas import ConversionSchema, FavoriteSchema, HistoryResponseSchema


class ConverterUpdateSchema(Schema):
    """Partial update of the selected pair and/or amount."""

    from_currency = fields.String(load_default=None, data_key="from", validate=Length(min=1, max=12))
    to_currency = fields.String(load_default=None, data_key="to", validate=Length(min=1, max=12))
    amount = fields.String(load_default=None)

    @validates_schema
    def validate_non_empty(self, data, **kwargs):
        if all(value is None for value in data.values()):
            raise ValidationError("At least one of 'from', 'to' or 'amount' must be supplied.")


class ConverterStateSchema(Schema):
    """Everything the converter screen renders."""

    from_currency = fields.String(required=True, data_key="from")
    to_currency = fields.String(required=True, data_key="to")
    amount = fields.String(required=True)
    dark_mode = fields.Boolean(required=True)
    loading = fields.Boolean(required=True)
    rate = fields.Decimal(as_string=True, allow_none=True)
    error = fields.String(allow_none=True)
    conversion = fields.Nested(ConversionSchema, allow_none=True)
    history = fields.Nested(HistoryResponseSchema, required=True)
    favorites = fields.List(fields.Nested(FavoriteSchema), required=True)
    generation = fields.Integer(required=True)
