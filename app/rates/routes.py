"""Stateless conversion and history endpoints."""

from __future__ import annotations

from flask import current_app
from flask.views import MethodView

from app.schemas import (
    ConversionQuerySchema,
    ConversionResponseSchema,
    ErrorMessageSchema,
    HistoryResponseSchema,
    PairQuerySchema,
    serialize_conversion,
    serialize_history,
)
from app.services.fx_conversion import convert, parse_amount
from app.services.historical import HistoricalSeriesBuilder
from app.services.orchestrator import RateOrchestrator
from app.validation import validate_amount, validate_currency_code

from . import blp


@blp.route("/convert")
class Conversion(MethodView):
    @blp.arguments(ConversionQuerySchema, location="query")
    @blp.response(200, ConversionResponseSchema())
    @blp.alt_response(502, schema=ErrorMessageSchema, description="Rate service returned an error")
    @blp.alt_response(503, schema=ErrorMessageSchema, description="Rate service unreachable")
    def get(self, query_args):
        base = validate_currency_code(query_args["from_currency"], field="from")
        quote = validate_currency_code(query_args["to_currency"], field="to")
        amount = validate_amount(query_args["amount"])

        orchestrator: RateOrchestrator = current_app.extensions["fx_orchestrator"]
        rate = orchestrator.resolve_rate(base, quote)
        result = convert(parse_amount(amount), rate)
        return {
            "from_currency": base,
            "to_currency": quote,
            "amount": amount,
            "rate": rate,
            "conversion": serialize_conversion(result),
        }


@blp.route("/history")
class History(MethodView):
    @blp.arguments(PairQuerySchema, location="query")
    @blp.response(200, HistoryResponseSchema())
    def get(self, query_args):
        base = validate_currency_code(query_args["from_currency"], field="from")
        quote = validate_currency_code(query_args["to_currency"], field="to")

        builder: HistoricalSeriesBuilder = current_app.extensions["history_builder"]
        result = builder.build(base, quote)
        return serialize_history(result)
