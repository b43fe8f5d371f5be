"""Routes for the currency list and code validation."""

from __future__ import annotations

from flask.views import MethodView

from app.errors import CURRENCIES_UNAVAILABLE_MESSAGE, APIError
from app.providers import ProviderError
from app.schemas import (
    CurrencyListSchema,
    CurrencyValidationRequestSchema,
    CurrencyValidationResponseSchema,
)
from app.services.currency_registry import registry
from app.validation import validate_currency_code

from . import blp


@blp.route("")
class CurrencyCollection(MethodView):
    @blp.response(200, CurrencyListSchema())
    def get(self):
        try:
            codes = registry.ensure_loaded()
        except ProviderError as exc:
            raise APIError(
                CURRENCIES_UNAVAILABLE_MESSAGE,
                status_code=502,
                payload={"detail": str(exc)},
            ) from exc
        return {"items": list(codes), "total": len(codes)}


@blp.route("/validate")
class CurrencyValidation(MethodView):
    @blp.arguments(CurrencyValidationRequestSchema)
    @blp.response(200, CurrencyValidationResponseSchema())
    def post(self, data):
        validated = validate_currency_code(data.get("code"), field="code")
        return {
            "code": validated,
            "message": "Currency code is valid.",
        }
