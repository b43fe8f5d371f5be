"""Application-wide error utilities and handlers."""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify

from app.providers.base import NetworkError, ProviderError

logger = logging.getLogger(__name__)

RATE_UNAVAILABLE_MESSAGE = "Failed to fetch exchange rate. Please try again later."
CURRENCIES_UNAVAILABLE_MESSAGE = "Failed to fetch currencies. Please try again later."


class APIError(Exception):
    """Base class for API-level errors."""

    status_code: int = 400

    def __init__(
        self, message: str, *, status_code: int | None = None, payload: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}


class ValidationError(APIError):
    """Error raised for validation failures."""

    status_code = 422


class NotFoundError(APIError):
    """Requested resource (e.g. a favorite position) does not exist."""

    status_code = 404


DEFAULT_STATUS_MESSAGES: dict[int, str] = {
    400: "Request could not be processed.",
    404: "Resource not found.",
    422: "Submitted data is invalid.",
    502: "Upstream provider unavailable.",
    503: "Service temporarily unavailable. Please retry in a moment.",
}


def register_error_handlers(app: Flask) -> None:
    """Attach error handlers to the Flask application."""

    @app.errorhandler(APIError)
    def handle_api_error(error: APIError):
        message = error.message or DEFAULT_STATUS_MESSAGES.get(error.status_code, "Request failed.")
        response: dict[str, Any] = {"message": message}
        if error.payload:
            response.update(error.payload)
            field = error.payload.get("field")
            if field and "field_errors" not in response:
                response["field_errors"] = {str(field): [message]}
        return jsonify(response), error.status_code

    @app.errorhandler(ProviderError)
    def handle_provider_error(error: ProviderError):
        # Connectivity problems are transient; anything else is a bad upstream answer.
        status = 503 if isinstance(error, NetworkError) else 502
        logger.warning("Rate provider error surfaced to client: %s", error)
        return jsonify({"message": RATE_UNAVAILABLE_MESSAGE, "detail": str(error)}), status
