"""CORS handling so the browser front end can call the API from its own origin."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Response, make_response, request

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type, X-Request-ID"


def init_cors(app) -> None:
    """Answer preflight requests and tag responses for allowed origins."""

    if app.config.get("_cors_configured"):
        return

    origins = _split(app.config.get("CORS_ALLOWED_ORIGINS", ""))
    if not origins:
        return

    def allowed(origin: str | None) -> bool:
        return bool(origin) and ("*" in origins or origin in origins)

    @app.before_request
    def handle_preflight():
        origin = request.headers.get("Origin")
        if request.method != "OPTIONS" or origin is None:
            return None
        if not allowed(origin):
            return make_response("", 403)
        response = make_response("", 204)
        response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
        response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
        return response

    @app.after_request
    def apply_cors(response: Response):
        origin = request.headers.get("Origin")
        if allowed(origin):
            response.headers["Access-Control-Allow-Origin"] = "*" if "*" in origins else origin
            response.vary.add("Origin")
        return response

    app.config["_cors_configured"] = True


def _split(raw: str | Iterable[str]) -> tuple[str, ...]:
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return tuple(item.strip() for item in items if item and item.strip())
