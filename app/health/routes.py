"""Route handlers for health checks."""

from __future__ import annotations

from flask import current_app
from flask.views import MethodView

from app.schemas import HealthRatesSchema, HealthStatusSchema
from app.services.orchestrator import RateOrchestrator
from app.utils.datetime import millis_to_datetime, now_millis

from . import blp


@blp.route("")
class HealthStatus(MethodView):
    @blp.response(200, HealthStatusSchema())
    def get(self):
        return {
            "status": "ok",
            "app": current_app.config.get("APP_NAME", "currency-converter"),
        }


@blp.route("/rates")
class HealthRates(MethodView):
    @blp.response(200, HealthRatesSchema())
    def get(self):
        orchestrator: RateOrchestrator = current_app.extensions["fx_orchestrator"]
        info = orchestrator.cache.describe(now_millis())

        if info.fetched_at is None:
            return {"status": "empty", "bases": [], "fetched_at": None, "fresh": None}

        return {
            "status": "ok" if info.fresh else "stale",
            "bases": info.bases,
            "fetched_at": millis_to_datetime(info.fetched_at).isoformat(),
            "fresh": info.fresh,
        }
