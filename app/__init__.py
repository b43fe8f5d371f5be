"""Application factory for the currency converter service."""

from __future__ import annotations

from flask import Flask
from flask_smorest import Api

from config import get_config
from .database import init_app as init_db
from .cli import register_cli


def create_app(config_name: str | None = None, **overrides) -> Flask:
    """Application factory adhering to the Flask app factory pattern.

    ``overrides`` are applied on top of the selected config class before any
    extension is initialized.
    """

    app = Flask(__name__)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    app.config.update(overrides)

    _configure_logging(app)
    _configure_api(app)
    api = _register_extensions(app)
    _register_blueprints(app, api)
    _register_error_handlers(app)

    register_cli(app)
    return app


def _configure_logging(app: Flask) -> None:
    from .cors import init_cors
    from .logging import init_request_logging, setup_logging

    setup_logging(app)
    init_request_logging(app)
    init_cors(app)


def _configure_api(app: Flask) -> None:
    app.config.setdefault("API_TITLE", "Currency Converter API")
    app.config.setdefault("API_VERSION", "v1")
    app.config.setdefault("OPENAPI_VERSION", "3.0.3")
    app.config.setdefault("OPENAPI_URL_PREFIX", "/docs")
    app.config.setdefault("OPENAPI_SWAGGER_UI_PATH", "/")
    app.config.setdefault(
        "OPENAPI_SWAGGER_UI_URL",
        "https://cdn.jsdelivr.net/npm/swagger-ui-dist/",
    )


def _register_extensions(app: Flask) -> Api:
    """Initialize storage, provider and the converter services."""

    init_db(app)
    from . import models  # noqa: F401  # Ensure models are imported for metadata
    from .providers.registry import init_provider
    from .services import (
        init_converter,
        init_history_builder,
        init_orchestrator,
        init_registry,
        init_store,
    )

    init_store(app)
    init_provider(app)
    init_registry(app)
    init_orchestrator(app)
    init_history_builder(app)
    init_converter(app)

    api = Api(app)
    app.extensions["smorest_api"] = api
    return api


def _register_blueprints(app: Flask, api: Api) -> None:
    """Register Flask blueprints."""

    from .converter import blp as converter_blp
    from .currencies import blp as currencies_blp
    from .favorites import blp as favorites_blp
    from .health import blp as health_blp
    from .rates import blp as rates_blp

    api.register_blueprint(health_blp, url_prefix="/health")
    api.register_blueprint(currencies_blp, url_prefix="/currencies")
    api.register_blueprint(rates_blp, url_prefix="/rates")
    api.register_blueprint(favorites_blp, url_prefix="/favorites")
    api.register_blueprint(converter_blp, url_prefix="/converter")


def _register_error_handlers(app: Flask) -> None:
    """Register global error handlers."""

    from .errors import register_error_handlers

    register_error_handlers(app)
