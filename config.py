"""Application configuration classes."""

from __future__ import annotations

import os

SUPPORTED_RATE_PROVIDERS = {"live", "exchangerate", "mock"}
PROVIDER_ALIASES = {"exchangerate": "live"}
SUPPORTED_STORE_BACKENDS = {"sql", "memory"}


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


def _optional_float(name: str) -> float | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return float(value)


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "currency-converter"
    SECRET_KEY = _get_env("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = _get_env("DATABASE_URL", "sqlite:///currency-converter.db")
    STORE_BACKEND = _get_env("STORE_BACKEND", "sql")

    FX_RATE_PROVIDER = _get_env("FX_RATE_PROVIDER", "live")
    LATEST_RATES_API_BASE_URL = _get_env(
        "LATEST_RATES_API_BASE_URL", "https://api.exchangerate-api.com/v4"
    )
    # No timeout on the latest-rate path unless explicitly configured.
    LATEST_REQUEST_TIMEOUT_SECONDS: float | None = _optional_float("LATEST_REQUEST_TIMEOUT_SECONDS")
    HISTORICAL_RATES_API_BASE_URL = _get_env(
        "HISTORICAL_RATES_API_BASE_URL", "https://api.exchangerate.host"
    )
    HISTORICAL_RATES_API_KEY = _get_env("HISTORICAL_RATES_API_KEY", "")
    HISTORICAL_REQUEST_TIMEOUT_SECONDS = float(_get_env("HISTORICAL_REQUEST_TIMEOUT_SECONDS", "5"))
    HISTORY_MAX_WORKERS = int(_get_env("HISTORY_MAX_WORKERS", "8"))

    RATE_CACHE_TTL_MS = int(_get_env("RATE_CACHE_TTL_MS", "3600000"))
    CURRENCY_LIST_BASE = _get_env("CURRENCY_LIST_BASE", "USD")
    DEFAULT_FROM_CURRENCY = _get_env("DEFAULT_FROM_CURRENCY", "USD")
    DEFAULT_TO_CURRENCY = _get_env("DEFAULT_TO_CURRENCY", "EUR")
    DEFAULT_AMOUNT = _get_env("DEFAULT_AMOUNT", "1")

    LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
    LOG_JSON_ENABLED = _get_env("LOG_JSON_ENABLED", "false").lower() == "true"
    LOG_FORMAT = _get_env("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")
    CORS_ALLOWED_ORIGINS = _get_env("CORS_ALLOWED_ORIGINS", "http://localhost:5173")


class DevelopmentConfig(BaseConfig):
    """Configuration for local development."""

    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    """Configuration for production deployments."""

    DEBUG = False
    TESTING = False


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
}


def get_config(config_name: str | None = None) -> type[BaseConfig]:
    """Return the config class for the requested environment.

    Args:
        config_name: Optional explicit config identifier. If omitted, the
            APP_ENV environment variable is consulted.

    Raises:
        KeyError: If the requested configuration is not defined.
        ValueError: If the provider or store backend is not supported.
    """

    env_candidate = config_name if config_name is not None else os.getenv("APP_ENV", "development")
    env_name = (env_candidate or "development").lower()
    try:
        config_cls = CONFIG_BY_ENV[env_name]
    except KeyError as exc:
        raise KeyError(f"Unknown APP_ENV '{env_name}'") from exc

    _validate_provider(config_cls)
    _validate_store_backend(config_cls)
    return config_cls


def _validate_provider(config_cls: type[BaseConfig]) -> None:
    normalized = _normalize_provider(config_cls.FX_RATE_PROVIDER)
    if normalized not in SUPPORTED_RATE_PROVIDERS:
        raise ValueError(
            f"Unsupported FX_RATE_PROVIDER '{config_cls.FX_RATE_PROVIDER}'. "
            f"Allowed values: {sorted(SUPPORTED_RATE_PROVIDERS)}"
        )
    config_cls.FX_RATE_PROVIDER = normalized


def _validate_store_backend(config_cls: type[BaseConfig]) -> None:
    backend = (config_cls.STORE_BACKEND or "").strip().lower()
    if backend not in SUPPORTED_STORE_BACKENDS:
        raise ValueError(
            f"Unsupported STORE_BACKEND '{config_cls.STORE_BACKEND}'. "
            f"Allowed values: {sorted(SUPPORTED_STORE_BACKENDS)}"
        )
    config_cls.STORE_BACKEND = backend


def _normalize_provider(value: str | None) -> str:
    if not value:
        return ""
    normalized = value.strip().lower()
    return PROVIDER_ALIASES.get(normalized, normalized)
