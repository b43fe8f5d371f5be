"""Live exchange-rate provider unit tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
import requests
import responses
from responses import matchers

from app.providers.base import NetworkError, UpstreamError
from app.providers.exchangerate_client import RatesAPIClient, RatesAPIClientConfig
from app.providers.exchangerate_provider import ExchangeRateProvider
from tests.fixtures import load_json

pytestmark = pytest.mark.providers

LATEST_URL = "https://api.exchangerate-api.com/v4/latest/USD"
HISTORICAL_URL = "https://api.exchangerate.host/2026-10-12"


@pytest.fixture()
def provider() -> ExchangeRateProvider:
    return ExchangeRateProvider.from_config(
        {
            "LATEST_RATES_API_BASE_URL": "https://api.exchangerate-api.com/v4",
            "HISTORICAL_RATES_API_BASE_URL": "https://api.exchangerate.host",
            "HISTORICAL_REQUEST_TIMEOUT_SECONDS": 5,
        }
    )


@responses.activate
def test_fetch_latest_normalizes_table(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, LATEST_URL, json=load_json("latest_usd.json"), status=200)

    table = provider.fetch_latest("usd")

    assert table == {
        "USD": Decimal("1"),
        "EUR": Decimal("0.85"),
        "GBP": Decimal("0.78"),
        "JPY": Decimal("150.12"),
    }
    assert len(responses.calls) == 1


@responses.activate
def test_fetch_latest_server_error_is_upstream_error(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, LATEST_URL, status=500)

    with pytest.raises(UpstreamError):
        provider.fetch_latest("USD")

    assert len(responses.calls) == 1


@responses.activate
def test_fetch_latest_connection_failure_is_network_error(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, LATEST_URL, body=requests.exceptions.ConnectionError("offline"))

    with pytest.raises(NetworkError):
        provider.fetch_latest("USD")


@responses.activate
def test_fetch_latest_without_rates_is_upstream_error(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, LATEST_URL, json={"base": "USD"}, status=200)

    with pytest.raises(UpstreamError, match="rates"):
        provider.fetch_latest("USD")


@responses.activate
def test_fetch_latest_with_bad_rate_value_is_upstream_error(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, LATEST_URL, json={"rates": {"EUR": "abc"}}, status=200)

    with pytest.raises(UpstreamError):
        provider.fetch_latest("USD")


@responses.activate
def test_fetch_historical_returns_rate(provider: ExchangeRateProvider) -> None:
    responses.add(
        responses.GET,
        HISTORICAL_URL,
        json=load_json("historical_usd_eur.json"),
        match=[matchers.query_param_matcher({"base": "USD", "symbols": "EUR"})],
        status=200,
    )

    rate = provider.fetch_historical(date(2026, 10, 12), "usd", "eur")

    assert rate == Decimal("0.8612")


@responses.activate
def test_fetch_historical_absent_when_quote_missing(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, HISTORICAL_URL, json={"success": True, "rates": {}}, status=200)

    assert provider.fetch_historical(date(2026, 10, 12), "USD", "EUR") is None


@responses.activate
def test_fetch_historical_absent_when_rates_missing(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, HISTORICAL_URL, json={"success": True}, status=200)

    assert provider.fetch_historical(date(2026, 10, 12), "USD", "EUR") is None


@responses.activate
def test_fetch_historical_error_payload_is_upstream_error(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, HISTORICAL_URL, json=load_json("historical_error.json"), status=200)

    with pytest.raises(UpstreamError):
        provider.fetch_historical(date(2026, 10, 12), "USD", "EUR")


@responses.activate
def test_fetch_historical_timeout_is_network_error(provider: ExchangeRateProvider) -> None:
    responses.add(responses.GET, HISTORICAL_URL, body=requests.exceptions.ReadTimeout("slow"))

    with pytest.raises(NetworkError):
        provider.fetch_historical(date(2026, 10, 12), "USD", "EUR")


@responses.activate
def test_client_appends_access_key() -> None:
    client = RatesAPIClient(
        RatesAPIClientConfig(base_url="https://api.exchangerate.host", access_key="secret")
    )
    responses.add(
        responses.GET,
        HISTORICAL_URL,
        json={"success": True, "rates": {"EUR": 0.9}},
        match=[
            matchers.query_param_matcher({"base": "USD", "symbols": "EUR", "access_key": "secret"})
        ],
        status=200,
    )

    payload = client.get("/2026-10-12", params={"base": "USD", "symbols": "EUR"})

    assert payload["rates"] == {"EUR": 0.9}
