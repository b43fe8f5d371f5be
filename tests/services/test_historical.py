from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

import requests
from freezegun import freeze_time

from app.providers.base import NetworkError, UpstreamError
from app.providers.exchangerate_provider import ExchangeRateProvider
from app.services.cancellation import CancellationToken
from app.services.historical import (
    FALLBACK_NOTICE,
    FALLBACK_SERIES,
    HistoricalSeriesBuilder,
    HistoryState,
    history_dates,
)
from tests.fixtures.providers import FakeProvider

TODAY = date(2026, 10, 19)


def test_history_dates_cover_eight_days_inclusive():
    dates = history_dates(TODAY)
    assert len(dates) == 8
    assert dates[0] == date(2026, 10, 12)
    assert dates[-1] == TODAY
    assert dates == sorted(dates)


def test_history_dates_cross_month_boundary():
    dates = history_dates(date(2026, 3, 3))
    assert dates[0] == date(2026, 2, 24)
    assert len(dates) == 8


def test_build_success_returns_all_points_in_order():
    history = {day: Decimal("0.9") + Decimal(i) / 100 for i, day in enumerate(history_dates(TODAY))}
    provider = FakeProvider(history=history)

    result = HistoricalSeriesBuilder(provider).build("usd", "eur", today=TODAY)

    assert result is not None
    assert result.state is HistoryState.SUCCESS
    assert result.notice is None
    assert [point.date for point in result.points] == [d.isoformat() for d in history_dates(TODAY)]
    assert result.points[0].rate == Decimal("0.9")
    assert len(provider.history_calls) == 8
    assert {(base, quote) for _, base, quote in provider.history_calls} == {("USD", "EUR")}


def test_build_drops_absent_points():
    dates = history_dates(TODAY)
    history = {day: Decimal("1.1") for day in dates}
    history[dates[1]] = None
    history[dates[4]] = UpstreamError("no data")
    history[dates[6]] = NetworkError("timed out")
    provider = FakeProvider(history=history)

    result = HistoricalSeriesBuilder(provider).build("USD", "EUR", today=TODAY)

    assert result.state is HistoryState.SUCCESS
    assert [point.date for point in result.points] == [
        dates[i].isoformat() for i in (0, 2, 3, 5, 7)
    ]
    assert all(point.rate == Decimal("1.1") for point in result.points)


def test_build_single_point_is_not_fallback():
    provider = FakeProvider(history={TODAY: "1.3"})

    result = HistoricalSeriesBuilder(provider).build("USD", "EUR", today=TODAY)

    assert result.state is HistoryState.SUCCESS
    assert len(result.points) == 1


def test_build_falls_back_when_nothing_available():
    provider = FakeProvider(history={day: NetworkError("down") for day in history_dates(TODAY)})

    result = HistoricalSeriesBuilder(provider).build("USD", "JPY", today=TODAY)

    assert result.state is HistoryState.FALLBACK
    assert result.notice == FALLBACK_NOTICE
    assert result.points == FALLBACK_SERIES
    assert [point.date for point in result.points][0] == "2023-01-01"
    assert [str(point.rate) for point in result.points] == [
        "1.1", "1.15", "1.2", "1.25", "1.2", "1.18", "1.22",
    ]


@freeze_time("2026-10-19T23:30:00Z")
def test_build_defaults_to_utc_today():
    provider = FakeProvider()

    HistoricalSeriesBuilder(provider).build("USD", "EUR")

    requested = sorted(day for day, _, _ in provider.history_calls)
    assert requested[-1] == date(2026, 10, 19)
    assert requested[0] == date(2026, 10, 12)


def test_build_returns_none_when_token_already_cancelled():
    provider = FakeProvider(history={TODAY: "1.1"})
    token = CancellationToken(1, "USD", "EUR")
    token.cancel()

    result = HistoricalSeriesBuilder(provider).build("USD", "EUR", today=TODAY, token=token)

    assert result is None
    assert provider.history_calls == []


def test_build_returns_none_when_cancelled_mid_flight():
    token = CancellationToken(1, "USD", "EUR")

    class CancellingProvider(FakeProvider):
        def fetch_historical(self, day, base, quote):
            token.cancel()
            return Decimal("1.1")

    result = HistoricalSeriesBuilder(CancellingProvider(), max_workers=1).build(
        "USD", "EUR", today=TODAY, token=token
    )

    assert result is None


def test_historical_requests_use_five_second_timeout():
    provider = ExchangeRateProvider.from_config({"HISTORICAL_REQUEST_TIMEOUT_SECONDS": 5})
    response = MagicMock(spec=requests.Response)
    response.status_code = 200
    response.json.return_value = {"success": True, "rates": {"EUR": 0.9}}

    with patch.object(requests.Session, "get", autospec=True, return_value=response) as mock_get:
        HistoricalSeriesBuilder(provider, max_workers=2).build("USD", "EUR", today=TODAY)

    assert mock_get.call_count == 8
    assert {call.kwargs["timeout"] for call in mock_get.call_args_list} == {5.0}
    requested = sorted(call.args[1] for call in mock_get.call_args_list)
    assert requested[0] == "https://api.exchangerate.host/2026-10-12"
    assert requested[-1] == "https://api.exchangerate.host/2026-10-19"


def test_timed_out_dates_become_absent():
    provider = ExchangeRateProvider.from_config({})
    dates = history_dates(TODAY)

    def fake_get(session, url, params=None, timeout=None):
        if url.endswith(dates[0].isoformat()):
            raise requests.exceptions.ReadTimeout("slow")
        response = MagicMock(spec=requests.Response)
        response.status_code = 200
        response.json.return_value = {"success": True, "rates": {"EUR": 0.9}}
        return response

    with patch.object(requests.Session, "get", autospec=True, side_effect=fake_get):
        result = HistoricalSeriesBuilder(provider).build("USD", "EUR", today=TODAY)

    assert result.state is HistoryState.SUCCESS
    assert [point.date for point in result.points] == [d.isoformat() for d in dates[1:]]
