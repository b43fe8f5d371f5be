"""Converter selection state and stale-result handling."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from freezegun import freeze_time

from app.errors import RATE_UNAVAILABLE_MESSAGE
from app.providers.base import NetworkError
from app.services.converter_session import ConverterSession
from app.services.favorites import FavoritePair, FavoritesStore
from app.services.historical import HistoricalSeriesBuilder, HistoryResult, HistoryState
from app.services.kv_store import InMemoryKeyValueStore
from app.services.orchestrator import RateOrchestrator
from app.services.rate_cache import RateCache
from tests.fixtures.providers import FakeProvider

TODAY = date(2026, 10, 19)


def make_session(provider: FakeProvider, store: InMemoryKeyValueStore | None = None) -> ConverterSession:
    store = store or InMemoryKeyValueStore()
    return ConverterSession(
        orchestrator=RateOrchestrator(provider=provider, cache=RateCache(store)),
        history_builder=HistoricalSeriesBuilder(provider, max_workers=2),
        favorites_store=FavoritesStore(store),
    )


def test_initial_view_is_loading():
    view = make_session(FakeProvider()).view()

    assert view.from_currency == "USD"
    assert view.to_currency == "EUR"
    assert view.amount == "1"
    assert view.loading is True
    assert view.conversion is None
    assert view.history.state is HistoryState.LOADING
    assert view.generation == 0


def test_refresh_applies_rate_and_conversion():
    session = make_session(FakeProvider(latest=[{"EUR": "0.85"}]))
    session.set_amount("100")

    assert session.refresh_rate(session.current_token()) is True

    view = session.view()
    assert view.loading is False
    assert view.rate == Decimal("0.85")
    assert view.conversion.display_amount == "85.00"
    assert view.conversion.display_rate == "0.8500"


def test_stale_rate_is_discarded_after_pair_change():
    session = make_session(FakeProvider())
    old_token = session.current_token()

    new_token = session.select_pair("USD", "JPY")
    assert old_token.cancelled

    # The USD/JPY answer lands first, then the late USD/EUR answer.
    assert session.apply_rate(new_token, rate=Decimal("150.12")) is True
    assert session.apply_rate(old_token, rate=Decimal("0.85")) is False

    view = session.view()
    assert view.to_currency == "JPY"
    assert view.rate == Decimal("150.12")


@pytest.mark.parametrize("error", [False, True])
def test_pair_change_clears_previous_outcome(error: bool):
    latest = [NetworkError("offline")] if error else [{"EUR": "0.85"}]
    session = make_session(FakeProvider(latest=latest))
    session.refresh_rate(session.current_token())

    session.select_pair("USD", "JPY")

    view = session.view()
    assert view.loading is True
    assert view.rate is None
    assert view.error is None
    assert view.conversion is None


def test_stale_error_does_not_clobber_current_rate():
    session = make_session(FakeProvider())
    old_token = session.current_token()
    new_token = session.swap()

    session.apply_rate(new_token, rate=Decimal("1.17"))
    session.apply_rate(old_token, error=RATE_UNAVAILABLE_MESSAGE)

    view = session.view()
    assert view.error is None
    assert view.rate == Decimal("1.17")


def test_stale_history_is_discarded():
    session = make_session(FakeProvider())
    old_token = session.current_token()
    session.select_pair("GBP", "USD")
    stale = HistoryResult("USD", "EUR", HistoryState.SUCCESS, ())

    assert session.apply_history(old_token, stale) is False
    assert session.view().history.state is HistoryState.LOADING
    assert session.view().history.base_currency == "GBP"


def test_provider_failure_sets_error_message():
    session = make_session(FakeProvider(latest=[NetworkError("offline")]))

    session.refresh_rate(session.current_token())

    view = session.view()
    assert view.error == RATE_UNAVAILABLE_MESSAGE
    assert view.rate is None
    assert view.conversion is None
    assert view.loading is False


@freeze_time("2026-10-19T12:00:00Z")
def test_refresh_builds_history_for_current_pair():
    history = {TODAY: "0.9"}
    provider = FakeProvider(latest=[{"EUR": "0.85"}], history=history)
    session = make_session(provider)

    session.refresh(session.current_token())

    view = session.view()
    assert view.history.base_currency == "USD"
    assert view.history.state is HistoryState.SUCCESS
    assert [point.date for point in view.history.points] == ["2026-10-19"]


def test_swap_exchanges_pair_and_bumps_generation():
    session = make_session(FakeProvider())
    token = session.swap()

    view = session.view()
    assert (view.from_currency, view.to_currency) == ("EUR", "USD")
    assert token.generation == view.generation == 1
    assert session.is_current(token)


def test_set_amount_rejects_negative_and_non_numeric():
    session = make_session(FakeProvider())

    assert session.set_amount("-5") is False
    assert session.set_amount("abc") is False
    assert session.view().amount == "1"
    assert session.set_amount("") is True
    assert session.view().amount == ""


def test_blank_amount_converts_as_zero():
    session = make_session(FakeProvider(latest=[{"EUR": "0.85"}]))
    session.set_amount("")
    session.refresh_rate(session.current_token())

    assert session.view().conversion.display_amount == "0.00"


def test_amount_change_does_not_refetch():
    provider = FakeProvider(latest=[{"EUR": "0.85"}])
    session = make_session(provider)
    session.refresh_rate(session.current_token())

    session.set_amount("2")

    assert session.view().conversion.display_amount == "1.70"
    assert provider.latest_calls == ["USD"]


def test_toggle_theme():
    session = make_session(FakeProvider())
    assert session.toggle_theme() is True
    assert session.view().dark_mode is True
    assert session.toggle_theme() is False


def test_favorites_add_select_remove():
    store = InMemoryKeyValueStore()
    session = make_session(FakeProvider(), store)

    session.add_favorite()
    session.add_favorite(FavoritePair("GBP", "JPY"))
    token = session.select_favorite(1)

    view = session.view()
    assert (view.from_currency, view.to_currency) == ("GBP", "JPY")
    assert token.base == "GBP"
    assert view.favorites == (FavoritePair("USD", "EUR"), FavoritePair("GBP", "JPY"))

    assert session.remove_favorite(0) == (FavoritePair("GBP", "JPY"),)
    assert FavoritesStore(store).load() == (FavoritePair("GBP", "JPY"),)


def test_favorites_are_loaded_from_store():
    store = InMemoryKeyValueStore({"favorites": '[{"from": "CHF", "to": "USD"}]'})
    session = make_session(FakeProvider(), store)

    assert session.favorites == (FavoritePair("CHF", "USD"),)


@pytest.mark.parametrize("index", [-1, 0, 3])
def test_select_favorite_out_of_range(index: int):
    session = make_session(FakeProvider())
    with pytest.raises(IndexError):
        session.select_favorite(index)


def test_remove_favorite_out_of_range():
    session = make_session(FakeProvider())
    session.add_favorite()
    with pytest.raises(IndexError):
        session.remove_favorite(1)
