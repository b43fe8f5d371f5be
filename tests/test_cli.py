from __future__ import annotations

import pytest

from app.services.converter_session import init_converter


@pytest.fixture()
def runner(clean_state):
    return clean_state.test_cli_runner()


def test_convert_command(runner):
    result = runner.invoke(args=["convert", "--from", "usd", "--to", "eur", "--amount", "100"])

    assert result.exit_code == 0, result.output
    assert "100 USD = 85.00 EUR" in result.output
    assert "Exchange Rate: 1 USD = 0.8500 EUR" in result.output


def test_convert_command_rejects_negative_amount(runner):
    result = runner.invoke(args=["convert", "--amount=-4"])

    assert result.exit_code != 0
    assert "non-negative" in result.output


def test_history_command_prints_series(runner):
    result = runner.invoke(args=["history", "--from", "USD", "--to", "GBP"])

    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line.strip()]
    assert len(lines) == 8


def test_favorites_commands(runner):
    empty = runner.invoke(args=["favorites", "list"])
    assert "No favorites added yet." in empty.output

    added = runner.invoke(args=["favorites", "add", "usd", "jpy"])
    assert added.exit_code == 0, added.output
    assert "Added USD to JPY" in added.output

    listed = runner.invoke(args=["favorites", "list"])
    assert "0: USD to JPY" in listed.output

    removed = runner.invoke(args=["favorites", "remove", "0"])
    assert removed.exit_code == 0
    missing = runner.invoke(args=["favorites", "remove", "0"])
    assert missing.exit_code != 0


@pytest.mark.parametrize("code", ["€", "xyz"])
def test_favorites_add_rejects_invalid_code_and_keeps_list(runner, clean_state, code: str):
    added = runner.invoke(args=["favorites", "add", "usd", "eur"])
    assert added.exit_code == 0, added.output

    rejected = runner.invoke(args=["favorites", "add", code, "usd"])
    assert rejected.exit_code == 2
    assert "FROM_CURRENCY" in rejected.output

    with clean_state.app_context():
        init_converter(clean_state)
    listed = runner.invoke(args=["favorites", "list"])
    assert "0: USD to EUR" in listed.output
    assert "1:" not in listed.output


@pytest.mark.parametrize(
    ("command", "args", "hint"),
    [
        ("convert", ["--from=€"], "--from"),
        ("convert", ["--to= "], "--to"),
        ("history", ["--to=€"], "--to"),
        ("history", ["--from= "], "--from"),
    ],
)
def test_commands_reject_malformed_codes(runner, command: str, args: list[str], hint: str):
    result = runner.invoke(args=[command, *args])

    assert result.exit_code == 2
    assert hint in result.output
    assert "Traceback" not in result.output
