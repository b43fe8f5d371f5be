"""Conversion engine: amount parsing, conversion and display rounding."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, InvalidOperation, getcontext, localcontext
from typing import Any

ROUNDING_PRECISION = 28
AMOUNT_DISPLAY_QUANTUM = Decimal("0.01")
RATE_DISPLAY_QUANTUM = Decimal("0.0001")


def get_decimal_context():
    """Return the shared Decimal context used across conversions."""

    context = getcontext().copy()
    context.prec = ROUNDING_PRECISION
    context.rounding = ROUND_HALF_EVEN
    return context


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert input into a Decimal using the shared context."""

    context = get_decimal_context()
    with localcontext(context):
        return Decimal(str(value))


@dataclass(frozen=True)
class ConversionResult:
    """Full-precision converted amount plus its display strings."""

    converted_amount: Decimal
    display_amount: str
    display_rate: str


def parse_amount(raw: Any) -> Decimal:
    """Parse free-text amount input, falling back to zero when unparseable."""

    if raw is None:
        return Decimal("0")
    try:
        value = to_decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not value.is_finite():
        return Decimal("0")
    return value


def is_acceptable_amount(raw: Any) -> bool:
    """Input filter applied before an amount reaches the engine.

    Blank input is accepted (it converts as zero); negative and non-numeric
    input is rejected.
    """

    if raw is None:
        return False
    text = str(raw).strip()
    if text == "":
        return True
    try:
        value = to_decimal(text)
    except (InvalidOperation, ValueError):
        return False
    return value.is_finite() and value >= 0


def convert(amount: Decimal | int | float | str, rate: Decimal | int | float | str) -> ConversionResult:
    """Multiply ``amount`` by ``rate``; rounding applies to the display strings only."""

    context = get_decimal_context()
    with localcontext(context):
        amount_dec = to_decimal(amount)
        rate_dec = to_decimal(rate)
        converted = amount_dec * rate_dec
        return ConversionResult(
            converted_amount=converted,
            display_amount=format_fixed(converted, AMOUNT_DISPLAY_QUANTUM),
            display_rate=format_fixed(rate_dec, RATE_DISPLAY_QUANTUM),
        )


def format_fixed(value: Decimal, quantum: Decimal) -> str:
    return f"{value.quantize(quantum, rounding=ROUND_HALF_UP):f}"
