"""Helpers for converting between currency amounts and integer cents."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

_CENT = Decimal("1")
_HUNDRED = Decimal(100)

# Largest value the integer ``invoices.amount`` column holds.
MAX_CENTS = 2**31 - 1
MAX_AMOUNT = Decimal(MAX_CENTS) / _HUNDRED


def is_storable_amount(amount: Decimal) -> bool:
    """Return True when ``amount`` rounds to a positive cent count that fits
    the amount column.

    The upper bound is checked before any arithmetic, so huge exponents such
    as ``1e30`` never reach :func:`to_cents`.
    """

    if not amount.is_finite() or amount > MAX_AMOUNT:
        return False
    return to_cents(amount) > 0


def to_cents(amount: Union[Decimal, int, float, str]) -> int:
    """Return ``amount`` in cents, rounding half-cents up.

    Floats are converted through ``str`` so ``12.345`` becomes ``1235`` rather
    than whatever its binary representation rounds to.
    """

    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * _HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Return ``cents`` as a two-place currency amount."""

    return (Decimal(int(cents)) / _HUNDRED).quantize(Decimal("0.01"))


def format_currency(cents: int) -> str:
    """Format ``cents`` as a dollar string such as ``$1,234.50``."""

    amount = from_cents(cents)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
