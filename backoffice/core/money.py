"""Decimal helpers shared by every currency and percentage computation.

All rounding in the service goes through ``round_cents`` and
``round_percent`` so the rounding mode is pinned to ``ROUND_HALF_UP``
regardless of platform defaults.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")
WHOLE = Decimal("1")


def to_decimal(value: Any) -> Decimal:
    """Best-effort conversion of row values to Decimal; unknown values become 0."""

    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return ZERO
        cleaned = cleaned.replace("$", "").replace(",", "")
        try:
            return Decimal(cleaned)
        except InvalidOperation:
            return ZERO
    return ZERO


def round_cents(value: Any) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def round_percent(value: Any) -> int:
    return int(to_decimal(value).quantize(WHOLE, rounding=ROUND_HALF_UP))


def safe_ratio(numerator: Any, denominator: Any) -> Decimal:
    """Divide, answering 0 whenever the denominator is 0."""

    denom = to_decimal(denominator)
    if not denom:
        return ZERO
    return to_decimal(numerator) / denom


__all__ = ["HUNDRED", "ZERO", "round_cents", "round_percent", "safe_ratio", "to_decimal"]
