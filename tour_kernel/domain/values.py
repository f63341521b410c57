"""
Decimal money helpers (``tour_kernel.domain.values``).

Responsibility:
    Cent-scaled addition, subtraction and multiplication, whole-unit
    rounding, and the boundary helpers that turn caller-supplied numbers
    into ``Decimal`` and render them for display.

Architecture position:
    Kernel -- pure domain layer, zero I/O.  Imported by every engine.

Invariants enforced:
    - Decimal-only arithmetic.  Non-Decimal inputs are converted through
      ``str()`` so a float such as ``0.1`` becomes ``Decimal("0.1")`` and
      never its binary expansion.
    - ``safe_*`` operations scale each operand to integer cents with
      ROUND_HALF_UP (half away from zero) before combining them.
    - ``round_whole`` is the only rounding applied to percentage bonuses
      and tax.

Failure modes:
    - ``decimal.InvalidOperation`` from ``to_decimal`` for strings that are
      not numbers.  Row constructors use ``parse_amount`` / ``parse_code``
      instead, which count an unparseable value as zero (or the given
      default).
    - Negative and non-finite Decimals are accepted and computed with;
      validating them is the caller's job (see ``is_valid_amount``).
      Functions decorated with ``@non_signaling`` run in a context where
      invalid operations (``Infinity - Infinity``, ordering comparisons on
      NaN) give NaN or ``False`` instead of raising, so NaN propagates
      through a calculation rather than aborting it.
"""

from __future__ import annotations

import functools
import math
from collections.abc import Callable
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext, localcontext
from typing import Any

Amount = Decimal | int | float | str

_CENTS = Decimal("100")
_CENTS_SQUARED = Decimal("10000")
_WHOLE = Decimal("1")
_HUNDRED = Decimal("100")
ZERO = Decimal("0")


def non_signaling(func: Callable) -> Callable:
    """Run ``func`` with the InvalidOperation trap disabled."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        ctx = getcontext().copy()
        ctx.traps[InvalidOperation] = False
        with localcontext(ctx):
            return func(*args, **kwargs)

    return wrapper


def to_decimal(value: Amount | None) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal.

    ``None`` is treated as zero.  Decimals pass through untouched; every
    other type goes through ``str()`` first.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    return Decimal(str(value))


def parse_amount(value: Any) -> Decimal:
    """``to_decimal`` for row fields: ``""`` or any unparseable value is 0."""
    try:
        return to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return ZERO


def parse_code(value: Any, default: int = 0) -> int:
    """Integer type code from a row field; missing or unparseable -> ``default``."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _to_cents(value: Amount | None) -> Decimal:
    return (to_decimal(value) * _CENTS).to_integral_value(rounding=ROUND_HALF_UP)


def round_whole(value: Amount) -> Decimal:
    """
    Round to the nearest whole currency unit, half away from zero.

    NaN and infinities are returned unchanged.
    """
    d = to_decimal(value)
    if not d.is_finite():
        return d
    return d.quantize(_WHOLE, rounding=ROUND_HALF_UP)


@non_signaling
def percent_of(amount: Amount, percent: Amount) -> Decimal:
    """``round_whole(amount * percent / 100)``; NaN in gives NaN out."""
    return round_whole(to_decimal(amount) * to_decimal(percent) / _HUNDRED)


@non_signaling
def safe_add(*values: Amount | None) -> Decimal:
    """
    Add monetary amounts in integer cents.

    Postconditions:
        - ``safe_add()`` is ``Decimal("0")``.
        - For operands with at most two fractional digits the result is
          the exact decimal sum, e.g. ``safe_add(0.1, 0.2) == Decimal("0.3")``.
    """
    total_cents = sum((_to_cents(v) for v in values), ZERO)
    return total_cents / _CENTS


@non_signaling
def safe_subtract(minuend: Amount | None, *subtrahends: Amount | None) -> Decimal:
    """Subtract the cent-scaled sum of ``subtrahends`` from ``minuend``."""
    return safe_add(minuend, -safe_add(*subtrahends))


@non_signaling
def safe_multiply(amount: Amount | None, multiplier: Amount | None) -> Decimal:
    """
    Multiply two amounts with both operands scaled to cents.

    The integer product is divided by 10000, so
    ``safe_multiply(0.1, 3) == Decimal("0.3")``.
    """
    return (_to_cents(amount) * _to_cents(multiplier)) / _CENTS_SQUARED


def format_currency(amount: Amount | None, symbol: str = "NT$") -> str:
    """
    Render an amount as whole currency units with thousands separators.

    Examples:
        format_currency(12345)    -> "NT$12,345"
        format_currency(-5000)    -> "-NT$5,000"
        format_currency(1234.56)  -> "NT$1,235"
        format_currency(Decimal("NaN"))  -> "NT$NaN"
    """
    rounded = round_whole(to_decimal(amount))
    if not rounded.is_finite():
        return f"{symbol}{rounded}"
    whole = int(rounded)
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{abs(whole):,}"


def is_valid_amount(value: object) -> bool:
    """
    True for a finite, non-negative number.

    Strings, ``None``, booleans, NaN and infinities are rejected.  The
    engines never call this themselves; it is for callers that need to
    reject user-facing input before handing it over.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite() and value >= 0
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, float):
        return math.isfinite(value) and value >= 0
    return False
