"""Small Decimal utilities.

Prices and budgets travel as decimal strings and are handled as
:class:`~decimal.Decimal` internally; binary floats never enter arithmetic.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN, localcontext
from typing import Any, Optional, Tuple

# Fractional digits kept after a division (ERC-20 tokens carry 18 at most).
DECIMAL_PLACES = 18
_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)
PRECISION = 60


def to_decimal(value: Any) -> Decimal:
    """Return ``value`` as a non-negative finite Decimal.

    ``float`` inputs are stringified first so binary representation artefacts
    are not inherited. Raises ``ValueError`` for anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, (int, float, str)):
        try:
            dec = Decimal(str(value).strip())
        except InvalidOperation as err:
            raise ValueError(f"Cannot convert {value!r} to Decimal") from err
    else:
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    if not dec.is_finite():
        raise ValueError(f"Non-finite value {value!r}")
    if dec < 0:
        raise ValueError(f"Negative value {value!r}")
    return dec


def format_decimal(value: Decimal) -> str:
    """Plain-notation string without exponent or trailing zeros."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("", "-0"):
        return "0"
    return text


def compare(a: Decimal, b: Decimal) -> int:
    """Exact three-way comparison: -1, 0 or 1."""
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def sort_pair(a: Decimal, b: Decimal) -> Tuple[Decimal, Decimal]:
    return (a, b) if compare(a, b) <= 0 else (b, a)


def _precision_for(magnitude: int) -> int:
    # enough digits for the integer part plus DECIMAL_PLACES fractional ones
    return max(PRECISION, magnitude + DECIMAL_PLACES + 2)


def quantize(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _precision_for(value.adjusted())
        return value.quantize(_QUANTUM, rounding=ROUND_DOWN)


def safe_div(n: Decimal, d: Decimal, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """``n / d`` truncated to ``DECIMAL_PLACES``; ``default`` when ``d`` is zero."""
    if d == 0:
        return default
    with localcontext() as ctx:
        ctx.prec = _precision_for(n.adjusted() - d.adjusted() + 1)
        return quantize(n / d)


def percent_factor(pct: Decimal, sign: int = 1) -> Decimal:
    """``1 ± pct/100``."""
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return Decimal(1) + sign * pct / Decimal(100)


def mul(a: Decimal, b: Decimal) -> Decimal:
    """``a * b`` truncated to ``DECIMAL_PLACES``."""
    with localcontext() as ctx:
        ctx.prec = _precision_for(a.adjusted() + b.adjusted() + 1)
        return quantize(a * b)


def sub(a: Decimal, b: Decimal) -> Decimal:
    """``a - b`` truncated to ``DECIMAL_PLACES``; may be negative."""
    with localcontext() as ctx:
        ctx.prec = _precision_for(max(a.adjusted(), b.adjusted()) + 1)
        return quantize(a - b)
