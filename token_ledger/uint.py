"""
token_ledger.uint
=================

Checked and saturating unsigned-integer helpers over an explicit bit width.

- "checked" variants raise on overflow/underflow; balances and allowances are
  always updated through these.
- "saturating" variants clamp to [0, 2**bits - 1] and never raise due to range.

Python ints are unbounded, so the width is enforced here rather than by the
type. Nothing in this module wraps.
"""

from __future__ import annotations

from typing import Final

from .errors import AmountOverflow, AmountUnderflow, InvalidAmount

U128_BITS: Final[int] = 128
U256_BITS: Final[int] = 256


def max_for(bits: int) -> int:
    return (1 << bits) - 1


def is_amount(x: object, bits: int = U128_BITS) -> bool:
    # bool is an int subclass; an amount of True is a caller bug.
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= max_for(bits)


def require_amount(x: object, bits: int = U128_BITS) -> int:
    """Return `x` unchanged if it is an amount of the given width, else raise InvalidAmount."""
    if not is_amount(x, bits):
        raise InvalidAmount(f"amount must be an integer in [0, 2**{bits} - 1]", value=x)
    return x  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Checked (raise on range errors)
# ---------------------------------------------------------------------------

def checked_add(x: int, y: int, bits: int = U128_BITS) -> int:
    require_amount(x, bits)
    require_amount(y, bits)
    z = x + y
    if z > max_for(bits):
        raise AmountOverflow(bits=bits)
    return z


def checked_sub(x: int, y: int, bits: int = U128_BITS) -> int:
    require_amount(x, bits)
    require_amount(y, bits)
    if y > x:
        raise AmountUnderflow()
    return x - y


# ---------------------------------------------------------------------------
# Saturating (clamp)
# ---------------------------------------------------------------------------

def saturating_add(x: int, y: int, bits: int = U128_BITS) -> int:
    """min(x + y, 2**bits - 1)."""
    require_amount(x, bits)
    require_amount(y, bits)
    return min(x + y, max_for(bits))


def saturating_sub(x: int, y: int, bits: int = U128_BITS) -> int:
    """max(x - y, 0)."""
    require_amount(x, bits)
    require_amount(y, bits)
    return x - y if x >= y else 0


__all__ = [
    "U128_BITS",
    "U256_BITS",
    "max_for",
    "is_amount",
    "require_amount",
    "checked_add",
    "checked_sub",
    "saturating_add",
    "saturating_sub",
]
