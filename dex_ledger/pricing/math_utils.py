"""
Decimal and fixed-point helpers.

Token amounts arrive as integers scaled by 10^decimals and can be as large as
2^256, so every conversion is done with Decimal arithmetic and never touches
floats.
"""

import functools
from decimal import Context, Decimal, ROUND_HALF_EVEN, localcontext

ZERO = Decimal("0")
ONE = Decimal("1")
TWO = Decimal("2")

# Wide enough to hold 2^256 scaled by 10^-18 without rounding
EXACT_CONTEXT = Context(prec=100, rounding=ROUND_HALF_EVEN, Emax=999999, Emin=-999999)

# Working precision for event processing
PRECISION_CONTEXT = Context(prec=50, rounding=ROUND_HALF_EVEN, Emax=999999, Emin=-999999)


def exponent_to_int(exponent: int) -> int:
    """Return 10**exponent as an exact integer."""
    if exponent < 0:
        raise ValueError(f"Exponent must be non-negative, got: {exponent}")
    return 10 ** exponent


def exponent_to_decimal(exponent: int) -> Decimal:
    """Return 10**exponent as an exact Decimal."""
    return Decimal(exponent_to_int(exponent))


def to_decimal(raw_amount: int, decimals: int) -> Decimal:
    """
    Convert a raw token amount into its human-readable Decimal value.

    Args:
        raw_amount: Integer amount in the token's smallest unit (may be negative)
        decimals: Token decimal exponent

    Returns:
        raw_amount / 10**decimals, exact
    """
    if decimals == 0:
        return Decimal(raw_amount)
    return Decimal(raw_amount).scaleb(-decimals, context=EXACT_CONTEXT)


def from_decimal(value: Decimal, decimals: int) -> int:
    """Inverse of to_decimal: scale a human amount back to raw integer units."""
    return int(value.scaleb(decimals, context=EXACT_CONTEXT))


def safe_div(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    Divide, returning zero when the denominator is exactly zero.

    A zero result means "no data" (empty pool, unpriced token), not an error.
    """
    if denominator == ZERO:
        return ZERO
    return numerator / denominator


def decimal_precision(func):
    """Run the wrapped callable under PRECISION_CONTEXT."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with localcontext(PRECISION_CONTEXT):
            return func(*args, **kwargs)

    return wrapper
