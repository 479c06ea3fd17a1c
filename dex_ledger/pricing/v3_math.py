"""
Concentrated-liquidity pool price math.

Key concepts:
- sqrtPriceX96: Square root of the raw price in Q64.96 fixed-point format
- Raw price = (sqrtPriceX96 / 2^96)^2 = token1 raw units per token0 raw unit
- Human price = raw price * 10^decimals0 / 10^decimals1
"""

from decimal import Decimal, localcontext
from typing import Tuple

from .math_utils import ONE, PRECISION_CONTEXT, exponent_to_decimal, safe_div

# Q96 constants
Q96 = 2**96
Q192 = 2**192


def sqrt_price_x96_to_token_prices(
    sqrt_price_x96: int,
    decimals0: int,
    decimals1: int,
) -> Tuple[Decimal, Decimal]:
    """
    Convert a pool's sqrtPriceX96 into its two spot prices.

    Formula: price1 = sqrtPriceX96^2 / 2^192 * 10^decimals0 / 10^decimals1

    Args:
        sqrt_price_x96: Pool sqrt price in Q96 format
        decimals0: Decimal exponent of token0
        decimals1: Decimal exponent of token1

    Returns:
        (price0, price1) where price0 is token0 per token1 and price1 is
        token1 per token0. Both are zero for an uninitialised pool.
    """
    with localcontext(PRECISION_CONTEXT):
        # Square as an integer first; Decimal(int) is exact at any size
        num = Decimal(sqrt_price_x96 * sqrt_price_x96)
        price1 = (
            num
            / Decimal(Q192)
            * exponent_to_decimal(decimals0)
            / exponent_to_decimal(decimals1)
        )
        price0 = safe_div(ONE, price1)

    return price0, price1
