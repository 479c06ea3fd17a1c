"""Price math, price discovery and tracked-volume rules."""

from .math_utils import (
    EXACT_CONTEXT,
    PRECISION_CONTEXT,
    decimal_precision,
    exponent_to_decimal,
    exponent_to_int,
    from_decimal,
    safe_div,
    to_decimal,
)
from .oracle import TokenPriceOracle
from .tracked_volume import (
    TrackedVolume,
    TrackedVolumeClassifier,
    get_tracked_amount_usd,
)
from .v3_math import Q96, Q192, sqrt_price_x96_to_token_prices

__all__ = [
    "EXACT_CONTEXT",
    "PRECISION_CONTEXT",
    "decimal_precision",
    "exponent_to_decimal",
    "exponent_to_int",
    "from_decimal",
    "safe_div",
    "to_decimal",
    "TokenPriceOracle",
    "TrackedVolume",
    "TrackedVolumeClassifier",
    "get_tracked_amount_usd",
    "Q96",
    "Q192",
    "sqrt_price_x96_to_token_prices",
]
