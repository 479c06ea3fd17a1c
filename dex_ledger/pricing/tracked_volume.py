"""
Tracked-volume rules.

Tracked volume only counts trades that can be priced through whitelisted
tokens. Untracked volume is the raw total regardless of confidence.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import AbstractSet

from ..config.networks import NetworkConstants
from ..core.entities import Bundle, DepositCounter, Pool, Token
from ..core.storage.base import EntityStoreInterface
from .math_utils import TWO, ZERO

logger = logging.getLogger(__name__)

# Pools with fewer deposits must pass the reserve gate
MINIMUM_DEPOSITS = 5


@dataclass(frozen=True)
class TrackedVolume:
    amount0_usd: Decimal
    amount1_usd: Decimal
    total_usd: Decimal


ZERO_VOLUME = TrackedVolume(ZERO, ZERO, ZERO)


class TrackedVolumeClassifier:
    """Splits a trade's USD amounts into tracked per-side and total volume."""

    def __init__(self, store: EntityStoreInterface, constants: NetworkConstants):
        self.store = store
        self.constants = constants

    def classify(
        self,
        pool: Pool,
        token0: Token,
        token1: Token,
        amount0_usd: Decimal,
        amount1_usd: Decimal,
        price0_usd: Decimal,
        price1_usd: Decimal,
    ) -> TrackedVolume:
        """
        Decide how much of a trade counts as tracked volume.

        Args:
            pool: Pool the trade happened in
            token0: Pool token0
            token1: Pool token1
            amount0_usd: USD value of the token0 side
            amount1_usd: USD value of the token1 side
            price0_usd: Current USD price of token0
            price1_usd: Current USD price of token1

        Returns:
            TrackedVolume with per-side and total tracked USD
        """
        if pool.id in self.constants.untracked_pairs:
            return ZERO_VOLUME

        whitelisted0 = self.constants.is_whitelisted(token0.id)
        whitelisted1 = self.constants.is_whitelisted(token1.id)

        counter = self.store.load(DepositCounter, pool.id)
        if counter is None:
            logger.debug(f"No deposit counter for pool {pool.id}")
            return ZERO_VOLUME

        if counter.value < MINIMUM_DEPOSITS:
            reserve0_usd = pool.total_value_locked_token0 * price0_usd
            reserve1_usd = pool.total_value_locked_token1 * price1_usd
            threshold = self.constants.minimum_liquidity_threshold_usd

            if whitelisted0 and whitelisted1:
                if reserve0_usd + reserve1_usd < threshold:
                    return ZERO_VOLUME
            elif whitelisted0:
                if reserve0_usd * TWO < threshold:
                    return ZERO_VOLUME
            elif whitelisted1:
                if reserve1_usd * TWO < threshold:
                    return ZERO_VOLUME

        if whitelisted0 and whitelisted1:
            return TrackedVolume(amount0_usd, amount1_usd, (amount0_usd + amount1_usd) / TWO)

        if whitelisted0:
            return TrackedVolume(amount0_usd, ZERO, amount0_usd)

        if whitelisted1:
            return TrackedVolume(ZERO, amount1_usd, amount1_usd)

        return ZERO_VOLUME


def get_tracked_amount_usd(
    amount0: Decimal,
    token0: Token,
    amount1: Decimal,
    token1: Token,
    bundle: Bundle,
    whitelist: AbstractSet[str],
) -> Decimal:
    """
    USD value of a trade counting only whitelisted sides.

    Both sides whitelisted sums them; one side whitelisted doubles it;
    neither gives zero. Callers halve the result to count a trade once.
    """
    price0_usd = token0.derived_eth * bundle.eth_price_usd
    price1_usd = token1.derived_eth * bundle.eth_price_usd

    whitelisted0 = token0.id in whitelist
    whitelisted1 = token1.id in whitelist

    if whitelisted0 and whitelisted1:
        return amount0 * price0_usd + amount1 * price1_usd

    if whitelisted0:
        return amount0 * price0_usd * TWO

    if whitelisted1:
        return amount1 * price1_usd * TWO

    return ZERO
