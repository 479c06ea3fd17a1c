"""
Token price discovery.

Prices are found in two stages:
- Stage A prices the reference token (wrapped native asset) in USD from the
  configured stable oracle pools.
- Stage B prices any other token in the reference token by walking the
  token's whitelist pools and keeping the one with the most reference value
  locked on the counter side.

Nothing is cached; every call re-reads pool state from the entity store.
"""

import logging
from decimal import Decimal
from typing import Optional

from ..config.networks import NetworkConstants
from ..core.entities import Bundle, Pool, Token
from ..core.storage.base import EntityStoreInterface
from .math_utils import ONE, ZERO, safe_div

logger = logging.getLogger(__name__)


class TokenPriceOracle:
    """
    Derives reference-currency and USD prices from pool state.

    Example:
        oracle = TokenPriceOracle(store, constants)
        oracle.update_native_price_usd(bundle)
        oracle.refresh_token(token, bundle)
    """

    def __init__(self, store: EntityStoreInterface, constants: NetworkConstants):
        self.store = store
        self.constants = constants

    def update_native_price_usd(self, bundle: Bundle) -> Decimal:
        """
        Refresh the reference token's USD price from the stable oracle pools.

        The pool with the largest stable balance wins, provided that balance
        exceeds stable_oracle_min_liquidity. When no pool qualifies the bundle
        keeps its previous price.

        Args:
            bundle: Bundle entity, updated in place

        Returns:
            The bundle's reference price after the update
        """
        reference = self.constants.reference_token
        largest_stable_balance = ZERO
        best_price: Optional[Decimal] = None
        found_pool = False

        for pool_id in self.constants.stable_oracle_pools:
            pool = self.store.load(Pool, pool_id)
            if pool is None:
                continue
            found_pool = True

            if pool.token0 == reference:
                stable_balance = pool.total_value_locked_token1
                price = pool.token1_price
            elif pool.token1 == reference:
                stable_balance = pool.total_value_locked_token0
                price = pool.token0_price
            else:
                logger.warning(f"Oracle pool {pool_id} does not hold the reference token")
                continue

            if stable_balance > largest_stable_balance:
                largest_stable_balance = stable_balance
                if stable_balance > self.constants.stable_oracle_min_liquidity:
                    best_price = price

        if not found_pool:
            logger.warning(
                f"No stable oracle pools available on {self.constants.name}, "
                f"keeping reference price {bundle.eth_price_usd}"
            )
            return bundle.eth_price_usd

        if best_price is not None:
            bundle.eth_price_usd = best_price
            self.store.save(bundle)
        else:
            logger.debug(
                f"Oracle pools below {self.constants.stable_oracle_min_liquidity} "
                f"stable liquidity, reference price unchanged"
            )

        return bundle.eth_price_usd

    def find_native_price_per_token(self, token: Token, bundle: Bundle) -> Decimal:
        """
        Price a token in the reference currency.

        Args:
            token: Token to price
            bundle: Bundle holding the reference USD price

        Returns:
            Reference-currency units per token, zero when no pool qualifies
        """
        if token.id == self.constants.reference_token:
            return ONE
        if token.id in self.constants.stable_coins:
            return safe_div(ONE, bundle.eth_price_usd)
        if token.id in self.constants.untracked_tokens:
            return ZERO

        largest_native_locked = ZERO
        price_so_far = ZERO

        for pool_id in token.whitelist_pools:
            pool = self.store.get(Pool, pool_id)
            if pool.liquidity == 0:
                continue

            if pool.token0 == token.id:
                counter = self.store.get(Token, pool.token1)
                native_locked = pool.total_value_locked_token1 * counter.derived_eth
                counter_per_token = pool.token1_price
            else:
                counter = self.store.get(Token, pool.token0)
                native_locked = pool.total_value_locked_token0 * counter.derived_eth
                counter_per_token = pool.token0_price

            if (
                native_locked > largest_native_locked
                and native_locked > self.constants.minimum_native_locked
            ):
                largest_native_locked = native_locked
                price_so_far = counter_per_token * counter.derived_eth

        return price_so_far

    def find_usd_price_per_token(self, token: Token, bundle: Bundle) -> Decimal:
        """Price a token in USD; stable coins are pinned to exactly one."""
        if token.id == self.constants.reference_token:
            return bundle.eth_price_usd
        if token.id in self.constants.stable_coins:
            return ONE
        if token.id in self.constants.untracked_tokens:
            return ZERO
        return token.derived_eth * bundle.eth_price_usd

    def refresh_token(self, token: Token, bundle: Bundle) -> Decimal:
        """
        Recompute and store a token's reference and USD prices.

        Returns:
            The token's new derived_eth
        """
        token.derived_eth = self.find_native_price_per_token(token, bundle)
        token.last_price_usd = self.find_usd_price_per_token(token, bundle)
        self.store.save(token)
        return token.derived_eth
