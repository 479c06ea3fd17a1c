"""
Event handlers that keep token, pool and protocol totals up to date.

Handlers run strictly in event order. Each one loads the Bundle and Factory
from the store, mutates entities in place and saves them back. Prices are
always refreshed after pool state has changed and before USD totals are
recomputed.
"""

import logging
from decimal import Decimal
from typing import Dict, Optional

from ..config.networks import NetworkConstants
from ..core.entities import (
    BUNDLE_ID,
    Bundle,
    Burn,
    DepositCounter,
    Factory,
    Mint,
    Pool,
    Swap,
    Token,
    Transaction,
)
from ..core.storage.base import EntityStoreInterface
from ..pricing.math_utils import TWO, ZERO, decimal_precision, safe_div, to_decimal
from ..pricing.oracle import TokenPriceOracle
from ..pricing.tracked_volume import TrackedVolumeClassifier, get_tracked_amount_usd
from ..pricing.v3_math import sqrt_price_x96_to_token_prices
from ..rpc.contracts import PoolContractReader, TokenMetadata
from .events import (
    BurnEvent,
    EventContext,
    InitializeEvent,
    MintEvent,
    PoolCreatedEvent,
    PoolEvent,
    SetFeeProtocolEvent,
    SwapEvent,
)

logger = logging.getLogger(__name__)

FEE_TIER_DENOMINATOR = Decimal("1000000")


class PoolEventProcessor:
    """
    Applies decoded events to the entity store.

    Example:
        processor = PoolEventProcessor(store, config.get_network_constants(), reader)
        for event in events:
            processor.process(event)
    """

    def __init__(
        self,
        store: EntityStoreInterface,
        constants: NetworkConstants,
        contract_reader: Optional[PoolContractReader] = None,
        token_overrides: Optional[Dict[str, TokenMetadata]] = None,
    ):
        """
        Args:
            store: Entity store to read and update
            constants: Network addresses and thresholds
            contract_reader: Source of fee growth and token metadata; fee
                growth is left untouched when omitted
            token_overrides: Metadata for tokens whose contracts do not
                report it correctly, keyed by address
        """
        self.store = store
        self.constants = constants
        self.contract_reader = contract_reader
        self.token_overrides = {
            address.lower(): metadata
            for address, metadata in (token_overrides or {}).items()
        }
        self.oracle = TokenPriceOracle(store, constants)
        self.classifier = TrackedVolumeClassifier(store, constants)

        self._handlers = {
            PoolCreatedEvent: self.handle_pool_created,
            InitializeEvent: self.handle_initialize,
            MintEvent: self.handle_mint,
            BurnEvent: self.handle_burn,
            SwapEvent: self.handle_swap,
            SetFeeProtocolEvent: self.handle_set_fee_protocol,
        }

    def process(self, event: PoolEvent) -> None:
        """Dispatch an event to its handler."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")
        handler(event)

    # Helpers

    def _load_transaction(self, context: EventContext) -> Transaction:
        transaction = self.store.load(Transaction, context.transaction_hash)
        if transaction is None:
            transaction = Transaction(
                id=context.transaction_hash,
                block_number=context.block_number,
                timestamp=context.timestamp,
            )
            self.store.save(transaction)
        return transaction

    def _fetch_metadata(self, address: str) -> Optional[TokenMetadata]:
        if address in self.token_overrides:
            return self.token_overrides[address]
        if self.contract_reader is None:
            logger.warning(f"No contract reader configured to fetch token {address}")
            return None
        return self.contract_reader.fetch_token_metadata(address)

    def _get_or_create_token(self, address: str) -> Optional[Token]:
        token = self.store.load(Token, address)
        if token is not None:
            return token

        metadata = self._fetch_metadata(address)
        if metadata is None or metadata.decimals is None:
            logger.warning(f"Could not resolve decimals for token {address}")
            return None

        token = Token(
            id=address,
            symbol=metadata.symbol,
            name=metadata.name,
            decimals=metadata.decimals,
        )
        self.store.save(token)
        return token

    def _refresh_prices(self, bundle: Bundle, token0: Token, token1: Token) -> None:
        self.oracle.update_native_price_usd(bundle)
        self.oracle.refresh_token(token0, bundle)
        self.oracle.refresh_token(token1, bundle)

    def _update_total_value_locked(
        self,
        pool: Pool,
        token0: Token,
        token1: Token,
        bundle: Bundle,
        factory: Factory,
    ) -> None:
        """Recompute pool and token TVL and re-add the pool to the factory."""
        pool.total_value_locked_eth = (
            pool.total_value_locked_token0 * token0.derived_eth
            + pool.total_value_locked_token1 * token1.derived_eth
        )
        pool.total_value_locked_usd = pool.total_value_locked_eth * bundle.eth_price_usd

        factory.total_value_locked_eth += pool.total_value_locked_eth
        factory.total_value_locked_usd = factory.total_value_locked_eth * bundle.eth_price_usd

        token0.total_value_locked_usd = (
            token0.total_value_locked * token0.derived_eth * bundle.eth_price_usd
        )
        token1.total_value_locked_usd = (
            token1.total_value_locked * token1.derived_eth * bundle.eth_price_usd
        )

    def _usd_value(
        self,
        amount0: Decimal,
        token0: Token,
        amount1: Decimal,
        token1: Token,
        bundle: Bundle,
    ) -> Decimal:
        return (
            amount0 * token0.derived_eth + amount1 * token1.derived_eth
        ) * bundle.eth_price_usd

    def _save(self, *entities) -> None:
        for entity in entities:
            self.store.save(entity)

    # Handlers

    @decimal_precision
    def handle_pool_created(self, event: PoolCreatedEvent) -> None:
        """Create the pool, its tokens, and the protocol singletons on first use."""
        factory = self.store.load(Factory, self.constants.factory_address)
        if factory is None:
            factory = Factory(id=self.constants.factory_address)
            self._save(factory, Bundle())
            logger.info(f"Created factory {factory.id} on {self.constants.name}")

        if self.store.exists(Pool, event.pool):
            logger.warning(f"Pool {event.pool} already exists, ignoring PoolCreated")
            return

        token0 = self._get_or_create_token(event.token0)
        token1 = self._get_or_create_token(event.token1)
        if token0 is None or token1 is None:
            logger.warning(f"Skipping pool {event.pool}: token metadata unavailable")
            return

        context = event.context
        pool = Pool(
            id=event.pool,
            token0=token0.id,
            token1=token1.id,
            fee_tier=event.fee,
            tick_spacing=event.tick_spacing,
            created_at_timestamp=context.timestamp,
            created_at_block_number=context.block_number,
        )

        if self.constants.is_whitelisted(token0.id):
            token1.whitelist_pools.append(pool.id)
        if self.constants.is_whitelisted(token1.id):
            token0.whitelist_pools.append(pool.id)

        token0.pool_count += 1
        token1.pool_count += 1
        factory.pool_count += 1

        self._save(pool, DepositCounter(id=pool.id), token0, token1, factory)
        logger.debug(f"Created pool {pool.id} ({token0.symbol}/{token1.symbol}, fee {pool.fee_tier})")

    @decimal_precision
    def handle_initialize(self, event: InitializeEvent) -> None:
        """Set the pool's starting price and price its tokens."""
        pool = self.store.get(Pool, event.context.address)
        token0 = self.store.get(Token, pool.token0)
        token1 = self.store.get(Token, pool.token1)
        bundle = self.store.get(Bundle, BUNDLE_ID)

        pool.sqrt_price = event.sqrt_price_x96
        pool.tick = event.tick
        pool.token0_price, pool.token1_price = sqrt_price_x96_to_token_prices(
            pool.sqrt_price, token0.decimals, token1.decimals
        )
        self.store.save(pool)

        self._refresh_prices(bundle, token0, token1)

    @decimal_precision
    def handle_set_fee_protocol(self, event: SetFeeProtocolEvent) -> None:
        pool = self.store.get(Pool, event.context.address)
        pool.fee_protocol0 = event.fee_protocol0_new
        pool.fee_protocol1 = event.fee_protocol1_new
        self.store.save(pool)

    def _in_range(self, pool: Pool, tick_lower: int, tick_upper: int) -> bool:
        return pool.tick is not None and tick_lower <= pool.tick < tick_upper

    def _apply_liquidity_change(self, event, direction: int):
        """
        Shared mint/burn bookkeeping.

        Args:
            event: MintEvent or BurnEvent
            direction: 1 for deposits, -1 for withdrawals

        Returns:
            (pool, token0, token1, amount0, amount1, amount_usd, transaction)
        """
        context = event.context
        bundle = self.store.get(Bundle, BUNDLE_ID)
        factory = self.store.get(Factory, self.constants.factory_address)
        pool = self.store.get(Pool, context.address)
        token0 = self.store.get(Token, pool.token0)
        token1 = self.store.get(Token, pool.token1)

        amount0 = to_decimal(event.amount0, token0.decimals)
        amount1 = to_decimal(event.amount1, token1.decimals)
        amount_usd = self._usd_value(amount0, token0, amount1, token1, bundle)

        factory.tx_count += 1
        factory.total_value_locked_eth -= pool.total_value_locked_eth

        token0.tx_count += 1
        token1.tx_count += 1
        token0.total_value_locked += direction * amount0
        token1.total_value_locked += direction * amount1

        pool.tx_count += 1
        pool.total_value_locked_token0 += direction * amount0
        pool.total_value_locked_token1 += direction * amount1
        if self._in_range(pool, event.tick_lower, event.tick_upper):
            pool.liquidity += direction * event.amount

        self._refresh_prices(bundle, token0, token1)
        self._update_total_value_locked(pool, token0, token1, bundle, factory)

        transaction = self._load_transaction(context)
        self._save(pool, token0, token1, factory)
        return pool, token0, token1, amount0, amount1, amount_usd, transaction

    @decimal_precision
    def handle_mint(self, event: MintEvent) -> None:
        """Record a deposit and bump the pool's deposit counter."""
        pool, token0, token1, amount0, amount1, amount_usd, transaction = (
            self._apply_liquidity_change(event, 1)
        )

        mint = Mint(
            id=f"{transaction.id}#{pool.tx_count}",
            transaction=transaction.id,
            timestamp=transaction.timestamp,
            pool=pool.id,
            token0=token0.id,
            token1=token1.id,
            owner=event.owner,
            sender=event.sender,
            origin=event.context.transaction_from,
            amount=event.amount,
            amount0=amount0,
            amount1=amount1,
            amount_usd=amount_usd,
            tick_lower=event.tick_lower,
            tick_upper=event.tick_upper,
            log_index=event.context.log_index,
        )

        counter = self.store.load(DepositCounter, pool.id)
        if counter is None:
            counter = DepositCounter(id=pool.id)
        counter.value += 1

        self._save(mint, counter)

    @decimal_precision
    def handle_burn(self, event: BurnEvent) -> None:
        """Record a withdrawal."""
        pool, token0, token1, amount0, amount1, amount_usd, transaction = (
            self._apply_liquidity_change(event, -1)
        )

        burn = Burn(
            id=f"{transaction.id}#{pool.tx_count}",
            transaction=transaction.id,
            timestamp=transaction.timestamp,
            pool=pool.id,
            token0=token0.id,
            token1=token1.id,
            owner=event.owner,
            origin=event.context.transaction_from,
            amount=event.amount,
            amount0=amount0,
            amount1=amount1,
            amount_usd=amount_usd,
            tick_lower=event.tick_lower,
            tick_upper=event.tick_upper,
            log_index=event.context.log_index,
        )
        self.store.save(burn)

    @decimal_precision
    def handle_swap(self, event: SwapEvent) -> None:
        """
        Account for a swap.

        Volumes and fees are valued at the prices in effect before the swap;
        prices and TVL are then refreshed from the post-swap pool state.
        """
        context = event.context
        if context.address in self.constants.hot_fix_pools:
            logger.debug(f"Ignoring swap in denylisted pool {context.address}")
            return

        bundle = self.store.get(Bundle, BUNDLE_ID)
        factory = self.store.get(Factory, self.constants.factory_address)
        pool = self.store.get(Pool, context.address)
        token0 = self.store.get(Token, pool.token0)
        token1 = self.store.get(Token, pool.token1)

        # read first; a failed call must leave the store untouched
        fee_growth = None
        if self.contract_reader is not None:
            fee_growth = self.contract_reader.fetch_fee_growth(pool.id, context.block_number)

        # signed deltas; sign is direction, magnitude is volume
        amount0 = to_decimal(event.amount0, token0.decimals)
        amount1 = to_decimal(event.amount1, token1.decimals)
        amount0_abs = abs(amount0)
        amount1_abs = abs(amount1)

        amount0_usd = amount0_abs * token0.derived_eth * bundle.eth_price_usd
        amount1_usd = amount1_abs * token1.derived_eth * bundle.eth_price_usd

        tracked = self.classifier.classify(
            pool,
            token0,
            token1,
            amount0_usd,
            amount1_usd,
            self.oracle.find_usd_price_per_token(token0, bundle),
            self.oracle.find_usd_price_per_token(token1, bundle),
        )

        # both sides of a trade are the same volume, count it once
        amount_total_usd_tracked = get_tracked_amount_usd(
            amount0_abs, token0, amount1_abs, token1, bundle,
            self.constants.whitelist_tokens,
        ) / TWO
        # excluded pairs and young pools with shallow reserves add nothing
        if tracked.total_usd == ZERO:
            amount_total_usd_tracked = ZERO
        amount_total_eth_tracked = safe_div(amount_total_usd_tracked, bundle.eth_price_usd)
        amount_total_usd_untracked = (amount0_usd + amount1_usd) / TWO

        fee_tier = Decimal(pool.fee_tier)
        fees_eth = amount_total_eth_tracked * fee_tier / FEE_TIER_DENOMINATOR
        fees_usd = amount_total_usd_tracked * fee_tier / FEE_TIER_DENOMINATOR

        factory.tx_count += 1
        factory.total_volume_eth += amount_total_eth_tracked
        factory.total_volume_usd += amount_total_usd_tracked
        factory.untracked_volume_usd += amount_total_usd_untracked
        factory.total_fees_eth += fees_eth
        factory.total_fees_usd += fees_usd

        # pool contribution is re-added once prices are refreshed
        factory.total_value_locked_eth -= pool.total_value_locked_eth

        pool.volume_token0 += amount0_abs
        pool.volume_token1 += amount1_abs
        pool.volume_usd += amount_total_usd_tracked
        pool.untracked_volume_usd += amount_total_usd_untracked
        pool.volume_token0_usd += tracked.amount0_usd
        pool.volume_token1_usd += tracked.amount1_usd
        pool.fees_usd += fees_usd
        pool.tx_count += 1

        pool.liquidity = event.liquidity
        pool.tick = event.tick
        pool.sqrt_price = event.sqrt_price_x96
        pool.total_value_locked_token0 += amount0
        pool.total_value_locked_token1 += amount1

        for token, amount, amount_abs in (
            (token0, amount0, amount0_abs),
            (token1, amount1, amount1_abs),
        ):
            token.volume += amount_abs
            token.total_value_locked += amount
            token.volume_usd += amount_total_usd_tracked
            token.untracked_volume_usd += amount_total_usd_untracked
            token.fees_usd += fees_usd
            token.tx_count += 1

        pool.token0_price, pool.token1_price = sqrt_price_x96_to_token_prices(
            pool.sqrt_price, token0.decimals, token1.decimals
        )
        self.store.save(pool)

        self._refresh_prices(bundle, token0, token1)

        token0_price = token0.derived_eth * bundle.eth_price_usd
        token1_price = token1.derived_eth * bundle.eth_price_usd

        self._update_total_value_locked(pool, token0, token1, bundle, factory)

        if fee_growth is not None:
            pool.fee_growth_global0_x128, pool.fee_growth_global1_x128 = fee_growth

        transaction = self._load_transaction(context)
        swap = Swap(
            id=f"{transaction.id}#{pool.tx_count}",
            transaction=transaction.id,
            timestamp=transaction.timestamp,
            pool=pool.id,
            token0=token0.id,
            token1=token1.id,
            sender=event.sender,
            recipient=event.recipient,
            origin=context.transaction_from,
            amount0=amount0,
            amount1=amount1,
            amount_usd=amount_total_usd_tracked,
            sqrt_price_x96=event.sqrt_price_x96,
            tick=event.tick,
            log_index=context.log_index,
            token0_price=token0_price,
            token1_price=token1_price,
            exchange_rate=safe_div(token1_price, token0_price),
        )

        self._save(swap, factory, pool, token0, token1)
