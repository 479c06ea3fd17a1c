"""
Shared fixtures for dex_ledger tests.

The `driver` fixture feeds decoded events through a PoolEventProcessor
backed by an in-memory store, with a mocked contract reader standing in
for the chain.
"""

from decimal import Decimal, localcontext
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from dex_ledger.config.networks import NetworkConstants
from dex_ledger.core.storage.memory import EntityStore
from dex_ledger.mappings.core import PoolEventProcessor
from dex_ledger.mappings.events import (
    BurnEvent,
    EventContext,
    InitializeEvent,
    MintEvent,
    PoolCreatedEvent,
    SwapEvent,
)
from dex_ledger.pricing.v3_math import Q96
from dex_ledger.rpc.contracts import TokenMetadata

ADDRESSES = SimpleNamespace(
    factory="0x1f98431c8ad98523631ae4a59f267346ea31f984",
    weth="0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
    usdc="0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
    token_x="0x1111111111111111111111111111111111111111",
    broken="0x2222222222222222222222222222222222222222",
    usdc_weth_pool="0x8ad599c3a0ff1de082011efddc58f1908eb6e6d8",
    x_weth_pool="0x3333333333333333333333333333333333333333",
    hot_fix_pool="0x9663f2ca0454accad3e094448ea6f77443880454",
    origin="0x4444444444444444444444444444444444444444",
    tx_hash="0x" + "ab" * 32,
)

TOKEN_METADATA = {
    ADDRESSES.weth: TokenMetadata(symbol="WETH", name="Wrapped Ether", decimals=18),
    ADDRESSES.usdc: TokenMetadata(symbol="USDC", name="USD Coin", decimals=6),
    ADDRESSES.token_x: TokenMetadata(symbol="X", name="Token X", decimals=18),
    ADDRESSES.broken: TokenMetadata(symbol="unknown", name="unknown", decimals=None),
}

# USDC/WETH pool state used by the seeded fixtures
ETH_PRICE = Decimal("1800")
SEED_TICK = 201360
SEED_LIQUIDITY = 10**18


def encode_sqrt_price_x96(price1: Decimal, decimals0: int, decimals1: int) -> int:
    """Encode a human token1-per-token0 price as sqrtPriceX96."""
    with localcontext() as ctx:
        ctx.prec = 80
        raw = price1 * Decimal(10) ** decimals1 / Decimal(10) ** decimals0
        return int(raw.sqrt() * Q96)


class PipelineDriver:
    """Builds events with sensible defaults and feeds them to the processor."""

    def __init__(self, processor: PoolEventProcessor):
        self.processor = processor
        self.store = processor.store

    def context(self, address: str, tx_hash: str = ADDRESSES.tx_hash, log_index: int = 0) -> EventContext:
        return EventContext(
            address=address,
            transaction_hash=tx_hash,
            log_index=log_index,
            block_number=17_000_000,
            timestamp=1_700_000_000,
            transaction_from=ADDRESSES.origin,
        )

    def create_pool(self, pool: str, token0: str, token1: str, fee: int = 3000) -> None:
        self.processor.process(
            PoolCreatedEvent(
                context=self.context(ADDRESSES.factory),
                token0=token0,
                token1=token1,
                fee=fee,
                tick_spacing=60,
                pool=pool,
            )
        )

    def initialize(self, pool: str, sqrt_price_x96: int, tick: int = SEED_TICK) -> None:
        self.processor.process(
            InitializeEvent(context=self.context(pool), sqrt_price_x96=sqrt_price_x96, tick=tick)
        )

    def mint(
        self,
        pool: str,
        amount0: int,
        amount1: int,
        amount: int = SEED_LIQUIDITY,
        tick_lower: int = 200040,
        tick_upper: int = 202020,
        tx_hash: str = ADDRESSES.tx_hash,
    ) -> None:
        self.processor.process(
            MintEvent(
                context=self.context(pool, tx_hash=tx_hash),
                sender=ADDRESSES.origin,
                owner=ADDRESSES.origin,
                tick_lower=tick_lower,
                tick_upper=tick_upper,
                amount=amount,
                amount0=amount0,
                amount1=amount1,
            )
        )

    def burn(
        self,
        pool: str,
        amount0: int,
        amount1: int,
        amount: int = SEED_LIQUIDITY,
        tick_lower: int = 200040,
        tick_upper: int = 202020,
        tx_hash: str = ADDRESSES.tx_hash,
    ) -> None:
        self.processor.process(
            BurnEvent(
                context=self.context(pool, tx_hash=tx_hash),
                owner=ADDRESSES.origin,
                tick_lower=tick_lower,
                tick_upper=tick_upper,
                amount=amount,
                amount0=amount0,
                amount1=amount1,
            )
        )

    def swap(
        self,
        pool: str,
        amount0: int,
        amount1: int,
        sqrt_price_x96: int,
        liquidity: int = SEED_LIQUIDITY,
        tick: int = SEED_TICK,
        tx_hash: str = ADDRESSES.tx_hash,
    ) -> None:
        self.processor.process(
            SwapEvent(
                context=self.context(pool, tx_hash=tx_hash, log_index=1),
                sender=ADDRESSES.origin,
                recipient=ADDRESSES.origin,
                amount0=amount0,
                amount1=amount1,
                sqrt_price_x96=sqrt_price_x96,
                liquidity=liquidity,
                tick=tick,
            )
        )


@pytest.fixture
def addresses():
    return ADDRESSES


@pytest.fixture
def constants():
    """Network constants with USDC/WETH as the only oracle pool."""
    return NetworkConstants.build(
        name="testnet",
        factory_address=ADDRESSES.factory,
        reference_token=ADDRESSES.weth,
        stable_oracle_pools=[ADDRESSES.usdc_weth_pool],
        stable_coins=[ADDRESSES.usdc],
        whitelist_tokens=[ADDRESSES.weth, ADDRESSES.usdc],
        hot_fix_pools=[ADDRESSES.hot_fix_pool],
    )


@pytest.fixture
def store():
    return EntityStore()


@pytest.fixture
def contract_reader():
    """Mock PoolContractReader answering from TOKEN_METADATA."""
    reader = Mock()
    reader.fetch_token_metadata.side_effect = lambda address: TOKEN_METADATA[address]
    reader.fetch_fee_growth.return_value = (111, 222)
    return reader


@pytest.fixture
def processor(store, constants, contract_reader):
    return PoolEventProcessor(store, constants, contract_reader)


@pytest.fixture
def driver(processor):
    return PipelineDriver(processor)


@pytest.fixture
def usdc_weth_sqrt_price():
    """sqrtPriceX96 for 1 WETH = 1800 USDC (USDC is token0)."""
    return encode_sqrt_price_x96(1 / ETH_PRICE, 6, 18)


@pytest.fixture
def seeded_driver(driver, addresses, usdc_weth_sqrt_price):
    """USDC/WETH pool created, initialised at 1800 and holding 2M USDC + 1000 WETH."""
    driver.create_pool(addresses.usdc_weth_pool, addresses.usdc, addresses.weth)
    driver.initialize(addresses.usdc_weth_pool, usdc_weth_sqrt_price)
    driver.mint(addresses.usdc_weth_pool, amount0=2_000_000 * 10**6, amount1=1000 * 10**18)
    return driver


@pytest.fixture
def encode_price():
    """Expose encode_sqrt_price_x96 to tests."""
    return encode_sqrt_price_x96
