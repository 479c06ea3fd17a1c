"""
Entity types for the accounting engine.

Entities are plain dataclasses owned by the entity store. Mutable entities
(Token, Pool, Bundle, Factory, Transaction, DepositCounter) are updated in
place by the event handlers; event records (Swap, Mint, Burn) are frozen.
"""

from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar, Union, get_type_hints

ZERO = Decimal("0")

BUNDLE_ID = "1"

E = TypeVar("E")


class _FixedFields:
    """Reject reassignment of identity fields once they are set."""

    _fixed_fields: tuple = ()

    def __setattr__(self, name, value):
        if name in self._fixed_fields and name in self.__dict__:
            raise AttributeError(f"{type(self).__name__}.{name} is fixed at creation")
        super().__setattr__(name, value)


@dataclass
class Token(_FixedFields):
    """ERC20 token with running valuation and volume totals."""

    _fixed_fields = ("id", "decimals")

    id: str
    symbol: str
    name: str
    decimals: int
    volume: Decimal = ZERO
    volume_usd: Decimal = ZERO
    untracked_volume_usd: Decimal = ZERO
    fees_usd: Decimal = ZERO
    tx_count: int = 0
    pool_count: int = 0
    total_value_locked: Decimal = ZERO
    total_value_locked_usd: Decimal = ZERO
    # price in reference currency
    derived_eth: Decimal = ZERO
    last_price_usd: Optional[Decimal] = None
    # pools pairing this token with a whitelisted token
    whitelist_pools: List[str] = field(default_factory=list)


@dataclass
class Pool(_FixedFields):
    """Concentrated-liquidity pool state and cumulative metrics."""

    _fixed_fields = ("id", "token0", "token1")

    id: str
    token0: str
    token1: str
    fee_tier: int
    tick_spacing: int = 0
    created_at_timestamp: int = 0
    created_at_block_number: int = 0
    liquidity: int = 0
    sqrt_price: int = 0
    tick: Optional[int] = None
    token0_price: Decimal = ZERO
    token1_price: Decimal = ZERO
    fee_growth_global0_x128: int = 0
    fee_growth_global1_x128: int = 0
    fee_protocol0: int = 0
    fee_protocol1: int = 0
    volume_token0: Decimal = ZERO
    volume_token1: Decimal = ZERO
    volume_usd: Decimal = ZERO
    untracked_volume_usd: Decimal = ZERO
    volume_token0_usd: Decimal = ZERO
    volume_token1_usd: Decimal = ZERO
    fees_usd: Decimal = ZERO
    tx_count: int = 0
    total_value_locked_token0: Decimal = ZERO
    total_value_locked_token1: Decimal = ZERO
    total_value_locked_eth: Decimal = ZERO
    total_value_locked_usd: Decimal = ZERO


@dataclass
class Bundle:
    """Singleton holding the reference currency price in USD."""

    id: str = BUNDLE_ID
    eth_price_usd: Decimal = ZERO


@dataclass
class Factory:
    """Protocol-wide aggregates."""

    id: str
    pool_count: int = 0
    tx_count: int = 0
    total_volume_usd: Decimal = ZERO
    total_volume_eth: Decimal = ZERO
    untracked_volume_usd: Decimal = ZERO
    total_fees_usd: Decimal = ZERO
    total_fees_eth: Decimal = ZERO
    total_value_locked_eth: Decimal = ZERO
    total_value_locked_usd: Decimal = ZERO


@dataclass
class Transaction:
    id: str
    block_number: int
    timestamp: int


@dataclass
class DepositCounter:
    """Number of deposits a pool has seen; gates tracked volume on young pools."""

    id: str
    value: int = 0


@dataclass(frozen=True)
class Swap:
    id: str
    transaction: str
    timestamp: int
    pool: str
    token0: str
    token1: str
    sender: str
    recipient: str
    origin: str
    amount0: Decimal
    amount1: Decimal
    amount_usd: Decimal
    sqrt_price_x96: int
    tick: int
    log_index: int
    token0_price: Decimal
    token1_price: Decimal
    exchange_rate: Decimal


@dataclass(frozen=True)
class Mint:
    id: str
    transaction: str
    timestamp: int
    pool: str
    token0: str
    token1: str
    owner: str
    sender: str
    origin: str
    amount: int
    amount0: Decimal
    amount1: Decimal
    amount_usd: Decimal
    tick_lower: int
    tick_upper: int
    log_index: int


@dataclass(frozen=True)
class Burn:
    id: str
    transaction: str
    timestamp: int
    pool: str
    token0: str
    token1: str
    owner: str
    origin: str
    amount: int
    amount0: Decimal
    amount1: Decimal
    amount_usd: Decimal
    tick_lower: int
    tick_upper: int
    log_index: int


ENTITY_TYPES: Dict[str, Type] = {
    cls.__name__: cls
    for cls in (Token, Pool, Bundle, Factory, Transaction, DepositCounter, Swap, Mint, Burn)
}


def _is_decimal(hint: Any) -> bool:
    if hint is Decimal:
        return True
    # Optional[Decimal]
    return getattr(hint, "__origin__", None) is Union and Decimal in hint.__args__


def entity_to_record(entity: Any) -> Dict[str, Any]:
    """
    Convert an entity into a JSON-safe dict.

    Decimals become strings so no precision is lost; ints stay ints.
    """
    record = {}
    for f in fields(entity):
        value = getattr(entity, f.name)
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, list):
            value = list(value)
        record[f.name] = value
    return record


def entity_from_record(entity_type: Type[E], record: Dict[str, Any]) -> E:
    """
    Rebuild an entity from a dict produced by entity_to_record.

    Args:
        entity_type: Entity class to build
        record: Field values keyed by field name

    Returns:
        New entity instance
    """
    hints = get_type_hints(entity_type)
    kwargs = {}
    for f in fields(entity_type):
        if f.name not in record:
            continue
        value = record[f.name]
        if value is not None and _is_decimal(hints[f.name]):
            value = Decimal(value)
        kwargs[f.name] = value
    return entity_type(**kwargs)
