"""
Decoded pool and factory events.

Events arrive already ABI-decoded. Addresses are lower-cased and transaction
hashes normalised to 0x-prefixed lower-case hex on construction so they can
be used directly as entity ids.
"""

from dataclasses import dataclass
from typing import Union

from hexbytes import HexBytes


def normalize_hash(value: Union[str, bytes]) -> str:
    """Render a transaction hash as 0x-prefixed lower-case hex."""
    return "0x" + bytes(HexBytes(value)).hex()


def _lower(event, *names: str) -> None:
    for name in names:
        object.__setattr__(event, name, getattr(event, name).lower())


@dataclass(frozen=True)
class EventContext:
    """
    Block and transaction data shared by every event.

    Attributes:
        address: Emitting contract (the pool, or the factory for PoolCreated)
        transaction_hash: Hash of the emitting transaction
        log_index: Position of the log in the block
        block_number: Block the log was emitted in
        timestamp: Block timestamp in seconds
        transaction_from: Transaction origin
    """

    address: str
    transaction_hash: Union[str, bytes]
    log_index: int
    block_number: int
    timestamp: int
    transaction_from: str

    def __post_init__(self):
        _lower(self, "address", "transaction_from")
        object.__setattr__(self, "transaction_hash", normalize_hash(self.transaction_hash))


@dataclass(frozen=True)
class PoolCreatedEvent:
    context: EventContext
    token0: str
    token1: str
    fee: int
    tick_spacing: int
    pool: str

    def __post_init__(self):
        _lower(self, "token0", "token1", "pool")


@dataclass(frozen=True)
class InitializeEvent:
    context: EventContext
    sqrt_price_x96: int
    tick: int


@dataclass(frozen=True)
class MintEvent:
    context: EventContext
    sender: str
    owner: str
    tick_lower: int
    tick_upper: int
    amount: int
    amount0: int
    amount1: int

    def __post_init__(self):
        _lower(self, "sender", "owner")


@dataclass(frozen=True)
class BurnEvent:
    context: EventContext
    owner: str
    tick_lower: int
    tick_upper: int
    amount: int
    amount0: int
    amount1: int

    def __post_init__(self):
        _lower(self, "owner")


@dataclass(frozen=True)
class SwapEvent:
    """Swap with signed raw token deltas (positive flows into the pool)."""

    context: EventContext
    sender: str
    recipient: str
    amount0: int
    amount1: int
    sqrt_price_x96: int
    liquidity: int
    tick: int

    def __post_init__(self):
        _lower(self, "sender", "recipient")


@dataclass(frozen=True)
class SetFeeProtocolEvent:
    context: EventContext
    fee_protocol0_old: int
    fee_protocol1_old: int
    fee_protocol0_new: int
    fee_protocol1_new: int


PoolEvent = Union[
    PoolCreatedEvent,
    InitializeEvent,
    MintEvent,
    BurnEvent,
    SwapEvent,
    SetFeeProtocolEvent,
]
