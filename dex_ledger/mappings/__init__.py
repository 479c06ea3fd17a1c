"""Event types and the handlers that apply them to the entity store."""

from .core import PoolEventProcessor
from .events import (
    BurnEvent,
    EventContext,
    InitializeEvent,
    MintEvent,
    PoolCreatedEvent,
    PoolEvent,
    SetFeeProtocolEvent,
    SwapEvent,
    normalize_hash,
)

__all__ = [
    "PoolEventProcessor",
    "EventContext",
    "PoolCreatedEvent",
    "InitializeEvent",
    "MintEvent",
    "BurnEvent",
    "SwapEvent",
    "SetFeeProtocolEvent",
    "PoolEvent",
    "normalize_hash",
]
