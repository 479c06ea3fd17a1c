"""Core entity model and storage."""

from .entities import (
    BUNDLE_ID,
    ENTITY_TYPES,
    Bundle,
    Burn,
    DepositCounter,
    Factory,
    Mint,
    Pool,
    Swap,
    Token,
    Transaction,
    entity_from_record,
    entity_to_record,
)

__all__ = [
    "BUNDLE_ID",
    "ENTITY_TYPES",
    "Bundle",
    "Burn",
    "DepositCounter",
    "Factory",
    "Mint",
    "Pool",
    "Swap",
    "Token",
    "Transaction",
    "entity_from_record",
    "entity_to_record",
]
