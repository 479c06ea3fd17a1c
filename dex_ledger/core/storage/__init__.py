"""
Storage layer for the accounting engine.

- EntityStore: in-memory keyed entity store used while processing events
- JsonStorage: JSON snapshots of the store on disk
- RedisStorage: snapshots of the store in Redis hashes

Usage:
    from dex_ledger.core.storage import EntityStore, JsonStorage

    store = EntityStore()
    ...
    JsonStorage({"base_path": "data/snapshots"}).save_entities(store)
"""

from .base import (
    ConnectionError,
    DataError,
    EntityNotFoundError,
    EntityStoreInterface,
    StorageBase,
    StorageError,
)
from .json_storage import JsonStorage
from .memory import EntityStore
from .redis import RedisStorage

__all__ = [
    "StorageBase",
    "StorageError",
    "ConnectionError",
    "DataError",
    "EntityNotFoundError",
    "EntityStoreInterface",
    "EntityStore",
    "JsonStorage",
    "RedisStorage",
]
