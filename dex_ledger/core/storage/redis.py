"""
Redis storage for entity snapshots.

Each entity type is kept in one hash (`<prefix>:<EntityType>`) mapping the
entity id to its JSON record.
"""

import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..entities import ENTITY_TYPES, entity_from_record, entity_to_record
from .base import StorageBase, ConnectionError, DataError
from .memory import EntityStore

logger = logging.getLogger(__name__)


class RedisStorage(StorageBase):
    """
    Redis storage backend for entity snapshots.

    Features:
    - One hash per entity type
    - JSON serialization of entity records
    - Full-store save and restore
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize Redis storage.

        Args:
            config: Configuration with keys:
                - host: Redis host
                - port: Redis port
                - password: Redis password (optional)
                - db: Redis database number (default: 0)
                - key_prefix: Prefix for every hash key (default: dex_ledger)
                - socket_timeout: Socket timeout in seconds (default: 5)
        """
        super().__init__(config)
        self.key_prefix = config.get('key_prefix', 'dex_ledger')
        self.client: Optional[Redis] = None

    async def connect(self) -> None:
        """Establish connection to Redis."""
        try:
            pool_kwargs = {
                'host': self.config.get('host', 'localhost'),
                'port': self.config.get('port', 6379),
                'db': self.config.get('db', 0),
                'decode_responses': True,
                'socket_timeout': self.config.get('socket_timeout', 5),
            }

            # Only add password if it's actually set
            password = self.config.get('password')
            if password is not None:
                pool_kwargs['password'] = password

            pool = redis.ConnectionPool(**pool_kwargs)
            self.client = redis.Redis(connection_pool=pool)

            # Test connection
            await self.client.ping()

            self.is_connected = True
            logger.info("Redis connection established")

        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise ConnectionError(f"Redis connection failed: {e}")

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()

        self.is_connected = False
        logger.info("Redis connection closed")

    async def health_check(self) -> bool:
        """Check Redis connection health."""
        if not self.client:
            return False

        try:
            response = await self.client.ping()
            return response is True
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    def _key(self, type_name: str) -> str:
        return f"{self.key_prefix}:{type_name}"

    async def save_entity(self, entity: Any) -> None:
        """Write a single entity record."""
        if not self.client:
            raise ConnectionError("Not connected to Redis")

        try:
            await self.client.hset(
                self._key(type(entity).__name__),
                entity.id,
                json.dumps(entity_to_record(entity)),
            )
        except RedisError as e:
            logger.error(f"Failed to save {type(entity).__name__} {entity.id}: {e}")
            raise DataError(f"Entity save failed: {e}")

    async def save_entities(self, store: EntityStore) -> int:
        """
        Write every entity in the store.

        Returns:
            Number of entities written
        """
        if not self.client:
            raise ConnectionError("Not connected to Redis")

        written = 0
        try:
            for type_name, records in store.records().items():
                if not records:
                    continue
                mapping = {record['id']: json.dumps(record) for record in records}
                await self.client.hset(self._key(type_name), mapping=mapping)
                written += len(mapping)
        except RedisError as e:
            logger.error(f"Failed to save entity snapshot: {e}")
            raise DataError(f"Snapshot save failed: {e}")

        logger.info(f"Saved {written} entities to Redis")
        return written

    async def load_entities(self) -> EntityStore:
        """Restore an entity store from every known entity hash."""
        if not self.client:
            raise ConnectionError("Not connected to Redis")

        store = EntityStore()
        try:
            for type_name, entity_type in ENTITY_TYPES.items():
                raw = await self.client.hgetall(self._key(type_name))
                for value in raw.values():
                    store.save(entity_from_record(entity_type, json.loads(value)))
        except RedisError as e:
            logger.error(f"Failed to load entity snapshot: {e}")
            raise DataError(f"Snapshot load failed: {e}")
        except (json.JSONDecodeError, TypeError) as e:
            raise DataError(f"Corrupt entity record: {e}")

        return store
