"""
Base classes and interfaces for storage implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TypeVar
import logging

logger = logging.getLogger(__name__)

E = TypeVar("E")


class StorageError(Exception):
    """Base exception for storage-related errors."""
    pass


class ConnectionError(StorageError):
    """Raised when connection to storage backend fails."""
    pass


class DataError(StorageError):
    """Raised when data operations fail."""
    pass


class EntityNotFoundError(StorageError):
    """Raised when an entity that must exist is missing from the store."""

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(f"{entity_type} '{entity_id}' not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class StorageBase(ABC):
    """
    Abstract base class for persistence backends.
    All backends must implement these methods.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize storage backend with configuration.

        Args:
            config: Configuration dictionary for the storage backend
        """
        self.config = config
        self.is_connected = False

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to the storage backend."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the storage backend."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the storage backend is healthy and accessible.

        Returns:
            bool: True if healthy, False otherwise
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()


class EntityStoreInterface(ABC):
    """Interface for keyed entity access used by the event handlers."""

    @abstractmethod
    def load(self, entity_type: Type[E], entity_id: str) -> Optional[E]:
        """Return the entity or None when it does not exist."""
        pass

    @abstractmethod
    def save(self, entity: Any) -> None:
        """Insert or replace an entity."""
        pass

    @abstractmethod
    def all(self, entity_type: Type[E]) -> List[E]:
        """Return every stored entity of a type."""
        pass

    def get(self, entity_type: Type[E], entity_id: str) -> E:
        """
        Return an entity that must exist.

        Raises:
            EntityNotFoundError: If the entity is missing
        """
        entity = self.load(entity_type, entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_type.__name__, entity_id)
        return entity

    def exists(self, entity_type: Type, entity_id: str) -> bool:
        """Check whether an entity is stored."""
        return self.load(entity_type, entity_id) is not None
