"""
In-memory entity store.

Entities are kept by reference, so an entity returned by load() and mutated
in place is already visible to later loads; save() is still called after
every mutation to keep handlers independent of that detail.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from ..entities import ENTITY_TYPES, entity_from_record, entity_to_record
from .base import DataError, E, EntityStoreInterface

logger = logging.getLogger(__name__)


class EntityStore(EntityStoreInterface):
    """Dictionary-backed entity store keyed by entity type name and id."""

    def __init__(self):
        self._entities: Dict[str, Dict[str, Any]] = {}

    def load(self, entity_type: Type[E], entity_id: str) -> Optional[E]:
        return self._entities.get(entity_type.__name__, {}).get(entity_id)

    def save(self, entity: Any) -> None:
        self._entities.setdefault(type(entity).__name__, {})[entity.id] = entity

    def all(self, entity_type: Type[E]) -> List[E]:
        return list(self._entities.get(entity_type.__name__, {}).values())

    def count(self, entity_type: Type) -> int:
        return len(self._entities.get(entity_type.__name__, {}))

    def records(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Snapshot the store as JSON-safe records grouped by entity type.

        Returns:
            Mapping of entity type name to list of records
        """
        return {
            type_name: [entity_to_record(entity) for entity in entities.values()]
            for type_name, entities in self._entities.items()
        }

    @classmethod
    def from_records(cls, records: Dict[str, List[Dict[str, Any]]]) -> "EntityStore":
        """
        Rebuild a store from a records() snapshot.

        Raises:
            DataError: If the snapshot names an unknown entity type
        """
        store = cls()
        for type_name, items in records.items():
            entity_type = ENTITY_TYPES.get(type_name)
            if entity_type is None:
                raise DataError(f"Unknown entity type in snapshot: {type_name}")
            for record in items:
                store.save(entity_from_record(entity_type, record))

        logger.debug(f"Restored {sum(len(v) for v in records.values())} entities")
        return store
