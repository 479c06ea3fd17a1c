"""
JSON file storage for entity snapshots.
"""

import json
import logging
import gzip
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .base import StorageBase, DataError
from .memory import EntityStore

logger = logging.getLogger(__name__)


class JsonStorage(StorageBase):
    """
    JSON file storage for persisting the entity store between runs.

    Features:
    - Save/load JSON files
    - Compression support
    - Atomic writes
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize JSON storage.

        Args:
            config: Configuration with keys:
                - base_path: Base directory for JSON storage
                - compress: Whether to compress files (default: False)
                - pretty: Whether to pretty-print JSON (default: False)
        """
        super().__init__(config)
        self.base_path = Path(config.get('base_path', './data/snapshots'))
        self.compress = config.get('compress', False)
        self.pretty = config.get('pretty', False)

    async def connect(self) -> None:
        """Ensure base directory exists."""
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.is_connected = True
        logger.info(f"JSON storage initialized at {self.base_path}")

    async def disconnect(self) -> None:
        """No-op for JSON storage."""
        self.is_connected = False

    async def health_check(self) -> bool:
        """Check if base directory is accessible."""
        return self.base_path.exists() and self.base_path.is_dir()

    def _get_full_path(self, filename: str) -> Path:
        """
        Get full path for a file.

        Args:
            filename: Relative filename

        Returns:
            Full path object
        """
        if not filename.endswith('.json') and not filename.endswith('.json.gz'):
            filename = f"{filename}.json"

        if self.compress and not filename.endswith('.gz'):
            filename = f"{filename}.gz"

        return self.base_path / filename

    def save(self, filename: str, data: Any) -> bool:
        """
        Save data to a JSON file.

        Args:
            filename: File name (relative to base_path)
            data: Data to save

        Returns:
            bool: True if successful
        """
        filepath = self._get_full_path(filename)
        indent = 2 if self.pretty else None
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)

            # Atomic write with temporary file
            temp_path = filepath.with_suffix('.tmp')

            if self.compress:
                with gzip.open(temp_path, 'wt', encoding='utf-8') as f:
                    json.dump(data, f, indent=indent)
            else:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=indent)

            temp_path.replace(filepath)

            logger.info(f"Saved data to {filepath}")
            return True

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save JSON file {filename}: {e}")
            raise DataError(f"JSON save failed: {e}")

    def load(self, filename: str) -> Optional[Any]:
        """
        Load data from a JSON file.

        Args:
            filename: File name (relative to base_path)

        Returns:
            Loaded data or None if file doesn't exist
        """
        filepath = self._get_full_path(filename)
        if not filepath.exists():
            return None

        try:
            if filepath.suffix == '.gz':
                with gzip.open(filepath, 'rt', encoding='utf-8') as f:
                    data = json.load(f)
            else:
                with open(filepath, 'r', encoding='utf-8') as f:
                    data = json.load(f)

            logger.info(f"Loaded data from {filepath}")
            return data

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load JSON file {filename}: {e}")
            raise DataError(f"JSON load failed: {e}")

    # Entity snapshot methods

    def save_entities(self, store: EntityStore, name: str = "entities") -> bool:
        """
        Write a snapshot of every entity in the store.

        Args:
            store: Entity store to snapshot
            name: Snapshot file name

        Returns:
            bool: True if successful
        """
        data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'entities': store.records(),
        }
        return self.save(name, data)

    def load_entities(self, name: str = "entities") -> Optional[EntityStore]:
        """
        Restore an entity store from a snapshot.

        Args:
            name: Snapshot file name

        Returns:
            Restored EntityStore or None if no snapshot exists
        """
        data = self.load(name)
        if data is None:
            return None
        if 'entities' not in data:
            raise DataError(f"Snapshot {name} has no entities section")
        return EntityStore.from_records(data['entities'])
