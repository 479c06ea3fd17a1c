"""
Entity storage configuration for dex_ledger.
"""

from dataclasses import dataclass
from typing import Optional

from .base import BaseConfig


@dataclass
class StorageConfig(BaseConfig):
    """Redis and JSON snapshot settings for the entity store."""

    # Redis Configuration
    REDIS_HOST: str = BaseConfig.get_env("REDIS_HOST", "localhost")
    REDIS_PORT: int = BaseConfig.get_env_int("REDIS_PORT", 6379)
    REDIS_PASSWORD: Optional[str] = BaseConfig.get_env("REDIS_PASSWORD") or None
    REDIS_DB: int = BaseConfig.get_env_int("REDIS_DB", 0)
    REDIS_KEY_PREFIX: str = BaseConfig.get_env("REDIS_KEY_PREFIX", "dex_ledger")
    CONNECTION_TIMEOUT: int = BaseConfig.get_env_int("CONNECTION_TIMEOUT", 30)

    # JSON snapshots
    SNAPSHOT_SUBDIR: str = BaseConfig.get_env("SNAPSHOT_SUBDIR", "snapshots")
    SNAPSHOT_COMPRESS: bool = BaseConfig.get_env_bool("SNAPSHOT_COMPRESS", False)

    @property
    def snapshot_dir(self) -> str:
        """Directory holding JSON entity snapshots."""
        return str(self.DATA_DIR / self.SNAPSHOT_SUBDIR)

    def get_redis_connection_kwargs(self) -> dict:
        """Get Redis connection parameters."""
        kwargs = {
            "host": self.REDIS_HOST,
            "port": self.REDIS_PORT,
            "db": self.REDIS_DB,
            "decode_responses": True,
            "socket_timeout": self.CONNECTION_TIMEOUT,
            "key_prefix": self.REDIS_KEY_PREFIX,
        }

        # Only add password if it's actually set and not empty/whitespace
        if self.REDIS_PASSWORD and self.REDIS_PASSWORD.strip():
            kwargs["password"] = self.REDIS_PASSWORD.strip()

        return kwargs

    def get_json_storage_kwargs(self) -> dict:
        """Get JsonStorage parameters."""
        return {
            "base_path": self.snapshot_dir,
            "compress": self.SNAPSHOT_COMPRESS,
        }
