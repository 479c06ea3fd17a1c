"""
Configuration management for dex_ledger.

Use get_config() to access all configuration settings.

Example:
    from dex_ledger.config import get_config

    config = get_config()

    # Resolved pricing constants for the configured network
    constants = config.get_network_constants()

    # Redis settings for snapshot persistence
    redis_kwargs = config.storage.get_redis_connection_kwargs()
"""

from .base import BaseConfig, ConfigError
from .manager import ConfigManager, get_config, reload_config
from .networks import NetworkConfig, NetworkConstants
from .storage import StorageConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "NetworkConfig",
    "NetworkConstants",
    "StorageConfig",
    "ConfigManager",
    "get_config",
    "reload_config",
]
