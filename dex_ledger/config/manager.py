"""
Configuration manager for dex_ledger.

Combines the base, network and storage configuration classes into a single
easy-to-use interface.
"""

import logging
from typing import Dict, Any, Optional
from .base import BaseConfig, ConfigError
from .networks import NetworkConfig, NetworkConstants
from .storage import StorageConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Centralized configuration manager that combines all configuration classes.

    Ensures that configurations are properly initialized and validated.
    """

    def __init__(self, environment: str = None):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, test, dev, staging, production)
        """
        self._environment = environment
        self._base_config = None
        self._network_config = None
        self._storage_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        """Initialize all configuration objects."""
        try:
            # Initialize base configuration first
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment

            self._network_config = NetworkConfig()
            self._storage_config = StorageConfig()

            logger.info(f"Configuration initialized for environment: {self.environment}")

        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def network(self) -> NetworkConfig:
        """Get network configuration."""
        return self._network_config

    @property
    def storage(self) -> StorageConfig:
        """Get storage configuration."""
        return self._storage_config

    def get_network_constants(self, network_name: Optional[str] = None) -> NetworkConstants:
        """Shortcut for the resolved constants of the configured network."""
        return self.network.get_network_constants(network_name)

    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.

        Returns:
            True if all configurations are valid

        Raises:
            ConfigError: If any configuration is invalid
        """
        try:
            constants = self.get_network_constants()

            if not constants.stable_oracle_pools:
                logger.warning(f"No stable oracle pools for {constants.name}")

            if constants.reference_token not in constants.whitelist_tokens:
                raise ConfigError(
                    f"Reference token {constants.reference_token} is not whitelisted"
                )

            if constants.minimum_native_locked < 0:
                raise ConfigError("MINIMUM_NATIVE_LOCKED must not be negative")

            logger.info("Configuration validation successful")
            return True

        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ConfigError(f"Configuration validation failed: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert all configurations to dictionary format."""
        return {
            "environment": self.environment,
            "base": self.base.to_dict() if self.base else {},
            "network": self.network.to_dict() if self.network else {},
            "storage": self.storage.to_dict() if self.storage else {},
        }

    def __repr__(self) -> str:
        """String representation of the configuration manager."""
        return f"ConfigManager(environment={self.environment}, network={self.network.NETWORK})"


# Global configuration manager instance
_config_manager = None


def get_config(environment: str = None, force_reload: bool = False) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment
        force_reload: Force reload of configuration

    Returns:
        ConfigManager instance
    """
    global _config_manager

    if _config_manager is None or force_reload:
        _config_manager = ConfigManager(environment=environment)
        _config_manager.validate_configuration()

    return _config_manager


def reload_config(environment: str = None) -> ConfigManager:
    """
    Reload the global configuration manager.

    Args:
        environment: Override environment

    Returns:
        New ConfigManager instance
    """
    return get_config(environment=environment, force_reload=True)
