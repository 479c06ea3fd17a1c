"""
Test suite for the configuration system.

Tests environment helpers, network constants and the configuration manager.
"""

from decimal import Decimal

import pytest

from dex_ledger.config import (
    BaseConfig,
    ConfigError,
    ConfigManager,
    NetworkConfig,
    NetworkConstants,
    StorageConfig,
    get_config,
)

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"


class TestEnvironmentHelpers:
    """Test BaseConfig.get_env* helpers."""

    def test_get_env_decimal_is_exact(self, monkeypatch):
        monkeypatch.setenv("TEST_THRESHOLD", "0.1")
        assert BaseConfig.get_env_decimal("TEST_THRESHOLD") == Decimal("0.1")

    def test_get_env_decimal_invalid(self, monkeypatch):
        monkeypatch.setenv("TEST_THRESHOLD", "lots")
        with pytest.raises(ConfigError, match="must be a decimal"):
            BaseConfig.get_env_decimal("TEST_THRESHOLD")

    def test_get_env_required(self, monkeypatch):
        monkeypatch.delenv("TEST_MISSING", raising=False)
        with pytest.raises(ConfigError, match="TEST_MISSING"):
            BaseConfig.get_env("TEST_MISSING", required=True)

    def test_get_env_int_invalid(self, monkeypatch):
        monkeypatch.setenv("TEST_PORT", "abc")
        with pytest.raises(ConfigError):
            BaseConfig.get_env_int("TEST_PORT")

    def test_get_env_list(self, monkeypatch):
        monkeypatch.setenv("TEST_LIST", "0xA, 0xB,,")
        assert BaseConfig.get_env_list("TEST_LIST") == ["0xA", "0xB"]

    def test_get_env_bool(self, monkeypatch):
        monkeypatch.setenv("TEST_FLAG", "yes")
        assert BaseConfig.get_env_bool("TEST_FLAG") is True

    def test_invalid_environment(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid environment"):
            BaseConfig(DATA_DIR=tmp_path, ENVIRONMENT="moon")


class TestNetworkConfig:
    """Test per-network constants."""

    @pytest.fixture
    def network_config(self, tmp_path):
        return NetworkConfig(DATA_DIR=tmp_path)

    @pytest.mark.parametrize("network", ["ethereum", "polygon"])
    def test_constants_are_lower_case(self, network_config, network):
        constants = network_config.get_network_constants(network)

        assert constants.name == network
        assert constants.reference_token == constants.reference_token.lower()
        assert constants.reference_token in constants.whitelist_tokens
        assert all(pool == pool.lower() for pool in constants.stable_oracle_pools)
        assert "0x9663f2ca0454accad3e094448ea6f77443880454" in constants.hot_fix_pools

    def test_ethereum_addresses(self, network_config):
        constants = network_config.get_network_constants("ethereum")

        assert constants.reference_token == WETH
        assert constants.factory_address == "0x1f98431c8ad98523631ae4a59f267346ea31f984"
        assert "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48" in constants.stable_coins

    def test_extra_whitelist_tokens(self, tmp_path):
        config = NetworkConfig(DATA_DIR=tmp_path, EXTRA_WHITELIST_TOKENS=["0xABCDEF"])

        assert "0xabcdef" in config.get_network_constants("ethereum").whitelist_tokens

    def test_threshold_overrides(self, tmp_path):
        config = NetworkConfig(DATA_DIR=tmp_path, MINIMUM_NATIVE_LOCKED=Decimal("60"))

        assert config.get_network_constants("ethereum").minimum_native_locked == Decimal("60")

    def test_unsupported_network(self, network_config):
        with pytest.raises(ValueError, match="Unsupported network"):
            network_config.get_network_config("solana")

    def test_constants_defaults(self):
        constants = NetworkConstants.build(
            name="x", factory_address="0xF", reference_token="0xAB",
            whitelist_tokens=["0xAB"],
        )

        assert constants.minimum_native_locked == Decimal("5")
        assert constants.stable_oracle_min_liquidity == Decimal("10000")
        assert constants.minimum_liquidity_threshold_usd == Decimal("100000")
        assert constants.is_whitelisted("0xab")
        assert not constants.is_whitelisted("0xAB")


class TestStorageConfig:

    def test_redis_kwargs_without_password(self, tmp_path):
        config = StorageConfig(DATA_DIR=tmp_path, REDIS_PASSWORD=None)

        kwargs = config.get_redis_connection_kwargs()

        assert "password" not in kwargs
        assert kwargs["key_prefix"] == config.REDIS_KEY_PREFIX

    def test_redis_kwargs_strip_password(self, tmp_path):
        config = StorageConfig(DATA_DIR=tmp_path, REDIS_PASSWORD=" secret ")

        assert config.get_redis_connection_kwargs()["password"] == "secret"

    def test_json_kwargs(self, tmp_path):
        config = StorageConfig(DATA_DIR=tmp_path, SNAPSHOT_COMPRESS=True)

        assert config.get_json_storage_kwargs() == {
            "base_path": str(tmp_path / config.SNAPSHOT_SUBDIR),
            "compress": True,
        }


@pytest.fixture(scope="module")
def config():
    """Provide configuration instance for tests."""
    return get_config()


class TestConfigManager:
    """Test the combined configuration manager."""

    def test_config_loads_successfully(self, config):
        assert config is not None
        assert config.environment in ["local", "test", "dev", "staging", "production"]
        assert get_config() is config

    def test_validate_configuration(self, config):
        assert config.validate_configuration() is True

    def test_environment_override(self):
        manager = ConfigManager(environment="test")
        assert manager.environment == "test"
        assert "ConfigManager(environment=test" in repr(manager)

    def test_unlisted_reference_token_rejected(self, monkeypatch):
        manager = ConfigManager()
        monkeypatch.setattr(
            manager.network,
            "get_network_constants",
            lambda network_name=None: NetworkConstants.build(
                name="broken", factory_address="0x1", reference_token=WETH
            ),
        )

        with pytest.raises(ConfigError, match="not whitelisted"):
            manager.validate_configuration()

    def test_to_dict(self, config):
        data = config.to_dict()
        assert set(data) == {"environment", "base", "network", "storage"}
