"""
Network-specific configuration for dex_ledger.

Each supported network defines the addresses and thresholds the pricing and
volume rules depend on: the reference (wrapped native) token, the stable
oracle pools used to price it in USD, and the whitelist/stable/untracked sets.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .base import BaseConfig


def _normalize(addresses: Iterable[str]) -> FrozenSet[str]:
    return frozenset(address.lower() for address in addresses)


@dataclass(frozen=True)
class NetworkConstants:
    """
    Resolved constants for one network.

    Attributes:
        name: Network name
        factory_address: Pool factory address, also the Factory entity id
        reference_token: Wrapped native token used as the pricing intermediate
        stable_oracle_pools: Ordered pools pairing the reference token with stables
        stable_coins: Tokens priced at exactly 1 USD
        untracked_tokens: Tokens that are never priced
        untracked_pairs: Pools whose volume is never tracked
        whitelist_tokens: Tokens trusted for price discovery and tracked volume
        hot_fix_pools: Pools whose swaps are ignored entirely
        minimum_native_locked: Minimum reference-currency value a pool side must
            hold to anchor a token price
        stable_oracle_min_liquidity: Minimum stable balance for a USD oracle pool
        minimum_liquidity_threshold_usd: Reserve gate for tracked volume on
            pools with few deposits
    """

    name: str
    factory_address: str
    reference_token: str
    stable_oracle_pools: Tuple[str, ...] = ()
    stable_coins: FrozenSet[str] = frozenset()
    untracked_tokens: FrozenSet[str] = frozenset()
    untracked_pairs: FrozenSet[str] = frozenset()
    whitelist_tokens: FrozenSet[str] = frozenset()
    hot_fix_pools: FrozenSet[str] = frozenset()
    minimum_native_locked: Decimal = Decimal("5")
    stable_oracle_min_liquidity: Decimal = Decimal("10000")
    minimum_liquidity_threshold_usd: Decimal = Decimal("100000")

    @classmethod
    def build(
        cls,
        name: str,
        factory_address: str,
        reference_token: str,
        stable_oracle_pools: Iterable[str] = (),
        stable_coins: Iterable[str] = (),
        untracked_tokens: Iterable[str] = (),
        untracked_pairs: Iterable[str] = (),
        whitelist_tokens: Iterable[str] = (),
        hot_fix_pools: Iterable[str] = (),
        **thresholds: Decimal,
    ) -> "NetworkConstants":
        """Build constants from plain address lists, lower-casing every id."""
        return cls(
            name=name,
            factory_address=factory_address.lower(),
            reference_token=reference_token.lower(),
            stable_oracle_pools=tuple(pool.lower() for pool in stable_oracle_pools),
            stable_coins=_normalize(stable_coins),
            untracked_tokens=_normalize(untracked_tokens),
            untracked_pairs=_normalize(untracked_pairs),
            whitelist_tokens=_normalize(whitelist_tokens),
            hot_fix_pools=_normalize(hot_fix_pools),
            **thresholds,
        )

    def is_whitelisted(self, token_id: str) -> bool:
        return token_id in self.whitelist_tokens


@dataclass
class NetworkConfig(BaseConfig):
    """Network selection, RPC endpoint and pricing thresholds."""

    NETWORK: str = BaseConfig.get_env("NETWORK", "ethereum")
    RPC_URL: str = BaseConfig.get_env("RPC_URL", "http://localhost:8545")

    # Pricing thresholds
    MINIMUM_NATIVE_LOCKED: Decimal = BaseConfig.get_env_decimal("MINIMUM_NATIVE_LOCKED", "5")
    STABLE_ORACLE_MIN_LIQUIDITY: Decimal = BaseConfig.get_env_decimal(
        "STABLE_ORACLE_MIN_LIQUIDITY", "10000"
    )
    MINIMUM_LIQUIDITY_THRESHOLD_USD: Decimal = BaseConfig.get_env_decimal(
        "MINIMUM_LIQUIDITY_THRESHOLD_USD", "100000"
    )

    # Extra whitelist entries on top of the network defaults
    EXTRA_WHITELIST_TOKENS: List[str] = field(
        default_factory=lambda: BaseConfig.get_env_list("EXTRA_WHITELIST_TOKENS")
    )

    @property
    def supported_networks(self) -> Dict[str, Dict]:
        """Get raw constants for all supported networks."""
        return {
            "ethereum": {
                "factory_address": "0x1F98431c8aD98523631AE4a59f267346ea31F984",
                "reference_token": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",  # WETH
                "stable_oracle_pools": [
                    "0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640",  # USDC/WETH 0.05%
                    "0x8ad599c3A0ff1De082011EFDDc58f1908eb6e6D8",  # USDC/WETH 0.3%
                ],
                "stable_coins": [
                    "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",  # USDC
                    "0xdAC17F958D2ee523a2206206994597C13D831ec7",  # USDT
                    "0x6B175474E89094C44Da98b954EedeAC495271d0F",  # DAI
                ],
                "untracked_tokens": [],
                "untracked_pairs": [],
                "whitelist_tokens": [
                    "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",  # WETH
                    "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",  # USDC
                    "0xdAC17F958D2ee523a2206206994597C13D831ec7",  # USDT
                    "0x6B175474E89094C44Da98b954EedeAC495271d0F",  # DAI
                    "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599",  # WBTC
                ],
                "hot_fix_pools": ["0x9663f2ca0454accad3e094448ea6f77443880454"],
            },
            "polygon": {
                "factory_address": "0x1F98431c8aD98523631AE4a59f267346ea31F984",
                "reference_token": "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",  # WETH
                "stable_oracle_pools": [
                    "0x0e44cEb592AcFC5D3F09D996302eB4C499ff8c10",  # USDC/WETH 0.3%
                ],
                "stable_coins": [
                    "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",  # USDC
                ],
                "untracked_tokens": [],
                "untracked_pairs": [],
                "whitelist_tokens": [
                    "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",  # WETH
                    "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",  # WMATIC
                    "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",  # USDC
                    "0x8f3Cf7ad23Cd3CaDbD9735AFf958023239c6A063",  # DAI
                ],
                "hot_fix_pools": ["0x9663f2ca0454accad3e094448ea6f77443880454"],
            },
        }

    def get_network_config(self, network_name: str) -> Dict:
        """Get raw configuration for a specific network."""
        if network_name not in self.supported_networks:
            raise ValueError(f"Unsupported network: {network_name}")
        return self.supported_networks[network_name]

    def get_network_constants(self, network_name: Optional[str] = None) -> NetworkConstants:
        """
        Resolve the constants for a network, applying environment overrides.

        Args:
            network_name: Network to resolve (defaults to NETWORK)

        Returns:
            NetworkConstants with lower-cased address sets
        """
        name = network_name or self.NETWORK
        raw = self.get_network_config(name)
        return NetworkConstants.build(
            name=name,
            factory_address=raw["factory_address"],
            reference_token=raw["reference_token"],
            stable_oracle_pools=raw["stable_oracle_pools"],
            stable_coins=raw["stable_coins"],
            untracked_tokens=raw["untracked_tokens"],
            untracked_pairs=raw["untracked_pairs"],
            whitelist_tokens=list(raw["whitelist_tokens"]) + self.EXTRA_WHITELIST_TOKENS,
            hot_fix_pools=raw["hot_fix_pools"],
            minimum_native_locked=self.MINIMUM_NATIVE_LOCKED,
            stable_oracle_min_liquidity=self.STABLE_ORACLE_MIN_LIQUIDITY,
            minimum_liquidity_threshold_usd=self.MINIMUM_LIQUIDITY_THRESHOLD_USD,
        )
