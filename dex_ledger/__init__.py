"""
dex_ledger: derived-price and volume accounting for concentrated-liquidity pools.

Processes decoded pool events (PoolCreated, Initialize, Mint, Burn, Swap,
SetFeeProtocol) and keeps token, pool and protocol-wide valuations current.

Example:
    from dex_ledger.config import get_config
    from dex_ledger.core.storage import EntityStore
    from dex_ledger.mappings import PoolEventProcessor

    config = get_config()
    processor = PoolEventProcessor(EntityStore(), config.network.get_network_constants())
    processor.process(event)
"""

__version__ = "0.1.0"
