"""Contract-call capability: fee growth and ERC20 metadata reads."""

from .contracts import CallConfig, PoolContractReader, TokenMetadata
from .errors import ContractError, ErrorHandler, NetworkError, RpcError

__all__ = [
    "CallConfig",
    "PoolContractReader",
    "TokenMetadata",
    "ErrorHandler",
    "RpcError",
    "NetworkError",
    "ContractError",
]
