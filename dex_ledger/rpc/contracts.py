"""
Contract reads needed by the event handlers.

Only two kinds of on-chain state are read: a pool's fee growth
accumulators and ERC20 token metadata. Calls go through eth.call()
with hand-built selectors and eth_abi decoding.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, Union

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address
from web3 import Web3
from web3.exceptions import ContractLogicError

from .errors import ContractError, ErrorHandler, NetworkError, RpcError

logger = logging.getLogger(__name__)


def _selector(signature: str) -> str:
    return "0x" + function_signature_to_4byte_selector(signature).hex()


FEE_GROWTH_GLOBAL0_SELECTOR = _selector("feeGrowthGlobal0X128()")
FEE_GROWTH_GLOBAL1_SELECTOR = _selector("feeGrowthGlobal1X128()")
SYMBOL_SELECTOR = _selector("symbol()")
NAME_SELECTOR = _selector("name()")
DECIMALS_SELECTOR = _selector("decimals()")

UNKNOWN = "unknown"


@dataclass
class CallConfig:
    """Retry configuration for contract calls."""

    max_retries: int = 3
    retry_delay: float = 1.0


@dataclass
class TokenMetadata:
    symbol: str
    name: str
    # None when the token does not expose decimals()
    decimals: Optional[int]


class PoolContractReader:
    """
    Reads pool and token state through a web3 connection.

    Example:
        reader = PoolContractReader(Web3(Web3.HTTPProvider(rpc_url)))
        fee0, fee1 = reader.fetch_fee_growth(pool_address, block_number)
    """

    def __init__(self, web3: Web3, config: Optional[CallConfig] = None):
        self.web3 = web3
        self.config = config or CallConfig()
        self.error_handler = ErrorHandler(logger)

    def _call(
        self,
        address: str,
        selector: str,
        block_identifier: Union[int, str] = "latest",
    ) -> bytes:
        try:
            return self.web3.eth.call(
                {"to": to_checksum_address(address), "data": selector},
                block_identifier=block_identifier,
            )
        except ContractLogicError as e:
            raise ContractError(f"Call {selector} on {address} reverted: {e}")

    def _retry(self, operation: Callable[[], Any], name: str) -> Any:
        """Run operation, retrying transient failures with exponential backoff."""
        for attempt in range(self.config.max_retries):
            try:
                return operation()
            except Exception as e:
                self.error_handler.log_error(
                    e, {"operation": name, "attempt": attempt + 1}
                )

                if not self.error_handler.should_retry(e, attempt, self.config.max_retries):
                    if isinstance(e, RpcError):
                        raise
                    if self.error_handler.classify_error(e) == 'contract':
                        raise ContractError(f"{name} failed: {e}") from e
                    raise NetworkError(f"{name} failed: {e}") from e

                delay = self.error_handler.get_retry_delay(
                    e, attempt, self.config.retry_delay
                )
                logger.info(
                    f"Retrying {name} in {delay}s (attempt {attempt + 1}/{self.config.max_retries})"
                )
                time.sleep(delay)

        raise NetworkError(f"{name} failed after {self.config.max_retries} attempts")

    def _decode(self, types: List[str], data: bytes, name: str) -> Tuple:
        try:
            return decode(types, data)
        except DecodingError as e:
            raise ContractError(f"Could not decode {name}: {e}")

    def fetch_fee_growth(
        self, pool_address: str, block_identifier: Union[int, str] = "latest"
    ) -> Tuple[int, int]:
        """
        Read a pool's global fee growth accumulators.

        Args:
            pool_address: Pool contract address
            block_identifier: Block to read at

        Returns:
            (feeGrowthGlobal0X128, feeGrowthGlobal1X128) as raw integers
        """
        values = []
        for selector, label in (
            (FEE_GROWTH_GLOBAL0_SELECTOR, "feeGrowthGlobal0X128"),
            (FEE_GROWTH_GLOBAL1_SELECTOR, "feeGrowthGlobal1X128"),
        ):
            raw = self._retry(
                lambda s=selector: self._call(pool_address, s, block_identifier),
                label,
            )
            values.append(self._decode(["uint256"], raw, label)[0])

        return values[0], values[1]

    def _read_text(self, address: str, selector: str, label: str) -> Optional[str]:
        """Read a string() getter, falling back to bytes32 for older tokens."""
        try:
            raw = self._retry(lambda: self._call(address, selector), label)
        except ContractError as e:
            logger.debug(f"{label} unavailable for {address}: {e}")
            return None

        try:
            return decode(["string"], raw)[0]
        except DecodingError:
            pass

        try:
            value = decode(["bytes32"], raw)[0]
        except DecodingError:
            return None
        return value.rstrip(b"\x00").decode("utf-8", errors="ignore")

    def fetch_token_metadata(self, address: str) -> TokenMetadata:
        """
        Read ERC20 symbol, name and decimals.

        Missing symbol or name become "unknown"; missing decimals stay None
        so the caller can decide to skip the token.
        """
        symbol = self._read_text(address, SYMBOL_SELECTOR, "symbol") or UNKNOWN
        name = self._read_text(address, NAME_SELECTOR, "name") or UNKNOWN

        decimals = None
        try:
            raw = self._retry(lambda: self._call(address, DECIMALS_SELECTOR), "decimals")
            decimals = self._decode(["uint8"], raw, "decimals")[0]
        except ContractError as e:
            logger.warning(f"Token {address} has no readable decimals: {e}")

        return TokenMetadata(symbol=symbol, name=name, decimals=decimals)
