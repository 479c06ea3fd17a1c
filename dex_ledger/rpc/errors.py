"""
Error types and retry policy for contract calls.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class RpcError(Exception):
    """Base exception for contract-call operations."""
    pass


class NetworkError(RpcError):
    """Raised when the node cannot be reached or times out."""
    pass


class ContractError(RpcError):
    """Raised when a contract call reverts or returns undecodable data."""
    pass


class ErrorHandler:
    """
    Classifies contract-call failures and decides on retries.

    Network and rate-limit failures are retried with exponential backoff;
    reverts are deterministic and never retried.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for appropriate handling.

        Args:
            error: Exception to classify

        Returns:
            One of 'rate_limit', 'network', 'contract', 'validation', 'unknown'
        """
        if isinstance(error, ContractError):
            return 'contract'
        if isinstance(error, NetworkError):
            return 'network'

        error_str = str(error).lower()

        if any(keyword in error_str for keyword in ['rate limit', 'too many requests', '429']):
            return 'rate_limit'

        if any(keyword in error_str for keyword in ['connection', 'timeout', 'timed out', 'network', 'dns']):
            return 'network'

        if any(keyword in error_str for keyword in ['revert', 'execution reverted', 'out of gas']):
            return 'contract'

        if any(keyword in error_str for keyword in ['invalid', 'bad request', '400']):
            return 'validation'

        return 'unknown'

    def should_retry(self, error: Exception, attempt: int, max_retries: int) -> bool:
        """
        Determine if an error should trigger a retry.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            max_retries: Maximum number of attempts allowed

        Returns:
            True if the call should be retried
        """
        if attempt >= max_retries - 1:
            return False

        return self.classify_error(error) in ('network', 'rate_limit', 'unknown')

    def get_retry_delay(self, error: Exception, attempt: int, base_delay: float = 1.0) -> float:
        """
        Calculate the delay before the next attempt.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            base_delay: Delay of the first retry in seconds

        Returns:
            Delay in seconds
        """
        delay = min(base_delay * 2 ** attempt, 60)

        category = self.classify_error(error)
        if category == 'rate_limit':
            return delay * 2
        if category == 'network':
            return delay
        return delay * 1.5

    def log_error(self, error: Exception, context: Dict[str, Any]) -> None:
        category = self.classify_error(error)
        message = f"{category} error in {context.get('operation', 'call')}: {error}"

        if category == 'contract':
            self.logger.error(message)
        elif category == 'rate_limit':
            self.logger.info(message)
        else:
            self.logger.warning(message)
