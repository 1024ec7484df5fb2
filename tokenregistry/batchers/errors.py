"""
Exceptions raised while batching token reads through Multicall.

A failed aggregate call is never retried; any BatchError ends the run.
"""

from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class BatchError(Exception):
    """Base exception for batch operations."""
    pass


class NetworkError(BatchError):
    """RPC endpoint unreachable, timed out or rate limited."""
    pass


class ContractError(BatchError):
    """The aggregate call itself reverted."""
    pass


class ValidationError(BatchError):
    """Malformed call input, such as a non-address target."""
    pass


class DecodeError(BatchError):
    """A sub-call returned data that is not a valid ABI value."""

    def __init__(self, message: str, address: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.address = address
        self.field = field


# category -> substrings of a provider error message
ERROR_KEYWORDS = (
    ("rate_limit", ("rate limit", "too many requests", "429")),
    ("network", ("connection", "timeout", "timed out", "network", "dns")),
    ("contract", ("revert", "out of gas")),
    ("validation", ("invalid", "bad request", "400")),
)

CATEGORY_ERRORS = {
    "rate_limit": NetworkError,
    "network": NetworkError,
    "contract": ContractError,
    "validation": ValidationError,
}


class ErrorHandler:
    """Maps raw web3 provider exceptions onto the BatchError hierarchy."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """Category of a provider error, judged from its message."""
        message = str(error).lower()
        for category, keywords in ERROR_KEYWORDS:
            if any(keyword in message for keyword in keywords):
                return category
        return "unknown"

    def wrap_error(self, error: Exception, message: str) -> BatchError:
        """BatchError subclass for a provider exception; BatchErrors pass through."""
        if isinstance(error, BatchError):
            return error
        error_class = CATEGORY_ERRORS.get(self.classify_error(error), BatchError)
        return error_class(f"{message}: {error}")

    def log_error(self, error: Exception, context: Dict[str, Any]):
        category = self.classify_error(error)
        details = ", ".join(f"{key}={value}" for key, value in context.items())
        self.logger.error(
            f"Multicall {category} error ({details}): {type(error).__name__}: {error}"
        )
