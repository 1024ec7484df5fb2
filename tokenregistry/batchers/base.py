"""
Common pieces for batchers that read many token contracts in one eth_call.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from web3 import Web3

from .errors import ErrorHandler, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Decoded values keyed by token address."""

    success: bool
    data: Dict[str, Any]
    block_number: Optional[int] = None
    timestamp: Optional[datetime] = None
    error: Optional[str] = None
    # address -> reason, for sub-calls that failed in tolerant mode
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


@dataclass
class BatchConfig:
    # Tolerant mode reports failed sub-calls instead of failing the batch
    tolerant: bool = False


class BaseBatcher(ABC):
    """A batcher bound to one chain's Web3 client."""

    def __init__(self, web3: Web3, config: Optional[BatchConfig] = None):
        self.web3 = web3
        self.config = config or BatchConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

    @abstractmethod
    async def batch_call(
        self, addresses: List[str], block_identifier: Union[int, str] = "latest"
    ) -> BatchResult:
        """
        Read every address in a single round trip.

        Args:
            addresses: Token contract addresses
            block_identifier: Block to read at

        Returns:
            BatchResult keyed by checksummed address
        """
        pass

    def _validate_addresses(self, addresses: List[str]) -> List[str]:
        """
        Checksummed addresses with repeats removed, in first-seen order.

        Raises:
            ValidationError: If any entry is not an address
        """
        validated = {}
        for addr in addresses:
            try:
                checksummed = Web3.to_checksum_address(addr)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid address {addr}: {e}")
            validated.setdefault(checksummed, None)
        return list(validated)
