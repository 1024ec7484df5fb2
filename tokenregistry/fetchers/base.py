"""
Shared types for fetchers that read off-chain registry sources.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """An external source could not be read or parsed."""
    pass


@dataclass
class FetchResult:
    success: bool
    data: Any = None
    # URL or path the data came from
    source: Optional[str] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class BaseFetcher(ABC):
    """Reads one external source for one network."""

    def __init__(self, network: str, timeout: float = 30.0):
        """
        Args:
            network: Network name (e.g., 'bsc')
            timeout: Total request timeout in seconds
        """
        self.network = network
        self.timeout = timeout
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    async def fetch(self) -> FetchResult:
        """
        Raises:
            FetchError: If the source cannot be read
        """
        pass
