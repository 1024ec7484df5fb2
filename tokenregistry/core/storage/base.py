"""
Storage interface for registry inputs and generated artifacts.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base exception for storage-related errors."""
    pass


class DataError(StorageError):
    """A document is missing, unreadable or cannot be written."""
    pass


class StorageBase(ABC):
    """Named documents under a backend-specific root."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    @abstractmethod
    def load(self, name: str) -> Optional[Any]:
        pass

    @abstractmethod
    def save(self, name: str, data: Any, indent: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """True when the storage root is reachable."""
        pass
