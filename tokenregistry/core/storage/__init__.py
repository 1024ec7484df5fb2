"""
Storage layer for the registry builder.

Registry inputs (curated lists, static data tables) are read and generated
artifacts are written as JSON files.

Usage:
    from tokenregistry.core.storage import JsonStorage

    storage = JsonStorage({"base_path": "generated"})
    storage.save_all([("dex/registry.bsc", registry, 4)])
"""

from .base import DataError, StorageBase, StorageError
from .json_storage import JsonStorage, to_json

__all__ = [
    "StorageBase",
    "StorageError",
    "DataError",
    "JsonStorage",
    "to_json",
]
