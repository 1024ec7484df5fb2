"""
Token registry assembly.

Merges the curated address tiers, verifies them, resolves on-chain metadata
and emits the dex/pm registries and token lists.
"""

from .errors import ChecksumError, MetadataError, RegistryError
from .models import AddressListSet, DerivedAttributes, NetworkData, RegistryData, TokenMetadata

__all__ = [
    'ChecksumError',
    'MetadataError',
    'RegistryError',
    'AddressListSet',
    'DerivedAttributes',
    'NetworkData',
    'RegistryData',
    'TokenMetadata',
]
