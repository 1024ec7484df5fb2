"""
Token metadata resolution.

Combines one batched on-chain read with the manual metadata overrides of a
network. An override always wins for the fields it carries.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from eth_utils import to_checksum_address

from ..batchers import TokenMetadataBatcher
from .errors import MetadataError, RegistryError
from .models import TokenMetadata

logger = logging.getLogger(__name__)


def normalize_overrides(overrides: Mapping[str, Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Key overrides by checksummed address."""
    normalized = {}
    for address, values in overrides.items():
        try:
            key = to_checksum_address(address)
        except ValueError as e:
            raise RegistryError(f"Invalid address in metadata overrides: {address}") from e
        if not isinstance(values, Mapping):
            raise RegistryError(f"Metadata override for {address} must be an object")
        normalized[key] = dict(values)
    return normalized


def is_complete(override: Optional[Mapping[str, Any]]) -> bool:
    return bool(override) and all(name in override for name in TokenMetadata.FIELDS)


class MetadataResolver:
    """
    Resolves decimals/symbol/name for the merged address set of one network.

    Addresses whose override carries every field are never requested on chain.
    The remaining addresses are fetched with a single multicall request.
    """

    def __init__(self, batcher: TokenMetadataBatcher, network: str):
        self.batcher = batcher
        self.network = network
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def resolve(
        self,
        addresses: Iterable[str],
        overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> Dict[str, TokenMetadata]:
        """
        Resolve metadata for every address.

        Args:
            addresses: Checksummed addresses; repeats are collapsed
            overrides: Manual metadata keyed by address

        Returns:
            TokenMetadata by address, in first-seen order

        Raises:
            MetadataError: If the batched call fails
        """
        overrides = normalize_overrides(overrides or {})
        unique = list(dict.fromkeys(addresses))
        if not unique:
            return {}

        to_fetch = [address for address in unique if not is_complete(overrides.get(address))]
        self.logger.info(
            f"[{self.network}] Resolving {len(unique)} tokens "
            f"({len(unique) - len(to_fetch)} fully overridden)"
        )

        onchain: Dict[str, Dict[str, Any]] = {}
        if to_fetch:
            result = await self.batcher.batch_call(to_fetch)
            if not result.success:
                raise MetadataError(f"[{self.network}] Metadata multicall failed: {result.error}")
            onchain = result.data
            for address, reason in result.failed.items():
                self.logger.warning(f"[{self.network}] No on-chain metadata for {address}: {reason}")

        resolved = {}
        for address in unique:
            values = dict(onchain.get(address, {}))
            values.update(overrides.get(address, {}))
            if not all(name in values for name in TokenMetadata.FIELDS):
                self.logger.warning(f"[{self.network}] Dropping {address}: metadata unavailable")
                continue
            resolved[address] = TokenMetadata.from_dict(values, address)

        return resolved

