"""
Input invariants for the curated address lists.

Every address must already be in EIP-55 checksum form; the first violation
aborts the run. Overlaps between mutually exclusive tiers are only reported.
"""

import logging
from typing import Iterable, List, Mapping, Tuple

from eth_utils import is_address, to_checksum_address

from .errors import ChecksumError
from .models import EXCLUSIVE_TIER_PAIRS, TIERS, AddressListSet

logger = logging.getLogger(__name__)


def verify_addresses_checksummed(addresses: Iterable[str], network: str = None) -> None:
    """
    Raise ChecksumError for the first address that differs from its checksum form.
    """
    for address in addresses:
        if not isinstance(address, str) or not is_address(address):
            raise ChecksumError(str(address), network=network)
        checksummed = to_checksum_address(address)
        if address != checksummed:
            raise ChecksumError(address, checksummed, network)


def find_duplicates(list_a: Iterable[str], list_b: Iterable[str]) -> List[str]:
    """Addresses of list_a that also appear in list_b, in list_a order."""
    others = set(list_b)
    return [address for address in list_a if address in others]


def verify_network_inputs(lists: AddressListSet) -> List[Tuple[str, str, str]]:
    """
    Verify one network's lists.

    Returns:
        (address, tier, tier) for every overlap between exclusive tiers

    Raises:
        ChecksumError: If any address is not checksummed
    """
    for tier in TIERS:
        verify_addresses_checksummed(lists.addresses(tier), lists.network)

    overlaps = []
    for tier_a, tier_b in EXCLUSIVE_TIER_PAIRS:
        for address in find_duplicates(lists.addresses(tier_a), lists.addresses(tier_b)):
            logger.warning(f"[{lists.network}] Duplicate address: {address} ({tier_a}/{tier_b})")
            overlaps.append((address, tier_a, tier_b))
    return overlaps


def verify_inputs(lists_by_network: Mapping[str, AddressListSet]) -> List[Tuple[str, str, str]]:
    """Verify every network; checksum failures abort before any overlap is reported for later networks."""
    overlaps = []
    for network in lists_by_network:
        overlaps.extend(verify_network_inputs(lists_by_network[network]))
    return overlaps
