"""
List merging for the curated address tiers.
"""

import logging
from typing import Dict, List

from .models import MERGED_TIERS, AddressListSet

logger = logging.getLogger(__name__)


def merge_token_lists(lists: AddressListSet) -> List[str]:
    """
    Merge the eligible, listed and ui tiers into one working sequence.

    Tiers are visited in a fixed order and each contributes its addresses in
    stored order. Addresses present in several tiers appear once per tier;
    untrusted addresses are never part of the working set.
    """
    merged = []
    for tier in MERGED_TIERS:
        merged.extend(lists.addresses(tier))

    logger.debug(f"[{lists.network}] Merged {len(merged)} addresses from {', '.join(MERGED_TIERS)}")
    return merged


def tiers_by_address(lists: AddressListSet) -> Dict[str, List[str]]:
    """Map each merged address to the tiers it appears in."""
    sources: Dict[str, List[str]] = {}
    for tier in MERGED_TIERS:
        for address in lists.addresses(tier):
            if address not in sources:
                sources[address] = []
            if tier not in sources[address]:
                sources[address].append(tier)
    return sources
