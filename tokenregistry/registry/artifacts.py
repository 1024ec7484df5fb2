"""
Assembly of the registry artifacts.

Per network:
- dex/registry.<network>.json: native asset followed by the listed tier
- pm/registry.<network>.json: eligible tokens (sorted) followed by the ui tier

Across networks:
- listed.tokenlist.json and vetted.tokenlist.json in the token list format
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..config.chains import NetworkConfig
from ..config.registry import RegistryConfig
from .attributes import NATIVE, AttributeDeriver
from .models import AddressListSet, NetworkData, TokenMetadata

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

DEX_INDENT = 4
PM_INDENT = 2
TOKENLIST_INDENT = 4

TOKENLIST_TIERS = ("listed", "vetted")

Artifact = Tuple[Any, int]


def day_timestamp(now: datetime) -> str:
    """Start of the UTC day of `now`, as an ISO-8601 string with milliseconds."""
    now_ms = int(now.timestamp() * 1000)
    day_ms = now_ms - now_ms % DAY_MS
    day = datetime.fromtimestamp(day_ms // 1000, tz=timezone.utc)
    return day.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class NetworkContext:
    """Everything the generator needs to emit one network's entries."""

    config: NetworkConfig
    lists: AddressListSet
    data: NetworkData
    metadata: Dict[str, TokenMetadata]
    deriver: AttributeDeriver

    @property
    def name(self) -> str:
        return self.config.name

    def tier_addresses(self, tier: str) -> List[str]:
        """Addresses exported by a token list tier."""
        if tier == "listed":
            return self.lists.addresses("listed")
        if tier == "vetted":
            return self.lists.vetted
        raise ValueError(f"Unknown token list tier: {tier}")


class ArtifactGenerator:
    """
    Builds every artifact of a run in memory.

    Field order inside entries is fixed; mapping-derived sequences are sorted,
    so identical inputs produce identical files.
    """

    def __init__(self, config: RegistryConfig, clock: Callable[[], datetime] = utc_now):
        self.config = config
        self.clock = clock
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def precision(self, context: NetworkContext, address: str) -> int:
        return context.data.precision.get(address, self.config.DEFAULT_PRECISION)

    def _metadata(self, context: NetworkContext, address: str) -> Optional[TokenMetadata]:
        metadata = context.metadata.get(address)
        if metadata is None:
            self.logger.debug(f"[{context.name}] No metadata for {address}, entry skipped")
        return metadata

    def native_entry(self, context: NetworkContext) -> Dict[str, Any]:
        network = context.config
        attributes = context.deriver.native()
        return {
            "address": NATIVE,
            "name": network.native_name,
            "symbol": network.native_symbol,
            "decimals": network.native_decimals,
            "precision": self.config.DEFAULT_PRECISION,
            "hasIcon": attributes.has_icon,
            "logoUrl": attributes.logo_url,
        }

    def dex_entry(self, context: NetworkContext, address: str, metadata: TokenMetadata) -> Dict[str, Any]:
        attributes = context.deriver.derive(address)
        entry = {
            "address": address,
            "name": metadata.name,
            "symbol": metadata.symbol,
            "decimals": metadata.decimals,
            "precision": self.precision(context, address),
            "hasIcon": attributes.has_icon,
        }
        if attributes.logo_url is not None:
            entry["logoUrl"] = attributes.logo_url
        return entry

    def pm_entry(self, context: NetworkContext, address: str, metadata: TokenMetadata) -> Dict[str, Any]:
        attributes = context.deriver.derive(address)
        entry = {
            "address": address,
            "id": context.data.coingecko_ids.get(address, ""),
            "name": metadata.name,
            "symbol": metadata.symbol,
            "decimals": metadata.decimals,
            "precision": self.precision(context, address),
        }
        if attributes.color is not None:
            entry["color"] = attributes.color
        entry["hasIcon"] = attributes.has_icon
        if attributes.logo_url is not None:
            entry["logoUrl"] = attributes.logo_url
        return entry

    def dex_registry(self, context: NetworkContext) -> Dict[str, Any]:
        tokens = {context.config.native_key: self.native_entry(context)}
        for address in context.lists.addresses("listed"):
            metadata = self._metadata(context, address)
            if metadata is not None and address not in tokens:
                tokens[address] = self.dex_entry(context, address, metadata)
        return {"tokens": tokens, "untrusted": context.lists.addresses("untrusted")}

    def pm_registry(self, context: NetworkContext) -> Dict[str, Any]:
        addresses = sorted(context.lists.addresses("eligible")) + context.lists.addresses("ui")
        tokens = {}
        for address in addresses:
            metadata = self._metadata(context, address)
            if metadata is not None and address not in tokens:
                tokens[address] = self.pm_entry(context, address, metadata)
        return {"tokens": tokens, "untrusted": context.lists.addresses("untrusted")}

    def token_list(self, tier: str, contexts: Sequence[NetworkContext]) -> Dict[str, Any]:
        """Token list export of a tier across every network."""
        tokens = {}
        for context in contexts:
            chain_id = context.config.chain_id
            for address in context.tier_addresses(tier):
                metadata = self._metadata(context, address)
                if metadata is None or (chain_id, address) in tokens:
                    continue
                token = {
                    "address": address,
                    "chainId": chain_id,
                    "name": metadata.name,
                    "symbol": metadata.symbol,
                    "decimals": metadata.decimals,
                }
                logo_url = context.deriver.logo_url(address)
                if logo_url is not None:
                    token["logoURI"] = logo_url
                tokens[(chain_id, address)] = token

        ordered = [tokens[key] for key in sorted(tokens, key=lambda k: (k[0], k[1].lower()))]
        return {
            "name": self.config.TOKENLIST_NAME,
            "timestamp": day_timestamp(self.clock()),
            "logoURI": self.config.TOKENLIST_LOGO_URI,
            "keywords": self.config.tokenlist_keywords(tier),
            "version": dict(self.config.TOKENLIST_VERSION),
            "tokens": ordered,
        }

    def generate(self, contexts: Sequence[NetworkContext]) -> Dict[str, Artifact]:
        """
        Build all artifacts.

        Returns:
            (document, indent) by output path relative to the output directory
        """
        artifacts: Dict[str, Artifact] = {}
        for context in contexts:
            artifacts[f"dex/registry.{context.name}.json"] = (self.dex_registry(context), DEX_INDENT)
            artifacts[f"pm/registry.{context.name}.json"] = (self.pm_registry(context), PM_INDENT)
        for tier in TOKENLIST_TIERS:
            artifacts[f"{tier}.tokenlist.json"] = (self.token_list(tier, contexts), TOKENLIST_INDENT)

        self.logger.info(f"Generated {len(artifacts)} artifacts for {len(contexts)} networks")
        return artifacts
