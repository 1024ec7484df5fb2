"""Data types shared by the registry pipeline."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import RegistryError

# Curation tiers, in the order lists are verified and merged
TIERS = ("eligible", "listed", "ui", "untrusted")
MERGED_TIERS = ("eligible", "listed", "ui")

# Tier pairs that must not share addresses
EXCLUSIVE_TIER_PAIRS = (("eligible", "ui"), ("ui", "untrusted"), ("listed", "untrusted"))


@dataclass
class AddressListSet:
    """The four curated address lists of one network."""

    network: str
    eligible: Dict[str, Any] = field(default_factory=dict)
    listed: List[str] = field(default_factory=list)
    ui: List[str] = field(default_factory=list)
    untrusted: List[str] = field(default_factory=list)

    def addresses(self, tier: str) -> List[str]:
        """Addresses of a tier in stored order (eligible: mapping keys)."""
        if tier not in TIERS:
            raise ValueError(f"Unknown tier: {tier}")
        return list(getattr(self, tier))

    @property
    def vetted(self) -> List[str]:
        """Addresses shown in the UI: eligible keys followed by the ui tier."""
        return self.addresses("eligible") + self.addresses("ui")


@dataclass(frozen=True)
class TokenMetadata:
    """On-chain ERC-20 metadata, possibly replaced by a manual override."""

    decimals: int
    symbol: str
    name: str

    FIELDS = ("decimals", "symbol", "name")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], address: str = "") -> "TokenMetadata":
        missing = [name for name in cls.FIELDS if name not in data]
        if missing:
            raise RegistryError(f"Metadata for {address} is missing {', '.join(missing)}")

        decimals = data["decimals"]
        if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
            raise RegistryError(f"Invalid decimals for {address}: {decimals!r}")
        if not isinstance(data["symbol"], str) or not isinstance(data["name"], str):
            raise RegistryError(f"Symbol and name for {address} must be strings")

        return cls(decimals=decimals, symbol=data["symbol"], name=data["name"])


@dataclass(frozen=True)
class DerivedAttributes:
    """Display attributes derived from an address and the static asset data."""

    color: Optional[str]
    logo_url: Optional[str]
    has_icon: bool


@dataclass(frozen=True)
class NetworkData:
    """Static per-network tables loaded from the data directory."""

    metadata_overrides: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    color_overrides: Mapping[str, str] = field(default_factory=dict)
    palette: Tuple[str, ...] = ()
    precision: Mapping[str, int] = field(default_factory=dict)
    coingecko_ids: Mapping[str, str] = field(default_factory=dict)


@dataclass
class RegistryData:
    """All static data tables, keyed by network."""

    metadata_overrides: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)
    color_overrides: Dict[str, Dict[str, str]] = field(default_factory=dict)
    palette: List[str] = field(default_factory=list)
    precision: Dict[str, Dict[str, int]] = field(default_factory=dict)
    coingecko_ids: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def for_network(self, network: str) -> NetworkData:
        return NetworkData(
            metadata_overrides=self.metadata_overrides.get(network, {}),
            color_overrides=self.color_overrides.get(network, {}),
            palette=tuple(self.palette),
            precision=self.precision.get(network, {}),
            coingecko_ids=self.coingecko_ids.get(network, {}),
        )
