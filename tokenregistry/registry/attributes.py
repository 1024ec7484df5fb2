"""
Derived display attributes: palette color and icon URL.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Sequence

from ..config.chains import NetworkConfig
from .models import DerivedAttributes, NetworkData

logger = logging.getLogger(__name__)

NATIVE = "native"


def compute_color(address: str, palette: Sequence[str]) -> Optional[str]:
    """
    Pick a palette color from the hex digits of an address.

    The digit values are summed (the `x` of the prefix is skipped) and the sum
    indexes the palette modulo its length.
    """
    if not palette:
        return None
    total = sum(int(char, 16) for char in address if char not in "xX")
    return palette[total % len(palette)]


@dataclass(frozen=True)
class IconSources:
    """Addresses with an icon in each source, for one network."""

    local: FrozenSet[str] = field(default_factory=frozenset)
    community: FrozenSet[str] = field(default_factory=frozenset)


class AttributeDeriver:
    """
    Derives color and icon attributes for the tokens of one network.

    Icon precedence: native asset, local asset, community allowlist, none.
    """

    def __init__(
        self,
        network: NetworkConfig,
        data: NetworkData,
        icons: IconSources,
        assets_base_url: str,
        community_base_url: str,
    ):
        self.network = network
        self.data = data
        self.icons = icons
        self.assets_base_url = assets_base_url.rstrip("/")
        self.community_base_url = community_base_url.rstrip("/")

    def color(self, address: str) -> Optional[str]:
        if not self.network.color_enabled:
            return None
        override = self.data.color_overrides.get(address)
        if override:
            return override
        return compute_color(address, self.data.palette)

    def local_logo_url(self, address: str) -> str:
        return f"{self.assets_base_url}/assets/{self.network.chain_id}/{address}.png"

    def community_logo_url(self, address: str) -> str:
        return f"{self.community_base_url}/{self.network.community_chain}/assets/{address}/logo.png"

    def logo_url(self, address: str) -> Optional[str]:
        if address == NATIVE:
            return self.local_logo_url(NATIVE)
        if address in self.icons.local:
            return self.local_logo_url(address)
        if address in self.icons.community and self.network.community_chain:
            return self.community_logo_url(address)
        return None

    def derive(self, address: str) -> DerivedAttributes:
        logo_url = self.logo_url(address)
        return DerivedAttributes(
            color=self.color(address),
            logo_url=logo_url,
            has_icon=logo_url is not None,
        )

    def native(self) -> DerivedAttributes:
        return DerivedAttributes(
            color=None,
            logo_url=self.local_logo_url(NATIVE),
            has_icon=True,
        )
