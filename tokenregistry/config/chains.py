"""
Network-specific configuration for the token registry builder.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .base import BaseConfig


@dataclass(frozen=True)
class NetworkConfig:
    """Immutable per-network settings handed to every pipeline component."""

    name: str
    chain_id: int
    rpc_url: str
    multicall_address: str
    multicall3_address: str
    native_symbol: str
    native_name: str
    native_decimals: int = 18
    color_enabled: bool = False
    community_chain: Optional[str] = None
    coingecko_platform: Optional[str] = None

    @property
    def native_key(self) -> str:
        """Key of the native asset entry in the dex registry."""
        return self.native_symbol.lower()


@dataclass
class ChainConfig(BaseConfig):
    """Chain-specific configuration for the supported networks."""

    # Networks processed by a run, in order
    ACTIVE_NETWORKS: List[str] = field(
        default_factory=lambda: BaseConfig.get_env_list("ACTIVE_NETWORKS", ["bsc", "polygon"])
    )

    # Networks with a display color palette
    COLOR_NETWORKS: List[str] = field(
        default_factory=lambda: BaseConfig.get_env_list("COLOR_NETWORKS", ["bsc"])
    )

    # Chain-specific RPC URLs
    BSC_RPC_URL: str = field(
        default_factory=lambda: BaseConfig.get_env("BSC_RPC_URL", "https://bsc-dataseed.binance.org/")
    )
    POLYGON_RPC_URL: str = field(
        default_factory=lambda: BaseConfig.get_env("POLYGON_RPC_URL", "https://polygon-rpc.com/")
    )

    # Chain IDs
    BSC_CHAIN_ID: int = 56
    POLYGON_CHAIN_ID: int = 137

    # Multicall (v1 aggregate) deployments
    BSC_MULTICALL_ADDRESS: str = "0x7B23A56572cBC04035da7852a5427066EC2C2040"
    POLYGON_MULTICALL_ADDRESS: str = "0x7B23A56572cBC04035da7852a5427066EC2C2040"

    # Multicall3 is deployed at the same address on every EVM chain
    MULTICALL3_ADDRESS: str = "0xcA11bde05977b3631167028862bE2a173976CA11"

    @property
    def supported_networks(self) -> Dict[str, NetworkConfig]:
        """Get configuration for all supported networks."""
        return {
            "bsc": NetworkConfig(
                name="bsc",
                chain_id=self.BSC_CHAIN_ID,
                rpc_url=self.BSC_RPC_URL,
                multicall_address=self.BSC_MULTICALL_ADDRESS,
                multicall3_address=self.MULTICALL3_ADDRESS,
                native_symbol="BNB",
                native_name="BNB",
                color_enabled="bsc" in self.COLOR_NETWORKS,
                community_chain="smartchain",
                coingecko_platform="binance-smart-chain",
            ),
            "polygon": NetworkConfig(
                name="polygon",
                chain_id=self.POLYGON_CHAIN_ID,
                rpc_url=self.POLYGON_RPC_URL,
                multicall_address=self.POLYGON_MULTICALL_ADDRESS,
                multicall3_address=self.MULTICALL3_ADDRESS,
                native_symbol="MATIC",
                native_name="MATIC",
                color_enabled="polygon" in self.COLOR_NETWORKS,
                community_chain="polygon",
                coingecko_platform="polygon-pos",
            ),
        }

    def get_network_config(self, network: str) -> NetworkConfig:
        """Get configuration for a specific network."""
        if network not in self.supported_networks:
            raise ValueError(f"Unsupported network: {network}")
        return self.supported_networks[network]

    @property
    def active_networks(self) -> List[NetworkConfig]:
        """Network configs for every active network, in configured order."""
        return [self.get_network_config(name) for name in self.ACTIVE_NETWORKS]
