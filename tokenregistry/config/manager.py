"""
Configuration manager for the token registry builder.

Bundles the base, chain and registry settings of one run. Command line
options are applied to the individual sections before
validate_configuration() is called.
"""

import logging
from typing import Dict, Any, List, Optional

from .base import BaseConfig, ConfigError
from .chains import ChainConfig, NetworkConfig
from .registry import RegistryConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Holds every configuration section for a registry build."""

    def __init__(self, environment: Optional[str] = None):
        """
        Args:
            environment: Override ENVIRONMENT (local, dev, ci, production)
        """
        self._environment = environment
        self._base_config = None
        self._chain_config = None
        self._registry_config = None
        self._load_sections()

    def _load_sections(self):
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment
            self._chain_config = ChainConfig()
            self._registry_config = RegistryConfig()
        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigError(f"Configuration loading failed: {e}")

        logger.info(f"Configuration loaded for environment: {self.environment}")

    @property
    def environment(self) -> str:
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        return self._base_config

    @property
    def chains(self) -> ChainConfig:
        return self._chain_config

    @property
    def registry(self) -> RegistryConfig:
        return self._registry_config

    @property
    def active_networks(self) -> List[NetworkConfig]:
        """Network configs for every network processed by a run."""
        return self.chains.active_networks

    def validate_configuration(self) -> bool:
        """
        Check that the selected networks are known, distinct and reachable.

        Raises:
            ConfigError: On an empty, unknown or duplicated network selection,
                or a network without an RPC URL
        """
        networks = self.chains.ACTIVE_NETWORKS
        if not networks:
            raise ConfigError("No active networks configured")
        if len(set(networks)) != len(networks):
            raise ConfigError("ACTIVE_NETWORKS contains duplicates")

        for network in networks:
            try:
                network_config = self.chains.get_network_config(network)
            except ValueError as e:
                raise ConfigError(str(e))
            if not network_config.rpc_url:
                raise ConfigError(f"No RPC URL configured for {network}")

        logger.info(f"Configuration valid for networks: {', '.join(networks)}")
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "base": self.base.to_dict(),
            "chains": self.chains.to_dict(),
            "registry": self.registry.to_dict(),
        }

    def __repr__(self) -> str:
        return f"ConfigManager(environment={self.environment})"
