"""
Configuration for the token registry builder.

Example:
    from tokenregistry.config import ConfigManager

    config = ConfigManager()
    config.validate_configuration()

    for network in config.active_networks:
        print(network.name, network.chain_id, network.rpc_url)
"""

from .base import BaseConfig, ConfigError
from .chains import ChainConfig, NetworkConfig
from .manager import ConfigManager
from .registry import RegistryConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "ChainConfig",
    "NetworkConfig",
    "RegistryConfig",
    "ConfigManager",
]
