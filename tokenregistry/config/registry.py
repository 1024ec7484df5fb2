"""
Registry build configuration: input/output locations and export settings.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .base import BaseConfig, ConfigError


MULTICALL_MODES = ("strict", "tolerant")


@dataclass
class RegistryConfig(BaseConfig):
    """Paths, batching mode and token list settings for a registry build."""

    # Registry repository layout
    REGISTRY_ROOT: Path = field(
        default_factory=lambda: BaseConfig.get_env_path("REGISTRY_ROOT", Path.cwd())
    )
    LISTS_DIRNAME: str = "lists"
    DATA_DIRNAME: str = "data"
    ASSETS_DIRNAME: str = "assets"
    OUTPUT_DIR: Path = field(
        default_factory=lambda: BaseConfig.get_env_path("OUTPUT_DIR", Path("generated"))
    )

    # Metadata resolution
    MULTICALL_MODE: str = field(
        default_factory=lambda: BaseConfig.get_env("MULTICALL_MODE", "strict")
    )
    HTTP_TIMEOUT_SECONDS: float = field(
        default_factory=lambda: BaseConfig.get_env_float("HTTP_TIMEOUT_SECONDS", 30.0)
    )

    # Registry defaults
    DEFAULT_PRECISION: int = field(
        default_factory=lambda: BaseConfig.get_env_int("DEFAULT_PRECISION", 3)
    )

    # Icon sources
    ASSETS_BASE_URL: str = field(
        default_factory=lambda: BaseConfig.get_env(
            "ASSETS_BASE_URL",
            "https://raw.githubusercontent.com/yogi-fi/yogi-assets/master",
        )
    )
    COMMUNITY_ASSETS_BASE_URL: str = field(
        default_factory=lambda: BaseConfig.get_env(
            "COMMUNITY_ASSETS_BASE_URL",
            "https://raw.githubusercontent.com/trustwallet/assets/master/blockchains",
        )
    )

    # CoinGecko
    COINGECKO_API_URL: str = field(
        default_factory=lambda: BaseConfig.get_env(
            "COINGECKO_API_URL", "https://api.coingecko.com/api/v3"
        )
    )
    COINGECKO_API_KEY: str = field(
        default_factory=lambda: BaseConfig.get_env("COINGECKO_API_KEY", "")
    )

    # Token list export
    TOKENLIST_NAME: str = field(
        default_factory=lambda: BaseConfig.get_env("TOKENLIST_NAME", "yogi")
    )
    TOKENLIST_LOGO_URI: str = field(
        default_factory=lambda: BaseConfig.get_env(
            "TOKENLIST_LOGO_URI",
            "https://raw.githubusercontent.com/yogi-fi/yogi-assets/master/logos/logo512.png",
        )
    )
    TOKENLIST_VERSION: Dict[str, int] = field(
        default_factory=lambda: {"major": 1, "minor": 0, "patch": 0}
    )

    def _validate_config(self):
        super()._validate_config()
        if self.MULTICALL_MODE not in MULTICALL_MODES:
            raise ConfigError(
                f"Invalid multicall mode: {self.MULTICALL_MODE} "
                f"(expected one of {', '.join(MULTICALL_MODES)})"
            )
        if self.HTTP_TIMEOUT_SECONDS <= 0:
            raise ConfigError("HTTP_TIMEOUT_SECONDS must be positive")

    @property
    def lists_dir(self) -> Path:
        return self.REGISTRY_ROOT / self.LISTS_DIRNAME

    @property
    def data_dir(self) -> Path:
        return self.REGISTRY_ROOT / self.DATA_DIRNAME

    @property
    def assets_dir(self) -> Path:
        return self.REGISTRY_ROOT / self.ASSETS_DIRNAME

    @property
    def output_dir(self) -> Path:
        """Output directory; relative values resolve against the registry root."""
        if self.OUTPUT_DIR.is_absolute():
            return self.OUTPUT_DIR
        return self.REGISTRY_ROOT / self.OUTPUT_DIR

    @property
    def tolerant_multicall(self) -> bool:
        return self.MULTICALL_MODE == "tolerant"

    def tokenlist_keywords(self, tier: str) -> List[str]:
        """Keywords attached to the token list export of a tier."""
        return [self.TOKENLIST_NAME, tier]
