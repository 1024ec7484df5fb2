"""
Base configuration management for the token registry builder.

Settings come from the process environment, optionally seeded from a `.env`
file in the working directory.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional, List
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

ENVIRONMENTS = ["local", "dev", "ci", "production"]


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class BaseConfig:
    """Environment name and logging level shared by every config section."""

    ENVIRONMENT: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "local"))
    # WARNING keeps a successful build silent
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING"))

    def __post_init__(self):
        self._setup_logging()
        self._validate_config()

    def _setup_logging(self):
        """Configure root logging from LOG_LEVEL."""
        level = getattr(logging, self.LOG_LEVEL.upper(), None)
        if not isinstance(level, int):
            raise ConfigError(f"Invalid log level: {self.LOG_LEVEL}")
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    def _validate_config(self):
        """Validate configuration values; subclasses extend this."""
        if self.ENVIRONMENT not in ENVIRONMENTS:
            raise ConfigError(f"Invalid environment: {self.ENVIRONMENT}")

    @staticmethod
    def get_env(key: str, default: Optional[str] = None, required: bool = False) -> str:
        """
        Read an environment variable.

        Args:
            key: Environment variable name
            default: Value used when the variable is unset
            required: Raise instead of returning None for an unset variable

        Raises:
            ConfigError: If a required variable is unset
        """
        value = os.getenv(key, default)
        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")
        return value

    @staticmethod
    def _get_env_number(key: str, cast, kind: str, default, required: bool):
        raw = BaseConfig.get_env(key, None if default is None else str(default), required)
        try:
            return cast(raw)
        except (ValueError, TypeError):
            raise ConfigError(f"Environment variable '{key}' must be {kind}, got: {raw}")

    @staticmethod
    def get_env_int(key: str, default: Optional[int] = None, required: bool = False) -> int:
        return BaseConfig._get_env_number(key, int, "an integer", default, required)

    @staticmethod
    def get_env_float(key: str, default: Optional[float] = None, required: bool = False) -> float:
        return BaseConfig._get_env_number(key, float, "a number", default, required)

    @staticmethod
    def get_env_list(key: str, default: Optional[List[str]] = None, separator: str = ",") -> List[str]:
        """Comma-separated variable as a list; blank items are dropped."""
        value = BaseConfig.get_env(key, separator.join(default) if default else "")
        if not value:
            return []
        return [item.strip() for item in value.split(separator) if item.strip()]

    @staticmethod
    def get_env_path(key: str, default: Path) -> Path:
        value = BaseConfig.get_env(key)
        return Path(value) if value else default

    def to_dict(self) -> Dict[str, Any]:
        """Public settings as a plain dictionary."""
        return {
            name: getattr(self, name)
            for name in self.__dataclass_fields__
            if not name.startswith('_')
        }
