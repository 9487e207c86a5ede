"""Application Settings and Configuration.

This module provides application-wide settings that combine the parser
configuration from the configuration manager with logging defaults.
"""

import os
from typing import Optional

from hmc_k2.infrastructure.config_manager import ConfigManager, ParserConfig

# Application metadata
APP_NAME = "hmc-k2"
APP_VERSION = "0.1.0"


class Settings:
    """Application settings loaded from the environment.

    The parser configuration is loaded lazily on first access, so setting
    HMC_K2_* variables before the first parse is enough to change it.
    """

    def __init__(self):
        """Initialize settings from environment."""
        self._parser_config: Optional[ParserConfig] = None

        # Logging
        self.log_level = os.getenv("HMC_K2_LOG_LEVEL", "WARNING")
        self.log_json = os.getenv("HMC_K2_LOG_JSON", "false").lower() == "true"

    @property
    def parser_config(self) -> ParserConfig:
        """Get parser configuration.

        Returns:
            ParserConfig instance loaded from the configuration manager
        """
        if self._parser_config is None:
            self._parser_config = ConfigManager.from_environment().get_parser_config()
        return self._parser_config

    def reload(self) -> None:
        """Forget the cached parser configuration."""
        self._parser_config = None


# Global settings instance
settings = Settings()
