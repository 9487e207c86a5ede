"""Configuration Manager for the K2 document parser.

This module loads parser configuration from environment variables or JSON
files and validates it with Pydantic before use.

Architecture:
    - Infrastructure layer, isolated from the domain mapping engine
    - Type-safe configuration using Pydantic models
    - Fail-fast validation prevents runtime errors
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# Default max document size (50MB); K2 feeds of a large system stay well below
DEFAULT_MAX_DOCUMENT_SIZE = 50 * 1024 * 1024

_TRUE_VALUES = ("1", "true", "yes", "on")


class ParserConfig(BaseModel):
    """K2 parser configuration.

    Parameters:
        strict_feeds: Abort feed decoding on the first entry of an unknown
            type instead of skipping and reporting it
        max_document_size: Largest response body accepted, in bytes
        forbid_dtd: Reject bodies carrying a DTD (defusedxml forbid_dtd);
            entity declarations and external references are always rejected
    """

    strict_feeds: bool = Field(default=False, description="Abort feeds on unknown entry types")
    max_document_size: int = Field(
        default=DEFAULT_MAX_DOCUMENT_SIZE,
        description="Maximum response body size in bytes"
    )
    forbid_dtd: bool = Field(default=False, description="Reject documents with a DTD")

    @field_validator("max_document_size")
    @classmethod
    def validate_max_document_size(cls, v: int) -> int:
        """Validate the size limit is positive."""
        if v <= 0:
            raise ValueError(f"max_document_size must be positive, got {v}")
        return v


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in _TRUE_VALUES


class ConfigManager:
    """Configuration manager for parser settings.

    Example Usage:
        ```python
        # Load from environment variables
        config = ConfigManager.from_environment()
        parser_config = config.get_parser_config()

        # Load from file
        config = ConfigManager.from_file("hmc_k2.json")
        parser_config = config.get_parser_config()
        ```
    """

    def __init__(self, config_data: Dict[str, Any]):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary
        """
        self._config_data = config_data
        self._parser_config: Optional[ParserConfig] = None

    @classmethod
    def from_environment(cls) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - HMC_K2_STRICT_FEEDS: Abort feeds on unknown types (true/false)
            - HMC_K2_MAX_DOCUMENT_SIZE: Maximum body size in bytes
            - HMC_K2_FORBID_DTD: Reject documents carrying a DTD (true/false)

        A .env file in the working directory is loaded first; variables
        already set in the environment take precedence over it.

        Returns:
            ConfigManager instance
        """
        env_path = Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")

        parser: Dict[str, Any] = {}

        strict = _env_flag("HMC_K2_STRICT_FEEDS")
        if strict is not None:
            parser["strict_feeds"] = strict

        max_size = os.getenv("HMC_K2_MAX_DOCUMENT_SIZE")
        if max_size:
            parser["max_document_size"] = max_size

        forbid_dtd = _env_flag("HMC_K2_FORBID_DTD")
        if forbid_dtd is not None:
            parser["forbid_dtd"] = forbid_dtd

        return cls({"parser": parser})

    @classmethod
    def from_file(cls, config_path: str) -> 'ConfigManager':
        """Load configuration from a JSON file.

        Parameters:
            config_path: Path to configuration file

        Returns:
            ConfigManager instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {str(e)}")

        if not isinstance(config_data, dict):
            raise ValueError("Configuration must be a JSON object")

        logger.debug(f"Loaded parser configuration from {config_file}")
        return cls(config_data)

    def get_parser_config(self) -> ParserConfig:
        """Get the validated parser configuration.

        Raises:
            pydantic.ValidationError: If the configuration is invalid
        """
        if self._parser_config is None:
            self._parser_config = ParserConfig(**self._config_data.get("parser", {}))
        return self._parser_config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Parameters:
            key: Configuration key (supports dot notation, e.g., "parser.strict_feeds")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config_data

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default


# ============================================================================
# Convenience Functions
# ============================================================================

def get_parser_config() -> ParserConfig:
    """Convenience function to get parser configuration from environment.

    Returns:
        ParserConfig instance (defaults when no variable is set)
    """
    return ConfigManager.from_environment().get_parser_config()
