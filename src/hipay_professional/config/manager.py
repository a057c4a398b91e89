"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from hipay_professional.config.defaults import (
    DEFAULT_CONFIG,
    DEFAULT_CONFIG_PATH,
    INTEGRATION_ENV_VARS,
)
from hipay_professional.config.schema import Config
from hipay_professional.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "HIPAY_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.
    
    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (HIPAY_* prefix, .env file included)
    3. Configuration file (JSON)
    4. Default values
    
    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json
        
    Returns:
        Validated Config instance
        
    Raises:
        ConfigurationError: If configuration is invalid or malformed
        
    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> client = HipayClient.from_config(config.client)
    """
    # Load .env file if present in project root
    load_dotenv()
    
    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)
    
    config_dict = _load_config_file(config_path)
    
    # Check before overrides so only the file content is blamed
    _check_sensitive_values(config_dict, config_path)
    
    config_dict = _apply_env_overrides(config_dict)
    
    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and the "
            f"{ENV_PREFIX}* environment variables."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.
    
    Args:
        config_path: Path to configuration file
        
    Returns:
        Configuration dictionary
        
    Raises:
        ConfigurationError: If JSON is malformed or unreadable
    """
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
            logger.info(f"Loaded configuration from {config_path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check file permissions and path"
            ) from e
        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                f"Invalid config file: {config_path}. Top-level value must be a JSON object."
            )
        return config_dict
    
    logger.info(
        f"Config file not found: {config_path}. Using default configuration."
    )
    # Deep copy of defaults to avoid mutation
    return json.loads(json.dumps(DEFAULT_CONFIG))


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with HIPAY_ prefix.
    
    Args:
        config_dict: Configuration dictionary to update
        
    Returns:
        Updated configuration dictionary with environment overrides applied
        
    Raises:
        ConfigurationError: If a numeric override is not a number
    """
    client = config_dict.setdefault("client", {})
    
    # Client section
    for field in ("env", "login", "password", "sub_account_login"):
        if value := os.getenv(f"{ENV_PREFIX}{field.upper()}"):
            client[field] = value
            # Never log the value itself
            logger.debug(f"Override: {field} from environment")
    
    if sub_account_id := os.getenv(f"{ENV_PREFIX}SUB_ACCOUNT_ID"):
        client["sub_account_id"] = _parse_number(
            "SUB_ACCOUNT_ID", sub_account_id, int
        )
        logger.debug("Override: sub_account_id from environment")
    
    # Request section
    if timeout := os.getenv(f"{ENV_PREFIX}TIMEOUT"):
        client.setdefault("request", {})["timeout"] = _parse_number(
            "TIMEOUT", timeout, float
        )
        logger.debug("Override: timeout from environment")
    
    if verify_tls := os.getenv(f"{ENV_PREFIX}VERIFY_TLS"):
        client.setdefault("request", {})["verify_tls"] = _parse_bool(verify_tls)
        logger.debug("Override: verify_tls from environment")
    
    # Logging section
    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")
    
    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")
    
    if redact := os.getenv(f"{ENV_PREFIX}REDACT_CREDENTIALS"):
        config_dict.setdefault("logging", {})["redact_credentials"] = _parse_bool(redact)
        logger.debug("Override: redact_credentials from environment")
    
    # Listener section
    if listen_host := os.getenv(f"{ENV_PREFIX}LISTEN_HOST"):
        config_dict.setdefault("listener", {})["host"] = listen_host
        logger.debug("Override: listener host from environment")
    
    if listen_port := os.getenv(f"{ENV_PREFIX}LISTEN_PORT"):
        config_dict.setdefault("listener", {})["port"] = _parse_number(
            "LISTEN_PORT", listen_port, int
        )
        logger.debug("Override: listener port from environment")
    
    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string.
    
    Args:
        value: String value to parse (case-insensitive)
        
    Returns:
        Boolean value
    """
    return value.lower() in ("true", "1", "yes", "on")


def _parse_number(name: str, value: str, kind: type) -> Any:
    """Parse a numeric environment value or fail with the variable name."""
    try:
        return kind(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid value for {ENV_PREFIX}{name}: {value!r}. Must be a number."
        ) from e


def _check_sensitive_values(config_dict: dict[str, Any], config_path: Path) -> None:
    """Warn when the API password is stored in the configuration file.
    
    Args:
        config_dict: Configuration dictionary to check
        config_path: File the dictionary was loaded from
    """
    if config_dict.get("client", {}).get("password"):
        logger.warning(
            f"WARNING: API password found in configuration file {config_path}! "
            "Passwords should be stored in environment variables, not config files. "
            f"Use {ENV_PREFIX}PASSWORD environment variable instead."
        )


@dataclass(frozen=True)
class IntegrationSettings:
    """Settings needed to run live scenarios against the stage platform.
    
    Attributes:
        login: API login
        password: API password
        website_id: Website id registered on the merchant account
        category_id: Order category id of that website
    """
    
    login: str
    password: str
    website_id: int
    category_id: int


def load_integration_settings() -> IntegrationSettings:
    """Read the live integration settings from the environment.
    
    Returns:
        IntegrationSettings instance
        
    Raises:
        ConfigurationError: If any required variable is missing or not a number
        
    Example:
        >>> settings = load_integration_settings()
        >>> client = HipayClient("stage", settings.login, settings.password)
    """
    load_dotenv()
    
    missing = [name for name in INTEGRATION_ENV_VARS if not os.getenv(name)]
    if missing:
        raise ConfigurationError(
            f"{', '.join(INTEGRATION_ENV_VARS)} must be defined! "
            f"Missing: {', '.join(missing)}"
        )
    
    return IntegrationSettings(
        login=os.environ["HIPAY_LOGIN"],
        password=os.environ["HIPAY_PASSWORD"],
        website_id=_parse_number("WEBSITE_ID", os.environ["HIPAY_WEBSITE_ID"], int),
        category_id=_parse_number("CATEGORY_ID", os.environ["HIPAY_CATEGORY_ID"], int),
    )
