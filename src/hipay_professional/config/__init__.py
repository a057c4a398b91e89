"""Config module.

This module provides configuration management functionality.
"""

from hipay_professional.config.environment import resolve_endpoint
from hipay_professional.config.manager import (
    IntegrationSettings,
    load_config,
    load_integration_settings,
)
from hipay_professional.config.schema import (
    ClientConfig,
    Config,
    ListenerConfig,
    LoggingConfig,
    RequestConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    "load_integration_settings",
    "resolve_endpoint",
    # Configuration models
    "Config",
    "ClientConfig",
    "RequestConfig",
    "LoggingConfig",
    "ListenerConfig",
    "IntegrationSettings",
]
