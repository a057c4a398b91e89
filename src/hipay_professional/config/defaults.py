"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Default configuration dictionary
# Credentials have no default: they come from the file or HIPAY_* variables
DEFAULT_CONFIG: dict[str, Any] = {
    "client": {
        # Sandbox platform by default
        "env": "stage",
        "request": {
            # Request timeout: 30 seconds
            "timeout": 30,
            # Verify TLS certificates by default for security
            "verify_tls": True,
        },
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/hipay-professional.log",
        # Mask wsLogin/wsPassword in every log line
        "redact_credentials": True,
    },
    "listener": {
        "host": "127.0.0.1",
        "port": 8080,
        "path": "/",
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"

# Environment variables required by the live integration harness
INTEGRATION_ENV_VARS = (
    "HIPAY_LOGIN",
    "HIPAY_PASSWORD",
    "HIPAY_WEBSITE_ID",
    "HIPAY_CATEGORY_ID",
)
