"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hipay_professional.config.environment import resolve_endpoint
from hipay_professional.utils.exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RequestConfig(BaseModel):
    """Default options applied to every HTTP request.
    
    Attributes:
        timeout: Request timeout in seconds
        verify_tls: Whether to verify TLS certificates
    """
    
    model_config = ConfigDict(frozen=True)
    
    timeout: float = Field(
        default=30,
        gt=0,
        description="Request timeout in seconds"
    )
    verify_tls: bool = True


class ClientConfig(BaseModel):
    """HiPay client configuration, immutable once built.
    
    Attributes:
        env: "production", "stage" or an explicit http(s) base URL
        login: API login (from the merchant Toolbox)
        password: API password, also the notification signing secret
        sub_account_login: Optional sub-account login
        sub_account_id: Optional sub-account id
        request: Default request options
    """
    
    model_config = ConfigDict(frozen=True)
    
    env: str = Field(default="stage", description="API environment")
    login: str = Field(..., min_length=1, description="API login")
    password: str = Field(..., min_length=1, description="API password")
    sub_account_login: Optional[str] = None
    sub_account_id: Optional[int] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
    
    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment resolves to an endpoint.
        
        Args:
            v: Environment string
            
        Returns:
            Environment string, unchanged
            
        Raises:
            ValueError: If env is not production, stage or an http(s) URL
        """
        try:
            resolve_endpoint(v)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e
        return v
    
    @property
    def endpoint(self) -> str:
        """Resolved API base URL."""
        return resolve_endpoint(self.env)


class LoggingConfig(BaseModel):
    """Configuration for logging.
    
    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_credentials: Whether to mask credentials in logs
    """
    
    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/hipay-professional.log"),
        description="Log file path"
    )
    redact_credentials: bool = Field(
        default=True,
        description="Mask wsLogin/wsPassword values in logs"
    )
    
    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level.
        
        Args:
            v: Log level string
            
        Returns:
            Upper-cased log level
            
        Raises:
            ValueError: If level is not a standard logging level
        """
        upper = v.upper()
        if upper not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        return upper


class ListenerConfig(BaseModel):
    """Configuration for the notification listener harness.
    
    Attributes:
        host: Bind address
        port: Bind port
        path: URL path receiving the notifications
    """
    
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    path: str = "/"
    
    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Validate path is absolute."""
        if not v.startswith("/"):
            raise ValueError(f"Invalid listener path: {v}. Must start with /")
        return v


class Config(BaseModel):
    """Root configuration model.
    
    Attributes:
        client: HiPay client settings (credentials, environment, request defaults)
        logging: Logging settings
        listener: Notification listener settings
        
    Example:
        >>> config = Config(client=ClientConfig(login="x", password="y"))
        >>> config.client.endpoint
        'https://test-ws.hipay.com/'
    """
    
    client: ClientConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    listener: ListenerConfig = Field(default_factory=ListenerConfig)
