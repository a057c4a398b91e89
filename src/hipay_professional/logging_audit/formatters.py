"""Custom log formatters for the HiPay Professional SDK.

This module provides specialized formatters for logging, including credential redaction.
"""

import logging
import re
from typing import List, Tuple

REDACTED = "[REDACTED]"

# Credential elements of the SOAP request body
CREDENTIAL_ELEMENTS = ("wsLogin", "wsPassword", "wsSubAccountLogin")

CREDENTIAL_PATTERNS: List[Tuple[re.Pattern[str], str]] = [
    # <wsPassword>secret</wsPassword>
    (
        re.compile(rf"<({'|'.join(CREDENTIAL_ELEMENTS)})>[^<]*</\1>"),
        rf"<\1>{REDACTED}</\1>",
    ),
    # password=secret, password: secret
    (
        re.compile(r"\b(password|login)(\s*[=:]\s*)[\"']?[^\s\"',;]+[\"']?", re.IGNORECASE),
        rf"\1\2{REDACTED}",
    ),
]


def redact_credentials(text: str) -> str:
    """Mask credential values in a log message or XML body.
    
    Example:
        >>> redact_credentials("<wsPassword>s3cret</wsPassword>")
        '<wsPassword>[REDACTED]</wsPassword>'
    """
    for pattern, replacement in CREDENTIAL_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class CredentialRedactingFormatter(logging.Formatter):
    """Formatter that masks API credentials in log messages.
    
    Attributes:
        redact: Whether to enable credential redaction
        
    Example:
        >>> formatter = CredentialRedactingFormatter(
        ...     fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        ...     redact=True
        ... )
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """
    
    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact: bool = True,
    ) -> None:
        """Initialize the CredentialRedactingFormatter.
        
        Args:
            fmt: Log message format string
            datefmt: Date format string (optional)
            redact: Whether to enable credential redaction
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact = redact
    
    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional credential redaction.
        
        Args:
            record: Log record to format
            
        Returns:
            Formatted log message with credentials masked if enabled
        """
        original = super().format(record)
        if self.redact:
            original = redact_credentials(original)
        return original
