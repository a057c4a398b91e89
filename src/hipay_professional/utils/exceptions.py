"""Custom exception classes for the HiPay Professional SDK.

All exceptions inherit from HipaySDKError to allow catching all custom exceptions.

Business errors reported by HiPay (non-zero result code) are NOT exceptions:
they are returned as :class:`hipay_professional.models.responses.HipayError`
inside the response.
"""

from enum import Enum
from typing import Optional

import requests


class HipaySDKError(Exception):
    """Base exception for all HiPay Professional SDK custom exceptions."""

    pass


class ConfigurationError(HipaySDKError):
    """Raised when client configuration is invalid.
    
    Examples:
        - Unknown environment string
        - Missing credentials
        - Missing integration environment variables
        - Message type with no registry entry
    """

    pass


class HipayException(HipaySDKError):
    """Unexpected failure while talking to HiPay.
    
    Unlike protocol errors, exceptions are unanticipated events (network
    errors, malformed responses, ...).
    
    Attributes:
        cause: Underlying exception
        http_response: HTTP response, when one was actually received
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        http_response: Optional[requests.Response] = None,
    ) -> None:
        if cause is not None and str(cause):
            message = f"{message} ({cause})"
        super().__init__(message)
        self.cause = cause
        self.http_response = http_response


class TransportError(HipayException):
    """Raised when the HTTP exchange fails.
    
    Examples:
        - Connection refused
        - Timeout
        - Unexpected HTTP status (anything but 200 and 500)
    """

    pass


class ResponseParseError(HipayException):
    """Raised when HiPay answered but the body could not be understood.
    
    Examples:
        - SOAP envelope segment missing
        - XML syntax error
        - Missing result code
    """

    pass


class NotificationError(HipaySDKError):
    """Base exception for notification (callback) decoding failures."""

    pass


class NotificationDecodeError(NotificationError):
    """Raised when the notification is not well-formed XML."""

    pass


class IncompleteNotificationError(NotificationError):
    """Raised when required notification elements are missing."""

    pass


class InvalidDigestError(NotificationError):
    """Raised when md5content is not a 16 bytes hex digest."""

    pass


class BadSignatureError(NotificationError):
    """Raised when the signature (digest + password) does not match."""

    pass


class BadDigestError(NotificationError):
    """Raised when neither the legacy digest nor the signature matches."""

    pass


class ErrorCategory(Enum):
    """Error categorization for handling strategy.
    
    Attributes:
        TRANSPORT: HiPay never replied (network, timeout, unexpected status)
        PARSING: HiPay replied but the body could not be understood
        CONFIGURATION: Client misuse, fix the configuration
        NOTIFICATION: Inbound notification rejected (format or integrity)
        
    Example:
        >>> category = categorize_error(TransportError("Error during HTTP requests to Hipay"))
        >>> category == ErrorCategory.TRANSPORT
        True
    """
    
    TRANSPORT = "TRANSPORT"
    PARSING = "PARSING"
    CONFIGURATION = "CONFIGURATION"
    NOTIFICATION = "NOTIFICATION"


def categorize_error(exception: Exception) -> Optional[ErrorCategory]:
    """Categorize an exception raised by the SDK.
    
    Args:
        exception: The exception to categorize
        
    Returns:
        ErrorCategory, or None for exceptions foreign to the SDK
        
    Example:
        >>> categorize_error(ConfigurationError("bad env"))
        <ErrorCategory.CONFIGURATION: 'CONFIGURATION'>
    """
    if isinstance(exception, TransportError):
        return ErrorCategory.TRANSPORT
    
    if isinstance(exception, ResponseParseError):
        return ErrorCategory.PARSING
    
    if isinstance(exception, ConfigurationError):
        return ErrorCategory.CONFIGURATION
    
    if isinstance(exception, NotificationError):
        return ErrorCategory.NOTIFICATION
    
    # Raw requests errors escaping a custom transport
    if isinstance(exception, requests.RequestException):
        return ErrorCategory.TRANSPORT
    
    return None
