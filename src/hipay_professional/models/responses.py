"""Response data models for HiPay Professional operations.

This module defines the typed results of the SOAP operations, the protocol
error reported by HiPay, and the decoded server-to-server notification.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

import requests

T = TypeVar("T")


@dataclass(frozen=True)
class HipayError:
    """Business error returned by HiPay (non-zero result code).
    
    Attributes:
        code: Error code returned by HiPay
        description: Error cause description
    """
    
    code: int
    description: Optional[str]


@dataclass
class HipayResponse(Generic[T]):
    """Response to an API request.
    
    Exactly one of ``error`` and ``result`` is set.
    
    Attributes:
        http_response: Raw HTTP response, kept for diagnostics
        error: Business error, when HiPay reported one
        result: Typed result, when the call succeeded
        
    Example:
        >>> response = client.capture_order(CaptureOrderRequest(transaction_public_id="5CF68C1301DC7655"))
        >>> if response.is_success:
        ...     print(response.result.merchant_reference)
        ... else:
        ...     print(f"Error {response.error.code}: {response.error.description}")
    """
    
    http_response: Optional[requests.Response] = field(default=None, repr=False, compare=False)
    error: Optional[HipayError] = None
    result: Optional[T] = None
    
    def __post_init__(self) -> None:
        """Validate that error and result are mutually exclusive."""
        if (self.error is None) == (self.result is None):
            raise ValueError("HipayResponse requires exactly one of error or result")
    
    @property
    def is_success(self) -> bool:
        """Check if the call succeeded.
        
        Returns:
            True if a result is present
        """
        return self.result is not None


@dataclass
class CreateOrderResult:
    """Result of ``generate``.
    
    Attributes:
        redirect_url: Payment page URL the customer must be redirected to
    """
    
    redirect_url: Optional[str] = None


@dataclass
class CaptureOrderResult:
    transaction_public_id: Optional[str] = None
    merchant_reference: Optional[str] = None


@dataclass
class CancelOrderResult:
    transaction_public_id: Optional[str] = None
    merchant_reference: Optional[str] = None


@dataclass
class RefundOrderResult:
    """Result of ``card`` (refund).
    
    Attributes:
        transaction_public_id: Refunded transaction id
        amount: Refunded amount
        currency: Currency of the refunded transaction
    """
    
    transaction_public_id: Optional[str] = None
    amount: Optional[str] = None
    currency: Optional[str] = None


class NotificationOperation(str, Enum):
    """Operation reported by a notification."""
    
    AUTHORIZATION = "authorization"
    CAPTURE = "capture"
    CANCELLATION = "cancellation"
    REFUND = "refund"
    REJECT = "reject"


class NotificationStatus(str, Enum):
    """Outcome reported by a notification."""
    
    OK = "ok"
    NOK = "nok"
    CANCEL = "cancel"
    WAITING = "waiting"


@dataclass
class OrderNotificationResult:
    """Content of the ``result`` element of a notification.
    
    Values are kept as the raw strings sent by HiPay; compare ``operation``
    and ``status`` with :class:`NotificationOperation` and
    :class:`NotificationStatus` (both are ``str`` enums).
    
    Attributes:
        operation: authorization, capture, cancellation, refund or reject
        status: ok, nok, cancel or waiting
        transid: Transaction public id, used for capture/cancel/refund
        merchant_datas: Custom data sent in CreateOrderRequest.free_data
    """
    
    operation: Optional[str] = None
    status: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    transid: Optional[str] = None
    orig_amount: Optional[str] = None
    orig_currency: Optional[str] = None
    id_for_merchant: Optional[str] = None
    email_client: Optional[str] = None
    id_client: Optional[str] = None
    card_country: Optional[str] = None
    ip_country: Optional[str] = None
    merchant_datas: Optional[Dict[str, Any]] = None
    is3ds: Optional[str] = None
    payment_method: Optional[str] = None
    customer_country: Optional[str] = None
    refunded_amount: Optional[str] = None
    return_code: Optional[str] = None
    return_description_short: Optional[str] = None
    return_description_long: Optional[str] = None


@dataclass
class NotificationResponse:
    """Decoded server-to-server notification.
    
    Attributes:
        mapiversion: Protocol version
        md5content: Digest as received (hex text, unmodified)
        result: Notification content
    """
    
    mapiversion: str
    md5content: str
    result: OrderNotificationResult
