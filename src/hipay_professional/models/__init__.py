"""Models module.

This module provides data models and dataclasses for the application.
"""

from hipay_professional.models.requests import (
    AccountInfo,
    Affiliate,
    CancelOrderRequest,
    CaptureOrderRequest,
    CreateOrderRequest,
    Customer,
    DeliveryTimeFrame,
    Item,
    ItemType,
    MerchantRiskStatement,
    NameIndicator,
    Purchase,
    PurchaseIndicator,
    RefundOrderRequest,
    ReorderIndicator,
    Shipping,
    ShippingIndicator,
    SuspiciousActivity,
    Tax,
)
from hipay_professional.models.responses import (
    CancelOrderResult,
    CaptureOrderResult,
    CreateOrderResult,
    HipayError,
    HipayResponse,
    NotificationOperation,
    NotificationResponse,
    NotificationStatus,
    OrderNotificationResult,
    RefundOrderResult,
)

__all__ = [
    "AccountInfo",
    "Affiliate",
    "CancelOrderRequest",
    "CancelOrderResult",
    "CaptureOrderRequest",
    "CaptureOrderResult",
    "CreateOrderRequest",
    "CreateOrderResult",
    "Customer",
    "DeliveryTimeFrame",
    "HipayError",
    "HipayResponse",
    "Item",
    "ItemType",
    "MerchantRiskStatement",
    "NameIndicator",
    "NotificationOperation",
    "NotificationResponse",
    "NotificationStatus",
    "OrderNotificationResult",
    "Purchase",
    "PurchaseIndicator",
    "RefundOrderRequest",
    "RefundOrderResult",
    "ReorderIndicator",
    "Shipping",
    "ShippingIndicator",
    "SuspiciousActivity",
    "Tax",
]
