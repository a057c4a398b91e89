"""Request data models for HiPay Professional SOAP operations.

Attribute names are snake_case; the body builder maps them to the camelCase
element names expected by the web service (``website_id`` -> ``websiteId``).
Optional fields left to ``None`` are not sent at all.

Amounts are decimal strings (e.g. ``"14.39"``) as the service expects.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Dict, List, Optional, Union


class ItemType(IntEnum):
    """How HiPay displays an order item."""
    
    INSURANCES = 1
    FIXED_COSTS = 2
    SHIPPING_COSTS = 3
    PRODUCT = 4


class NameIndicator(IntEnum):
    """Whether the account name matches the shipping name."""
    
    IDENTICAL = 1
    DIFFERENT = 2


class SuspiciousActivity(IntEnum):
    """Suspicious activity observed on the cardholder account."""
    
    NO_SUSPICIOUS_ACTIVITY = 1
    SUSPICIOUS_ACTIVITY = 2


class DeliveryTimeFrame(IntEnum):
    ELECTRONIC_DELIVERY = 1
    SAME_DAY_SHIPPING = 2
    OVERNIGHT_SHIPPING = 3
    TWO_DAY_OR_MORE_SHIPPING = 4


class PurchaseIndicator(IntEnum):
    MERCHANDISE_AVAILABLE = 1
    FUTURE_AVAILABILITY = 2


class ReorderIndicator(IntEnum):
    FIRST_TIME_ORDERED = 1
    REORDERED = 2


class ShippingIndicator(IntEnum):
    """Address the goods are sent to."""
    
    SHIP_TO_CARDHOLDER_BILLING_ADDRESS = 1
    SHIP_TO_VERIFIED_ADDRESS = 2
    SHIP_TO_DIFFERENT_ADDRESS = 3
    SHIP_TO_STORE = 4
    DIGITAL_GOODS = 5
    DIGITAL_TRAVEL_EVENT_TICKETS = 6
    OTHER = 7


@dataclass
class Affiliate:
    """An affiliate receiving a part of the earnings on capture."""
    
    name: str
    hipay_account_id: int
    amount: str


@dataclass
class Tax:
    """A tax displayed in the order price details.
    
    Attributes:
        label: Tax name
        amount: Tax amount
    """
    
    label: str
    amount: str


@dataclass
class Item:
    """An item displayed in the order price details.
    
    Attributes:
        name: Item name, displayed only for ItemType.PRODUCT
        type: ItemType value
        infos: Free text
        amount: Unit amount
        quantity: Quantity
        reference: Merchant reference
        taxes: Optional taxes
    """
    
    name: str
    type: int
    infos: str
    amount: str
    quantity: int
    reference: str
    taxes: Optional[List[Tax]] = None


@dataclass
class Customer:
    """Customer's account information (dates as YYYYMMDD integers)."""
    
    account_change: Optional[int] = None
    opening_account_date: Optional[int] = None
    password_change: Optional[int] = None


@dataclass
class Purchase:
    """Customer's purchase history."""
    
    count: Optional[int] = None
    card_stored_24h: Optional[int] = None
    payment_attempts_24h: Optional[int] = None
    payment_attempts_1y: Optional[int] = None


@dataclass
class Shipping:
    """Customer's shipping information."""
    
    shipping_used_date: Optional[int] = None
    name_indicator: Optional[NameIndicator] = None
    suspicious_activity: Optional[SuspiciousActivity] = None


@dataclass
class AccountInfo:
    """Information about the customer's account on the merchant's website."""
    
    customer: Optional[Customer] = None
    purchase: Optional[Purchase] = None
    shipping: Optional[Shipping] = None


@dataclass
class MerchantRiskStatement:
    """Merchant's statement about the transaction."""
    
    email_delivery_address: Optional[str] = None
    delivery_time_frame: Optional[DeliveryTimeFrame] = None
    purchase_indicator: Optional[PurchaseIndicator] = None
    pre_order_date: Optional[int] = None
    reorder_indicator: Optional[ReorderIndicator] = None
    shipping_indicator: Optional[ShippingIndicator] = None


@dataclass
class CreateOrderRequest:
    """Parameters of a new order (``generate`` operation).
    
    Attributes:
        website_id: Website id created on the merchant account
        category_id: Order category of the website
        currency: ISO 4217 currency code (e.g. "EUR")
        amount: Total order amount
        rating: Age category: "+12", "+16", "+18" or "ALL"
        customer_ip_address: IP address of the customer
        execution_date: Payment execution date (datetime or "Y-m-dTH:i:s" string)
        manual_capture: True to authorize only and capture manually
        free_data: Custom key/value data echoed back in notifications
        
    Example:
        >>> req = CreateOrderRequest(
        ...     website_id=123, category_id=456, currency="EUR",
        ...     amount="14.39", rating="ALL", customer_ip_address="127.0.0.1",
        ...     execution_date=datetime.now(), manual_capture=True,
        ... )
    """
    
    website_id: int
    category_id: int
    currency: str
    amount: str
    rating: str
    customer_ip_address: str
    execution_date: Union[str, datetime]
    manual_capture: bool
    subscription_id: Optional[str] = None
    locale: Optional[str] = None
    description: Optional[str] = None
    customer_email: Optional[str] = None
    merchant_comment: Optional[str] = None
    email_callback: Optional[str] = None
    url_callback: Optional[str] = None
    url_accept: Optional[str] = None
    url_decline: Optional[str] = None
    url_cancel: Optional[str] = None
    url_logo: Optional[str] = None
    bank_report_label: Optional[str] = None
    free_data: Optional[Dict[str, str]] = None
    affiliates: Optional[List[Affiliate]] = None
    items: Optional[List[Item]] = None
    shop_id: Optional[str] = None
    third_party_security: Optional[str] = None
    account_info: Optional[AccountInfo] = None
    merchant_risk_statement: Optional[MerchantRiskStatement] = None
    exemption: Optional[str] = None
    method: Optional[str] = None


@dataclass
class CaptureOrderRequest:
    """Capture a previously authorized transaction (``confirm`` operation).
    
    Attributes:
        transaction_public_id: "transid" received in the notification
    """
    
    transaction_public_id: Optional[str] = None
    amount: Optional[str] = None
    currency: Optional[str] = None


@dataclass
class CancelOrderRequest:
    """Cancel an authorized transaction (``cancel`` operation)."""
    
    transaction_public_id: Optional[str] = None


@dataclass
class RefundOrderRequest:
    """Refund a captured transaction (``card`` operation)."""
    
    transaction_public_id: str
    amount: str
