"""Namespace and operation registry for HiPay SOAP messages.

Every request, result and auxiliary type has exactly one entry. Only the
top-level request types carry an operation name: it drives the outbound
message element (``<ns>:<operation>``), the HTTP path and the expected
response envelope (``<operation>Response/<operation>Result``).
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Union

from hipay_professional.utils.exceptions import ConfigurationError

# Namespace id -> service path (API area)
NAMESPACES: Mapping[str, str] = MappingProxyType({
    "ns1": "soap/payment-v2",
    "ns2": "soap/transaction-v2",
    "ns3": "soap/refund-v2",
})


@dataclass(frozen=True)
class TypeDefinition:
    """Registry entry of a message type.
    
    Attributes:
        ns: Namespace id (key of NAMESPACES)
        operation: SOAP operation name, None for nested types
    """
    
    ns: str
    operation: Optional[str] = None


DEFINITIONS: Mapping[str, TypeDefinition] = MappingProxyType({
    # Orders
    "Affiliate": TypeDefinition("ns1"),
    "Tax": TypeDefinition("ns1"),
    "Item": TypeDefinition("ns1"),
    "Customer": TypeDefinition("ns1"),
    "Purchase": TypeDefinition("ns1"),
    "Shipping": TypeDefinition("ns1"),
    "AccountInfo": TypeDefinition("ns1"),
    "MerchantRiskStatement": TypeDefinition("ns1"),
    "CreateOrderRequest": TypeDefinition("ns1", "generate"),
    "CreateOrderResult": TypeDefinition("ns1"),
    # Transactions
    "CaptureOrderRequest": TypeDefinition("ns2", "confirm"),
    "CaptureOrderResult": TypeDefinition("ns2"),
    "CancelOrderRequest": TypeDefinition("ns2", "cancel"),
    "CancelOrderResult": TypeDefinition("ns2"),
    # Refunds
    "RefundOrderRequest": TypeDefinition("ns3", "card"),
    "RefundOrderResult": TypeDefinition("ns3"),
})


def lookup(type_or_name: Union[str, type]) -> TypeDefinition:
    """Return the registry entry of a message type.
    
    Args:
        type_or_name: Model class or its name
        
    Returns:
        TypeDefinition of the type
        
    Raises:
        ConfigurationError: If the type is not registered
        
    Example:
        >>> lookup(CaptureOrderRequest)
        TypeDefinition(ns='ns2', operation='confirm')
    """
    name = type_or_name if isinstance(type_or_name, str) else type_or_name.__name__
    try:
        return DEFINITIONS[name]
    except KeyError:
        raise ConfigurationError(
            f"No message definition registered for {name}"
        ) from None


def require_operation(definition: TypeDefinition) -> str:
    """Return the operation name of a top-level message definition.
    
    Raises:
        ConfigurationError: If the definition is a nested type
    """
    if not definition.operation:
        raise ConfigurationError(
            f"Message definition {definition} has no operation: "
            "nested types cannot be sent as top-level messages"
        )
    return definition.operation


def operation_path(definition: TypeDefinition) -> str:
    """Return the HTTP path of an operation, e.g. ``/soap/payment-v2/generate``."""
    return f"/{NAMESPACES[definition.ns]}/{require_operation(definition)}"


def namespace_url(endpoint: str, ns: str) -> str:
    """Return the XML namespace URL bound to a namespace id for an endpoint.
    
    Example:
        >>> namespace_url("https://test-ws.hipay.com/", "ns3")
        'https://test-ws.hipay.com/soap/refund-v2'
    """
    try:
        area = NAMESPACES[ns]
    except KeyError:
        raise ConfigurationError(f"Unknown namespace id: {ns}") from None
    return endpoint.rstrip("/") + "/" + area
