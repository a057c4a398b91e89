"""SOAP marshalling: registry, body builder, response and notification parsers."""

from hipay_professional.soap.builder import build_parameters, create_body, to_wire
from hipay_professional.soap.notification import (
    DigestScheme,
    extract_notification_xml,
    parse_notification,
    verification_plan,
)
from hipay_professional.soap.parsers import parse_response
from hipay_professional.soap.registry import (
    DEFINITIONS,
    NAMESPACES,
    TypeDefinition,
    lookup,
    operation_path,
)

__all__ = [
    "DEFINITIONS",
    "NAMESPACES",
    "TypeDefinition",
    "lookup",
    "operation_path",
    "build_parameters",
    "create_body",
    "to_wire",
    "parse_response",
    "parse_notification",
    "verification_plan",
    "DigestScheme",
    "extract_notification_xml",
]
