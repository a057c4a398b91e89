"""SOAP response parser for HiPay operations.

Responses look like::

    <SOAP-ENV:Envelope ...>
      <SOAP-ENV:Body>
        <ns1:confirmResponse>
          <confirmResult>
            <code>0</code>
            <description></description>
            <transactionPublicId>5CF68C1301DC7655</transactionPublicId>
          </confirmResult>
        </ns1:confirmResponse>
      </SOAP-ENV:Body>
    </SOAP-ENV:Envelope>

Elements are matched on their qualified name as written (``prefix:local``);
attributes, comments and processing instructions are ignored.
"""

import logging
from typing import Dict, Optional, Type, TypeVar

import requests
from lxml import etree

from hipay_professional.models.responses import HipayError, HipayResponse
from hipay_professional.models.wire import from_wire
from hipay_professional.soap.registry import TypeDefinition, require_operation
from hipay_professional.utils.exceptions import ResponseParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Prefix used by the service for its response messages, whatever the area
RESPONSE_PREFIX = "ns1"
SUCCESS_CODE = "0"


def parse_xml(text: str) -> etree._Element:
    """Parse XML text with a hardened parser.
    
    Args:
        text: XML document
        
    Returns:
        Root element
        
    Raises:
        etree.XMLSyntaxError: If the document is not well-formed
    """
    # The text is already decoded; a declared encoding must not re-decode it
    parser = etree.XMLParser(
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )
    return etree.fromstring(text.encode("utf-8"), parser)


def qualified_name(element: etree._Element) -> str:
    """Return the tag as written in the document, e.g. ``SOAP-ENV:Body``."""
    local = etree.QName(element).localname
    return f"{element.prefix}:{local}" if element.prefix else local


def child_elements(element: etree._Element):
    """Iterate over element children, skipping comments and entities."""
    return (child for child in element if isinstance(child.tag, str))


def find_child(element: etree._Element, name: str) -> Optional[etree._Element]:
    """Return the first child with the given qualified name."""
    for child in child_elements(element):
        if qualified_name(child) == name:
            return child
    return None


def get_or_throw(root: etree._Element, *names: str) -> etree._Element:
    """Walk a path of qualified names starting at the document root.
    
    The first name must match the root element itself.
    
    Args:
        root: Document root element
        *names: Qualified names, outermost first
        
    Returns:
        Element at the end of the path
        
    Raises:
        ValueError: "<name> is missing!" at the first missing segment
        
    Example:
        >>> get_or_throw(root, "SOAP-ENV:Envelope", "SOAP-ENV:Body")
    """
    first, *rest = names
    if qualified_name(root) != first:
        raise ValueError(f"{first} is missing!")
    
    current = root
    for name in rest:
        current = find_child(current, name)
        if current is None:
            raise ValueError(f"{name} is missing!")
    return current


def flatten_children(element: etree._Element) -> Dict[str, Optional[str]]:
    """Return ``{qualified name: text}`` for the immediate children.
    
    Elements without text map to None; later duplicates win.
    """
    return {qualified_name(child): child.text for child in child_elements(element)}


def parse_response(
    text: str,
    definition: TypeDefinition,
    result_type: Type[T],
    http_response: Optional[requests.Response] = None,
) -> HipayResponse[T]:
    """Parse a SOAP response into a typed result or a protocol error.
    
    Args:
        text: Raw response body
        definition: Registry entry of the request type
        result_type: Result dataclass to build on success
        http_response: HTTP response, attached to the outcome and to errors
        
    Returns:
        HipayResponse with either ``result`` or ``error`` set
        
    Raises:
        ResponseParseError: If the body is not the expected SOAP response
        
    Example:
        >>> response = parse_response(xml, lookup(CaptureOrderRequest), CaptureOrderResult)
        >>> response.result.transaction_public_id
        '5CF68C1301DC7655'
    """
    try:
        operation = require_operation(definition)
        root = parse_xml(text)
        result_element = get_or_throw(
            root,
            "SOAP-ENV:Envelope",
            "SOAP-ENV:Body",
            f"{RESPONSE_PREFIX}:{operation}Response",
            f"{operation}Result",
        )
        data = flatten_children(result_element)
        
        code = data.get("code")
        if code is None:
            raise ValueError("code is missing!")
        
        if code != SUCCESS_CODE:
            error = HipayError(code=int(code), description=data.get("description"))
            logger.info(f"HiPay {operation} returned error {error.code}: {error.description}")
            return HipayResponse(http_response=http_response, error=error)
        
        data.pop("code")
        data.pop("description", None)
        result = from_wire(result_type, data)
    except Exception as e:
        logger.error(f"Failed to parse HiPay response: {e}")
        raise ResponseParseError(
            "Error while parsing Hipay's response", e, http_response
        ) from e
    
    logger.debug(f"HiPay {operation} succeeded")
    return HipayResponse(http_response=http_response, result=result)
