"""SOAP request body builder.

Turns a request (dataclass or mapping) merged with the client credentials
into the SOAP envelope expected by the HiPay web services::

    <SOAP-ENV:Envelope xmlns:SOAP-ENV="..." xmlns:ns1="https://ws.hipay.com/soap/payment-v2">
      <SOAP-ENV:Body>
        <ns1:generate>
          <parameters>...</parameters>
        </ns1:generate>
      </SOAP-ENV:Body>
    </SOAP-ENV:Envelope>
"""

import logging
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from lxml import etree

from hipay_professional.models.wire import camel_case
from hipay_professional.soap.registry import (
    TypeDefinition,
    namespace_url,
    require_operation,
)

logger = logging.getLogger(__name__)

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_ENV_PREFIX = "SOAP-ENV"

# The schema models arrays and dictionaries as lists of <item> elements
ARRAY_ITEM_TAG = "item"
FREE_DATA_FIELD = "freeData"

# Intermediate tree: text leaf, element map, or repeated elements
Node = Union[str, Dict[str, Any], list]


class ValueKind(Enum):
    """Closed set of value kinds handled by :func:`build_parameters`."""
    
    ABSENT = "absent"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    RECORD = "record"
    ENUM = "enum"
    SCALAR = "scalar"


def classify(value: Any, key: Optional[str] = None) -> ValueKind:
    """Return the kind of a field value.
    
    Args:
        value: Field value
        key: Element name of the field (selects the dictionary special case)
    """
    if value is None:
        return ValueKind.ABSENT
    # bool before the numeric/enum checks: bool is an int
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (datetime, date)):
        return ValueKind.DATETIME
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if key == FREE_DATA_FIELD and isinstance(value, Mapping):
        return ValueKind.DICTIONARY
    if isinstance(value, Mapping) or (is_dataclass(value) and not isinstance(value, type)):
        return ValueKind.RECORD
    if isinstance(value, Enum):
        return ValueKind.ENUM
    return ValueKind.SCALAR


def format_datetime(value: Union[datetime, date]) -> str:
    """Format a date/time as ``YYYY-MM-DDTHH:MM:SS`` in UTC.
    
    Aware datetimes are converted to UTC, naive ones are taken as UTC.
    Fractional seconds and offsets are dropped.
    
    Example:
        >>> format_datetime(datetime(2014, 12, 25, 10, 57, 55, 123000))
        '2014-12-25T10:57:55'
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    elif value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=0, tzinfo=None).isoformat()


def to_wire(record: Any) -> Dict[str, Any]:
    """Return the ``{element name: value}`` map of a record.
    
    Dataclass attributes are renamed to camelCase and ``None`` values are
    left out; mappings are used as-is (keys are element names).
    
    Raises:
        TypeError: If record is neither a dataclass instance nor a mapping
    """
    if isinstance(record, Mapping):
        return dict(record)
    if is_dataclass(record) and not isinstance(record, type):
        return {
            camel_case(f.name): getattr(record, f.name)
            for f in fields(record)
            if getattr(record, f.name) is not None
        }
    raise TypeError(f"Cannot serialize {type(record).__name__} as a SOAP record")


def build_parameters(value: Any, key: Optional[str] = None) -> Optional[Node]:
    """Transform a value into the intermediate XML tree.
    
    Args:
        value: Field value (record, array, scalar, ...)
        key: Element name of the field
        
    Returns:
        None for absent values, otherwise a text leaf, a map of child
        elements, or (under an ``item`` key) a list of repeated elements
        
    Example:
        >>> build_parameters({"manualCapture": True, "freeData": {"a": "b"}})
        {'manualCapture': '1', 'freeData': {'item': [{'key': 'a', 'value': 'b'}]}}
    """
    kind = classify(value, key)
    
    if kind is ValueKind.ABSENT:
        return None
    if kind is ValueKind.BOOLEAN:
        return "1" if value else "0"
    if kind is ValueKind.DATETIME:
        return format_datetime(value)
    if kind is ValueKind.ARRAY:
        items = [build_parameters(item) for item in value]
        return {ARRAY_ITEM_TAG: [item for item in items if item is not None]}
    if kind is ValueKind.DICTIONARY:
        return {
            ARRAY_ITEM_TAG: [
                {"key": str(k), "value": build_parameters(v) or ""}
                for k, v in value.items()
            ]
        }
    if kind is ValueKind.RECORD:
        parameters: Dict[str, Any] = {}
        for name, field_value in to_wire(value).items():
            node = build_parameters(field_value, name)
            if node is not None:
                parameters[name] = node
        return parameters
    if kind is ValueKind.ENUM:
        return str(value.value)
    return str(value)


def _append(parent: etree._Element, tag: str, node: Node) -> None:
    """Render an intermediate node as child element(s) of parent."""
    if isinstance(node, list):
        for child in node:
            _append(parent, tag, child)
        return
    
    element = etree.SubElement(parent, tag)
    if isinstance(node, dict):
        for name, child in node.items():
            _append(element, name, child)
    else:
        element.text = node


def create_body(endpoint: str, data: Mapping[str, Any], definition: TypeDefinition) -> str:
    """Build the SOAP envelope of a request.
    
    Args:
        endpoint: API base URL (namespace URLs are derived from it)
        data: Merged credentials and request fields, keyed by element name
        definition: Registry entry of the request type
        
    Returns:
        SOAP envelope as UTF-8 XML text
        
    Raises:
        ConfigurationError: If the definition has no operation
    """
    operation = require_operation(definition)
    ns_url = namespace_url(endpoint, definition.ns)
    
    envelope = etree.Element(
        f"{{{SOAP_ENV_NS}}}Envelope",
        nsmap={SOAP_ENV_PREFIX: SOAP_ENV_NS, definition.ns: ns_url},
    )
    body = etree.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Body")
    message = etree.SubElement(body, f"{{{ns_url}}}{operation}")
    _append(message, "parameters", build_parameters(data) or {})
    
    logger.debug(f"Built SOAP body for {definition.ns}:{operation}")
    
    return etree.tostring(envelope, xml_declaration=True, encoding="UTF-8").decode("utf-8")
