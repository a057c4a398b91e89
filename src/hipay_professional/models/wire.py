"""Mapping between Python attribute names and service element names."""

from dataclasses import fields
from typing import Any, Dict, Mapping, Type, TypeVar

T = TypeVar("T")


def camel_case(name: str) -> str:
    """Convert a snake_case attribute name to the camelCase element name.
    
    Example:
        >>> camel_case("payment_attempts_24h")
        'paymentAttempts24h'
    """
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


def wire_names(cls: type) -> Dict[str, str]:
    """Return the ordered ``{attribute: element name}`` map of a dataclass."""
    return {f.name: camel_case(f.name) for f in fields(cls)}


def from_wire(cls: Type[T], data: Mapping[str, Any]) -> T:
    """Build a dataclass from a flat element map.
    
    Only the fields declared by ``cls`` are looked up; absent ones stay
    ``None`` and unknown elements are ignored.
    """
    return cls(**{attr: data.get(element) for attr, element in wire_names(cls).items()})
