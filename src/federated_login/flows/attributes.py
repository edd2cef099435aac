"""
federated_login.flows.attributes

Attribute codec.

Responsibilities:
- Convert an attribute mapping to the directory's wire list ([{"Name", "Value"}]) and back.
- Canonicalize scalar values to strings (the directory only stores strings).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from federated_login.directory.models import AttributeList


def canonical_value(value: Any) -> str:
    # bool first: bool is an int subclass.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"unsupported attribute value type: {type(value).__name__}")


def encode_attributes(attributes: Mapping[str, Any]) -> AttributeList:
    return [{"Name": str(name), "Value": canonical_value(value)} for name, value in attributes.items()]


def decode_attributes(attribute_list: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    # Later entries win on duplicate names.
    return {str(item["Name"]): str(item.get("Value", "")) for item in attribute_list}
