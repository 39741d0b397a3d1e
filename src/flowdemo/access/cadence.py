"""
JSON-Cadence codec.

Converts between Python values and the JSON-Cadence interchange format used
by the Access API for script/transaction arguments, script results and
event payloads.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from ..errors import CadenceError
from ..utils import with_hex_prefix

INTEGER_TYPES = frozenset(
    {
        "Int", "Int8", "Int16", "Int32", "Int64", "Int128", "Int256",
        "UInt", "UInt8", "UInt16", "UInt32", "UInt64", "UInt128", "UInt256",
        "Word8", "Word16", "Word32", "Word64", "Word128", "Word256",
    }
)
FIXED_POINT_TYPES = frozenset({"Fix64", "UFix64"})
COMPOSITE_TYPES = frozenset({"Struct", "Resource", "Event", "Contract", "Enum"})


def arg(value: Any, type_name: str) -> dict[str, Any]:
    """
    Encode a Python value as a JSON-Cadence value.

    Args:
        value: Python value
        type_name: Cadence type, e.g. "Int", "String", "Address".
                   Containers use "Optional:<inner>" and "Array:<inner>".

    Returns:
        JSON-Cadence dict ready for ``encode_argument``
    """
    base, _, inner = type_name.partition(":")

    if base in INTEGER_TYPES:
        if isinstance(value, bool) or not isinstance(value, int):
            raise CadenceError(f"{base} expects an int, got {type(value).__name__}")
        return {"type": base, "value": str(value)}
    if base in FIXED_POINT_TYPES:
        return {"type": base, "value": f"{Decimal(str(value)):.8f}"}
    if base in ("String", "Character"):
        return {"type": base, "value": str(value)}
    if base == "Bool":
        return {"type": "Bool", "value": bool(value)}
    if base == "Address":
        return {"type": "Address", "value": with_hex_prefix(str(value))}
    if base == "Optional":
        if not inner:
            raise CadenceError("Optional needs an inner type, e.g. 'Optional:String'")
        return {"type": "Optional", "value": None if value is None else arg(value, inner)}
    if base == "Array":
        if not inner:
            raise CadenceError("Array needs an element type, e.g. 'Array:Int'")
        return {"type": "Array", "value": [arg(item, inner) for item in value]}

    raise CadenceError(f"Unsupported argument type: {type_name}")


def encode_argument(value: dict[str, Any]) -> bytes:
    return json.dumps(value, separators=(",", ":")).encode("utf-8")


def decode_bytes(raw: bytes) -> Any:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CadenceError(f"Invalid JSON-Cadence payload: {exc}") from exc
    return decode(value)


def decode(value: dict[str, Any]) -> Any:
    """Decode a JSON-Cadence value into plain Python data."""
    if not isinstance(value, dict) or "type" not in value:
        raise CadenceError(f"Not a JSON-Cadence value: {value!r}")

    kind = value["type"]
    inner = value.get("value")

    if kind in INTEGER_TYPES:
        return int(inner)
    if kind in FIXED_POINT_TYPES:
        return Decimal(inner)
    if kind in ("String", "Character", "Address"):
        return inner
    if kind == "Bool":
        return bool(inner)
    if kind == "Void":
        return None
    if kind == "Optional":
        return None if inner is None else decode(inner)
    if kind == "Array":
        return [decode(item) for item in inner]
    if kind == "Dictionary":
        return {decode(item["key"]): decode(item["value"]) for item in inner}
    if kind in COMPOSITE_TYPES:
        return decode_fields(inner)
    if kind == "Path":
        return {"domain": inner["domain"], "identifier": inner["identifier"]}
    if kind == "Type":
        return inner.get("staticType")
    if kind == "Capability":
        return dict(inner)

    raise CadenceError(f"Unsupported Cadence type: {kind}")


def decode_fields(composite: dict[str, Any]) -> dict[str, Any]:
    """Flatten a composite's ``fields`` list into a name -> value dict."""
    return {field["name"]: decode(field["value"]) for field in composite.get("fields", [])}
