from __future__ import annotations

import base64
import os
import time
from dataclasses import dataclass
from typing import Any, Mapping


def strip_key_prefix(key: str) -> str:
    """Drop everything up to and including the first underscore.

    Keys without an underscore come back unchanged.
    """
    _, sep, remainder = key.partition("_")
    return remainder if sep else key


def normalize_keys(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a new record with the prefix token stripped from every key.

    Values are copied as-is, nested records are not visited. When two keys
    reduce to the same name the one seen last wins.

    Args:
        record: Flat mapping of field name to value

    Returns:
        Fresh dict; ``record`` is left untouched
    """
    result: dict[str, Any] = {}
    for key, value in record.items():
        result[strip_key_prefix(key)] = value
    return result


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.b64decode(value + padding)


def strip_hex_prefix(value: str) -> str:
    return value[2:] if value.lower().startswith("0x") else value


def with_hex_prefix(value: str) -> str:
    return "0x" + strip_hex_prefix(value)


@dataclass(frozen=True)
class UuidV7:
    value: str

    def __str__(self) -> str:
        return self.value


def uuidv7() -> UuidV7:
    ts_ms = int(time.time() * 1000)
    time_bytes = ts_ms.to_bytes(6, "big")
    rand = int.from_bytes(os.urandom(10), "big")
    rand_a = (rand >> 68) & 0x0FFF
    rand_b = (rand >> 6) & ((1 << 62) - 1)

    raw = bytearray(time_bytes)
    raw.append(0x70 | ((rand_a >> 8) & 0x0F))
    raw.append(rand_a & 0xFF)
    raw.append(0x80 | ((rand_b >> 56) & 0x3F))
    raw.extend((rand_b & ((1 << 56) - 1)).to_bytes(7, "big"))
    hexed = raw.hex()
    return UuidV7(f"{hexed[0:8]}-{hexed[8:12]}-{hexed[12:16]}-{hexed[16:20]}-{hexed[20:32]}")
