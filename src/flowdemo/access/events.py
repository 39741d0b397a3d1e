"""
Event queries.

Raw events come back from the access node with their payload decoded into
``data``; ``normalize_events`` then strips the prefix token from every
field name in ``data`` so callers get a stable shape.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ..utils import normalize_keys, strip_hex_prefix
from .rpc import AccessClient
from .scripts import DEFAULT_HELLO_ADDRESS, HELLO_CONTRACT_NAME, HELLO_EVENT_NAME

logger = logging.getLogger(__name__)


def event_type(contract_address: str, contract_name: str, event_name: str) -> str:
    """Fully-qualified event type, e.g. ``A.01cf0e2f2f715450.HelloWorld.CustomEvent``."""
    return f"A.{strip_hex_prefix(contract_address)}.{contract_name}.{event_name}"


def normalize_events(events: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """
    Normalize the ``data`` field names of every event.

    Order and length are preserved; fields other than ``data`` pass through.
    """
    return [{**event, "data": normalize_keys(event["data"])} for event in events]


def fetch_events(
    client: AccessClient,
    event_type: str,
    from_height: int = 0,
    to_height: Optional[int] = None,
) -> list[dict[str, Any]]:
    """
    Fetch raw events of ``event_type`` between two heights (inclusive).

    Args:
        client: Access node client
        event_type: Fully-qualified event type (see ``event_type()``)
        from_height: First height, default 0
        to_height: Last height, default the latest sealed block

    Raises:
        ValueError: If the range is negative or inverted
    """
    if from_height < 0:
        raise ValueError(f"from_height must be >= 0, got {from_height}")
    if to_height is None:
        to_height = client.get_latest_block_height()
        logger.debug("using latest sealed height %d", to_height)
    if to_height < from_height:
        raise ValueError(f"to_height ({to_height}) is below from_height ({from_height})")

    return client.get_events(event_type, from_height, to_height)


def get_hello_events(
    client: AccessClient,
    contract_address: str = DEFAULT_HELLO_ADDRESS,
    contract_name: str = HELLO_CONTRACT_NAME,
    event_name: str = HELLO_EVENT_NAME,
    from_height: int = 0,
    to_height: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Fetch and normalize events emitted by the sample contract."""
    events = fetch_events(
        client,
        event_type(contract_address, contract_name, event_name),
        from_height=from_height,
        to_height=to_height,
    )
    return normalize_events(events)
