"""
Access Node client for the Flow REST API.

Lightweight alternative to a full SDK: uses httpx for HTTP and the local
JSON-Cadence codec for arguments and results. Supports script execution,
transaction submission and result lookup, sealed block queries, account
lookup and event range queries.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..errors import AccessNodeError
from ..utils import b64decode, b64encode, strip_hex_prefix
from . import cadence

logger = logging.getLogger(__name__)

# Default endpoint (Flow emulator REST API)
DEFAULT_ACCESS_NODE = "http://localhost:8888"
DEFAULT_TIMEOUT = 30.0

# The REST API rejects event queries spanning more than 250 heights
MAX_EVENT_RANGE = 250


@dataclass(frozen=True)
class AccessConfig:
    access_node: str = DEFAULT_ACCESS_NODE
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "AccessConfig":
        """Build a config from FLOW_ACCESS_NODE / FLOW_ACCESS_TIMEOUT."""
        return cls(
            access_node=os.environ.get("FLOW_ACCESS_NODE", DEFAULT_ACCESS_NODE),
            timeout=float(os.environ.get("FLOW_ACCESS_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )


class AccessClient:
    """
    Client for a single access node.

    Args:
        config: Endpoint and timeout settings
        transport: Optional httpx transport (tests pass an httpx.MockTransport)
    """

    def __init__(
        self,
        config: Optional[AccessConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config or AccessConfig.from_env()
        self._client = httpx.Client(
            base_url=self.config.access_node.rstrip("/") + "/v1",
            timeout=self.config.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AccessClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------ HTTP

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        logger.debug("%s %s %s", method, path, kwargs.get("params") or "")
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise AccessNodeError(
                f"Cannot reach access node {self.config.access_node}: {exc}"
            ) from exc

        if response.is_error:
            raise AccessNodeError(
                f"Access node error {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except json.JSONDecodeError as exc:
            raise AccessNodeError(f"Malformed response from {path}: {exc}") from exc

    # --------------------------------------------------------------- Scripts

    def execute_script(
        self,
        code: str,
        arguments: Optional[list[dict[str, Any]]] = None,
        block_height: str = "sealed",
    ) -> Any:
        """
        Execute a read-only Cadence script.

        Args:
            code: Cadence script source
            arguments: JSON-Cadence arguments (see ``cadence.arg``)
            block_height: Height to execute against ("sealed", "final" or a number)

        Returns:
            Decoded script result
        """
        body = {
            "script": b64encode(code.encode("utf-8")),
            "arguments": [b64encode(cadence.encode_argument(a)) for a in arguments or []],
        }
        result = self._request(
            "POST", "/scripts", params={"block_height": block_height}, json=body
        )
        return cadence.decode_bytes(b64decode(result))

    # ---------------------------------------------------------------- Blocks

    def get_latest_block(self) -> dict[str, Any]:
        """Return the header of the latest sealed block."""
        blocks = self._request("GET", "/blocks", params={"height": "sealed"})
        if not blocks:
            raise AccessNodeError("Access node returned no sealed block")
        return blocks[0]["header"]

    def get_latest_block_height(self) -> int:
        return int(self.get_latest_block()["height"])

    # -------------------------------------------------------------- Accounts

    def get_account(self, address: str) -> dict[str, Any]:
        """Return the account with its keys expanded."""
        return self._request(
            "GET", f"/accounts/{strip_hex_prefix(address)}", params={"expand": "keys"}
        )

    # ---------------------------------------------------------- Transactions

    def send_transaction(self, body: dict[str, Any]) -> str:
        """Submit a signed transaction body and return its id."""
        result = self._request("POST", "/transactions", json=body)
        tx_id = result.get("id")
        if not tx_id:
            raise AccessNodeError("Access node did not return a transaction id")
        return tx_id

    def get_transaction_result(self, tx_id: str) -> dict[str, Any]:
        return self._request("GET", f"/transaction_results/{tx_id}")

    # ---------------------------------------------------------------- Events

    def get_events(
        self, event_type: str, start_height: int, end_height: int
    ) -> list[dict[str, Any]]:
        """
        Query events of one type over an inclusive height range.

        The range is split into windows of MAX_EVENT_RANGE heights.

        Returns:
            Flat list of raw events in height order, payload decoded into ``data``
        """
        events: list[dict[str, Any]] = []
        window_start = start_height
        while window_start <= end_height:
            window_end = min(window_start + MAX_EVENT_RANGE - 1, end_height)
            blocks = self._request(
                "GET",
                "/events",
                params={
                    "type": event_type,
                    "start_height": str(window_start),
                    "end_height": str(window_end),
                },
            )
            for block in blocks:
                events.extend(_flatten_block_events(block))
            window_start = window_end + 1

        logger.debug(
            "fetched %d %s events in [%d, %d]", len(events), event_type, start_height, end_height
        )
        return events


def _flatten_block_events(block: dict[str, Any]) -> list[dict[str, Any]]:
    flat = []
    for event in block.get("events") or []:
        payload = cadence.decode_bytes(b64decode(event["payload"]))
        flat.append(
            {
                "type": event["type"],
                "transactionId": event["transaction_id"],
                "transactionIndex": int(event["transaction_index"]),
                "eventIndex": int(event["event_index"]),
                "blockId": block.get("block_id"),
                "blockHeight": int(block["block_height"]),
                "blockTimestamp": block.get("block_timestamp"),
                "data": payload,
            }
        )
    return flat


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message", response.text)
    except (json.JSONDecodeError, AttributeError):
        return response.text
