"""Shared fixtures: an in-memory access node behind httpx.MockTransport."""

from __future__ import annotations

import base64
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from flowdemo.access.rpc import AccessClient, AccessConfig
from flowdemo.identity.keys import generate_keypair, save_private_key

ADDRESS = "0x01cf0e2f2f715450"
BLOCK_ID = "ab" * 32
TX_ID = "7b" * 32


def _b64_json(value: Any) -> str:
    return base64.b64encode(json.dumps(value).encode("utf-8")).decode("ascii")


def hello_event(height: int, x: int = 4, y: int = 2, tx_id: str = TX_ID) -> dict[str, Any]:
    """A raw REST event as the access node returns it."""
    payload = {
        "type": "Event",
        "value": {
            "id": "A.01cf0e2f2f715450.HelloWorld.CustomEvent",
            "fields": [
                {"name": "hello_x", "value": {"type": "Int", "value": str(x)}},
                {"name": "hello_y", "value": {"type": "Int", "value": str(y)}},
            ],
        },
    }
    return {
        "height": height,
        "type": "A.01cf0e2f2f715450.HelloWorld.CustomEvent",
        "transaction_id": tx_id,
        "transaction_index": "0",
        "event_index": "0",
        "payload": _b64_json(payload),
    }


@dataclass
class FakeAccessNode:
    latest_height: int = 10
    script_result: Any = field(default_factory=lambda: {"type": "Int", "value": "30"})
    accounts: dict[str, dict[str, Any]] = field(default_factory=dict)
    events: list[dict[str, Any]] = field(default_factory=list)
    statuses: list[dict[str, Any]] = field(
        default_factory=lambda: [
            {"status": "Pending", "status_code": 0, "error_message": ""},
            {"status": "Finalized", "status_code": 0, "error_message": ""},
            {"status": "Executed", "status_code": 0, "error_message": ""},
        ]
    )
    requests: list[httpx.Request] = field(default_factory=list)

    def add_account(self, address: str, public_key: str, sequence_number: int = 0) -> None:
        self.accounts[address.replace("0x", "")] = {
            "address": address.replace("0x", ""),
            "balance": "100000",
            "keys": [
                {
                    "index": "0",
                    "public_key": "0x" + public_key,
                    "signing_algorithm": "ECDSA_secp256k1",
                    "hashing_algorithm": "SHA3_256",
                    "sequence_number": str(sequence_number),
                    "weight": "1000",
                    "revoked": False,
                }
            ],
        }

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/v1/scripts":
            return httpx.Response(200, json=_b64_json(self.script_result))

        if path == "/v1/blocks":
            return httpx.Response(
                200, json=[{"header": {"id": BLOCK_ID, "height": str(self.latest_height)}}]
            )

        if path.startswith("/v1/accounts/"):
            account = self.accounts.get(path.rsplit("/", 1)[-1])
            if account is None:
                return httpx.Response(404, json={"code": 404, "message": "account not found"})
            return httpx.Response(200, json=account)

        if path == "/v1/transactions":
            return httpx.Response(201, json={"id": TX_ID})

        if path.startswith("/v1/transaction_results/"):
            status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            return httpx.Response(200, json={**status, "events": []})

        if path == "/v1/events":
            params = request.url.params
            start, end = int(params["start_height"]), int(params["end_height"])
            blocks: dict[int, dict[str, Any]] = {}
            for event in self.events:
                if event["type"] == params["type"] and start <= event["height"] <= end:
                    block = blocks.setdefault(
                        event["height"],
                        {
                            "block_id": f"{event['height']:064x}",
                            "block_height": str(event["height"]),
                            "block_timestamp": "2024-01-01T00:00:00Z",
                            "events": [],
                        },
                    )
                    raw = {k: v for k, v in event.items() if k != "height"}
                    block["events"].append(raw)
            return httpx.Response(200, json=[blocks[h] for h in sorted(blocks)])

        return httpx.Response(404, json={"code": 404, "message": f"no route {path}"})


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path):
    """Keep keys, sessions and PRIVATE_KEY out of the real home directory."""
    home = tmp_path / ".flowdemo"
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("PRIVATE_KEY", None)
        with patch("flowdemo.identity.keys.FLOWDEMO_ENV", home / ".env"):
            with patch("flowdemo.identity.session.SESSION_FILE", home / "session.json"):
                yield home


@pytest.fixture()
def node() -> FakeAccessNode:
    return FakeAccessNode()


@pytest.fixture()
def client(node: FakeAccessNode) -> AccessClient:
    access = AccessClient(
        AccessConfig(access_node="http://flow.test"),
        transport=httpx.MockTransport(node.handler),
    )
    yield access
    access.close()


@pytest.fixture()
def flowdemo_home(isolated_home: Path) -> Path:
    """The temporary ~/.flowdemo directory, created."""
    isolated_home.mkdir(exist_ok=True)
    return isolated_home


@pytest.fixture()
def keypair(flowdemo_home: Path) -> tuple[str, str]:
    """Generate and save a key to the temp flowdemo home."""
    private_key, public_key = generate_keypair()
    save_private_key(private_key, flowdemo_home / ".env")
    return private_key, public_key
