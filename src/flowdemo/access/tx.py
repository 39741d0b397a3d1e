"""
Transaction Builder - Build, sign, send and follow Flow transactions.

The single logged-in account acts as proposer, payer and authorizer, so
only an envelope signature is needed. Envelope encoding uses rlp, signing
goes through the session's Authorizer (eth-keys secp256k1 over SHA3-256).
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterator, Optional

import rlp

from ..errors import AccessNodeError, TransactionFailedError
from ..identity.session import Authorizer
from ..utils import b64encode, strip_hex_prefix
from . import cadence
from .rpc import AccessClient

logger = logging.getLogger(__name__)

TRANSACTION_DOMAIN_TAG = b"FLOW-V0.0-transaction".ljust(32, b"\x00")
DEFAULT_GAS_LIMIT = 100


class TransactionStatus(enum.IntEnum):
    UNKNOWN = 0
    PENDING = 1
    FINALIZED = 2
    EXECUTED = 3
    SEALED = 4
    EXPIRED = 5

    @classmethod
    def parse(cls, value: Any) -> "TransactionStatus":
        try:
            return cls[str(value).upper()]
        except KeyError:
            return cls.UNKNOWN


def is_executed(status: TransactionStatus) -> bool:
    return status in (TransactionStatus.EXECUTED, TransactionStatus.SEALED)


@dataclass(frozen=True)
class TransactionResult:
    tx_id: str
    status: TransactionStatus
    status_code: int = 0
    error_message: str = ""
    events: list[dict[str, Any]] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.error_message) or self.status == TransactionStatus.EXPIRED

    @classmethod
    def from_response(cls, tx_id: str, data: dict[str, Any]) -> "TransactionResult":
        return cls(
            tx_id=tx_id,
            status=TransactionStatus.parse(data.get("status")),
            status_code=int(data.get("status_code") or 0),
            error_message=data.get("error_message") or "",
            events=list(data.get("events") or []),
        )


@dataclass(frozen=True)
class Transaction:
    script: str
    arguments: list[dict[str, Any]]
    reference_block_id: str
    gas_limit: int
    proposer: str
    key_index: int
    sequence_number: int
    payer: str
    authorizers: list[str]
    envelope_signatures: list[dict[str, Any]] = field(default_factory=list)


def _address_bytes(address: str) -> bytes:
    return bytes.fromhex(strip_hex_prefix(address).rjust(16, "0"))


def _payload_fields(tx: Transaction) -> list[Any]:
    return [
        tx.script.encode("utf-8"),
        [cadence.encode_argument(a) for a in tx.arguments],
        bytes.fromhex(strip_hex_prefix(tx.reference_block_id)),
        tx.gas_limit,
        _address_bytes(tx.proposer),
        tx.key_index,
        tx.sequence_number,
        _address_bytes(tx.payer),
        [_address_bytes(a) for a in tx.authorizers],
    ]


def envelope_message(tx: Transaction) -> bytes:
    """Domain-tagged RLP envelope: what the payer signs."""
    payload_signatures: list[Any] = []
    return TRANSACTION_DOMAIN_TAG + rlp.encode([_payload_fields(tx), payload_signatures])


def build_transaction(
    client: AccessClient,
    code: str,
    authorizer: Authorizer,
    arguments: Optional[list[dict[str, Any]]] = None,
    gas_limit: int = DEFAULT_GAS_LIMIT,
) -> Transaction:
    """
    Build an unsigned transaction proposed, paid and authorized by ``authorizer``.

    Reads the latest sealed block (reference block) and the proposer's key
    sequence number from the access node.
    """
    block = client.get_latest_block()
    account = client.get_account(authorizer.address)

    sequence_number = None
    for key in account.get("keys") or []:
        if int(key.get("index", -1)) == authorizer.key_index:
            sequence_number = int(key.get("sequence_number", 0))
            break
    if sequence_number is None:
        raise AccessNodeError(
            f"Key #{authorizer.key_index} not found on account {authorizer.address}"
        )

    return Transaction(
        script=code,
        arguments=list(arguments or []),
        reference_block_id=block["id"],
        gas_limit=gas_limit,
        proposer=authorizer.address,
        key_index=authorizer.key_index,
        sequence_number=sequence_number,
        payer=authorizer.address,
        authorizers=[authorizer.address],
    )


def sign_envelope(tx: Transaction, authorizer: Authorizer) -> Transaction:
    signature = authorizer.sign(envelope_message(tx))
    entry = {
        "address": strip_hex_prefix(authorizer.address),
        "key_index": str(authorizer.key_index),
        "signature": b64encode(signature),
    }
    return replace(tx, envelope_signatures=[*tx.envelope_signatures, entry])


def to_request_body(tx: Transaction) -> dict[str, Any]:
    return {
        "script": b64encode(tx.script.encode("utf-8")),
        "arguments": [b64encode(cadence.encode_argument(a)) for a in tx.arguments],
        "reference_block_id": strip_hex_prefix(tx.reference_block_id),
        "gas_limit": str(tx.gas_limit),
        "payer": strip_hex_prefix(tx.payer),
        "proposal_key": {
            "address": strip_hex_prefix(tx.proposer),
            "key_index": str(tx.key_index),
            "sequence_number": str(tx.sequence_number),
        },
        "authorizers": [strip_hex_prefix(a) for a in tx.authorizers],
        "payload_signatures": [],
        "envelope_signatures": list(tx.envelope_signatures),
    }


def send_transaction(
    client: AccessClient,
    code: str,
    authorizer: Authorizer,
    arguments: Optional[list[dict[str, Any]]] = None,
    gas_limit: int = DEFAULT_GAS_LIMIT,
) -> str:
    """
    Build, sign and submit a transaction.

    Returns:
        Transaction id (hex)
    """
    tx = build_transaction(client, code, authorizer, arguments=arguments, gas_limit=gas_limit)
    signed = sign_envelope(tx, authorizer)
    tx_id = client.send_transaction(to_request_body(signed))
    logger.info("submitted transaction %s", tx_id)
    return tx_id


def watch_status(
    client: AccessClient,
    tx_id: str,
    poll_interval: float = 1.0,
    timeout: float = 120.0,
) -> Iterator[TransactionResult]:
    """
    Yield a TransactionResult every time the transaction's status changes.

    Stops after an executed or failed result.

    Raises:
        TimeoutError: If the transaction is neither executed nor failed in time
    """
    last: Optional[TransactionStatus] = None
    start = time.time()
    while time.time() - start < timeout:
        result = TransactionResult.from_response(tx_id, client.get_transaction_result(tx_id))
        if result.status != last or result.failed:
            last = result.status
            yield result
        if result.failed or is_executed(result.status):
            return
        time.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_id} not executed within {timeout}s")


def wait_until_executed(
    client: AccessClient,
    tx_id: str,
    on_status: Optional[Callable[[TransactionResult], None]] = None,
    poll_interval: float = 1.0,
    timeout: float = 120.0,
) -> TransactionResult:
    """
    Follow a transaction until it is executed.

    Raises:
        TransactionFailedError: If the transaction reverted or expired
        TimeoutError: If it did not finish within ``timeout``
    """
    final: Optional[TransactionResult] = None
    for result in watch_status(client, tx_id, poll_interval=poll_interval, timeout=timeout):
        logger.debug("transaction %s is %s", tx_id, result.status.name)
        if on_status is not None:
            on_status(result)
        final = result

    if final is None:
        raise TimeoutError(f"Transaction {tx_id} not executed within {timeout}s")
    if final.failed:
        reason = final.error_message or final.status.name.lower()
        raise TransactionFailedError(f"Transaction {tx_id} failed: {reason}", tx_id=tx_id)
    return final
