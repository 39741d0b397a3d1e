"""
Wallet session for flowdemo.

``CurrentUser`` is the observable login state: subscribers are called with
the current user snapshot (a dict, or None when logged out) on subscribe
and after every login/logout. The session is persisted to
~/.flowdemo/session.json so separate CLI invocations share it.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from ..access.rpc import AccessClient
from ..errors import SessionError
from ..utils import strip_hex_prefix, uuidv7, with_hex_prefix
from .keys import FLOWDEMO_DIR, get_public_key, load_private_key, sign_digest

logger = logging.getLogger(__name__)

SESSION_FILE = FLOWDEMO_DIR / "session.json"

SIGNATURE_ALGORITHM = "ECDSA_secp256k1"
HASH_ALGORITHM = "SHA3_256"

Subscriber = Callable[[Optional[dict[str, Any]]], None]


@dataclass(frozen=True)
class Authorizer:
    """
    Signing role for a transaction (proposer, payer and authorizer).

    Attributes:
        address: 0x-prefixed Flow account address
        key_index: Index of the signing key on the account
        signer: Callable turning a SHA3-256 digest into a 64-byte signature
    """
    address: str
    key_index: int
    signer: Callable[[bytes], bytes]

    def sign(self, message: bytes) -> bytes:
        return self.signer(hashlib.sha3_256(message).digest())


def is_logged_in(user: Optional[dict[str, Any]]) -> bool:
    return isinstance(user, dict) and bool(user.get("cid"))


class CurrentUser:
    """
    Observable wallet session.

    Args:
        session_path: Where the session is persisted (default: ~/.flowdemo/session.json)
        env_path: .env file holding PRIVATE_KEY (default: ~/.flowdemo/.env)
    """

    def __init__(
        self,
        session_path: Optional[Path] = None,
        env_path: Optional[Path] = None,
    ) -> None:
        self.session_path = session_path or SESSION_FILE
        self.env_path = env_path
        self._subscribers: list[Subscriber] = []
        self._user = self._load()

    def _load(self) -> Optional[dict[str, Any]]:
        if not self.session_path.exists():
            return None
        try:
            user = json.loads(self.session_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            # Corrupted session, drop it
            logger.warning("discarding unreadable session file %s", self.session_path)
            self.session_path.unlink(missing_ok=True)
            return None
        if not isinstance(user, dict):
            logger.warning("discarding malformed session file %s", self.session_path)
            self.session_path.unlink(missing_ok=True)
            return None
        return user if is_logged_in(user) else None

    def _store(self, user: Optional[dict[str, Any]]) -> None:
        if user is None:
            self.session_path.unlink(missing_ok=True)
        else:
            self.session_path.parent.mkdir(parents=True, exist_ok=True)
            self.session_path.write_text(json.dumps(user, indent=2), encoding="utf-8")
        self._user = user
        self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            callback(snapshot)

    def snapshot(self) -> Optional[dict[str, Any]]:
        """Copy of the current user, or None when logged out."""
        if self._user is None:
            return None
        return json.loads(json.dumps(self._user))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for session changes.

        The callback is invoked immediately with the current snapshot.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)
        callback(self.snapshot())

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def authenticate(
        self,
        client: AccessClient,
        address: str,
        key_index: int = 0,
        name: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Log in as ``address`` after checking that the local key controls it.

        Raises:
            SessionError: If no local key exists or it does not match the account key
        """
        try:
            private_key = load_private_key(self.env_path)
            local_public = get_public_key(private_key)
        except ValueError as exc:
            raise SessionError(str(exc)) from exc

        account = client.get_account(address)
        account_key = _find_key(account, key_index)
        if account_key is None:
            raise SessionError(f"Account {with_hex_prefix(address)} has no key #{key_index}")
        if account_key.get("revoked"):
            raise SessionError(f"Key #{key_index} of {with_hex_prefix(address)} is revoked")

        if strip_hex_prefix(account_key.get("public_key", "")).lower() != local_public:
            raise SessionError(
                f"Local key does not match key #{key_index} of {with_hex_prefix(address)}"
            )
        for field_name, expected in (
            ("signing_algorithm", SIGNATURE_ALGORITHM),
            ("hashing_algorithm", HASH_ALGORITHM),
        ):
            actual = account_key.get(field_name)
            if actual and actual != expected:
                raise SessionError(f"Key #{key_index} uses {actual}, expected {expected}")

        addr = with_hex_prefix(address)
        user = {
            "addr": addr,
            "cid": str(uuidv7()),
            "keyId": key_index,
            "loggedIn": True,
            "identity": {"name": name or addr},
        }
        logger.info("authenticated %s with key #%d", addr, key_index)
        self._store(user)
        return user

    def unauthenticate(self) -> None:
        logger.info("session cleared")
        self._store(None)

    def authorization(self) -> Authorizer:
        """
        Authorizer for the logged-in account.

        Raises:
            SessionError: If nobody is logged in or the local key is missing or malformed
        """
        user = self._user
        if not is_logged_in(user):
            raise SessionError("Not logged in. Run 'flowdemo login' first.")
        try:
            private_key = load_private_key(self.env_path)
            get_public_key(private_key)
        except ValueError as exc:
            raise SessionError(str(exc)) from exc

        return Authorizer(
            address=user["addr"],
            key_index=int(user.get("keyId", 0)),
            signer=lambda digest: sign_digest(digest, private_key),
        )


def _find_key(account: dict[str, Any], key_index: int) -> Optional[dict[str, Any]]:
    for key in account.get("keys") or []:
        if int(key.get("index", -1)) == key_index:
            return key
    return None
