__all__ = [
    # Normalization
    "normalize_keys",
    "strip_key_prefix",
    "normalize_events",
    # Events
    "event_type",
    "fetch_events",
    "get_hello_events",
    # Access node
    "AccessClient",
    "AccessConfig",
    # Transactions
    "Transaction",
    "TransactionResult",
    "TransactionStatus",
    "is_executed",
    "send_transaction",
    "wait_until_executed",
    "watch_status",
    # Session
    "Authorizer",
    "CurrentUser",
    "is_logged_in",
    # Keys
    "generate_keypair",
    "get_public_key",
    "load_private_key",
    "sign_digest",
    # Errors
    "FlowDemoError",
    "AccessNodeError",
    "CadenceError",
    "SessionError",
    "TransactionFailedError",
]

from .utils import normalize_keys, strip_key_prefix
from .errors import (
    AccessNodeError,
    CadenceError,
    FlowDemoError,
    SessionError,
    TransactionFailedError,
)
from .access.rpc import AccessClient, AccessConfig
from .identity.keys import generate_keypair, get_public_key, load_private_key, sign_digest
from .identity.session import Authorizer, CurrentUser, is_logged_in
from .access.tx import (
    Transaction,
    TransactionResult,
    TransactionStatus,
    is_executed,
    send_transaction,
    wait_until_executed,
    watch_status,
)
from .access.events import event_type, fetch_events, get_hello_events, normalize_events
