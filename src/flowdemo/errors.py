"""Error hierarchy shared by the access layer, identity layer and CLI."""

from __future__ import annotations


class FlowDemoError(RuntimeError):
    exit_code: int = 1


class AccessNodeError(FlowDemoError):
    """The access node rejected a request or returned a malformed response."""

    exit_code = 2

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CadenceError(FlowDemoError):
    exit_code = 3


class SessionError(FlowDemoError):
    exit_code = 4


class TransactionFailedError(FlowDemoError):
    exit_code = 5

    def __init__(self, message: str, tx_id: str | None = None) -> None:
        super().__init__(message)
        self.tx_id = tx_id
