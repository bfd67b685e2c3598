"""WorkLedger exception hierarchy."""

from __future__ import annotations

from collections.abc import Iterable


class WorkLedgerError(Exception):
    """Base exception for all WorkLedger errors."""


class InvalidArgumentError(WorkLedgerError):
    """Malformed input rejected before reaching the store."""


class NotFoundError(WorkLedgerError):
    """A queried class, queue entry or score does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier!r}")


class NoneAvailableError(WorkLedgerError):
    """The monitored queue for a class type is empty."""

    def __init__(self, class_type: str) -> None:
        self.class_type = class_type
        super().__init__(f"No monitored classes available for type {class_type!r}")


class RetryableConflictError(WorkLedgerError):
    """A watched key changed before commit; the batch was not applied."""

    def __init__(self, watched_keys: Iterable[str]) -> None:
        self.watched_keys = tuple(watched_keys)
        super().__init__(f"Concurrent modification of {', '.join(self.watched_keys)}")


class StoreError(WorkLedgerError):
    """Redis command failed."""


class StoreUnavailableError(StoreError):
    """Redis connection or timeout failure."""


class AuthenticationError(StoreError):
    """Redis rejected the supplied credential."""
