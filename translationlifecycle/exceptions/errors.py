"""Lifecycle coordinator exceptions.

Routine conditions (InvalidTransition, AlreadyLocked, NotLockHolder) carry
enough context for an actionable message. StoreUnavailable wraps failures
of the backing stores and is never retried here.
"""
from __future__ import annotations

from typing import Optional


class LifecycleError(Exception):
    """Base exception for the translation lifecycle feature."""


class InvalidTransition(LifecycleError):
    """Raised when an action's status precondition does not hold."""

    def __init__(self, status, action, detail: str = "") -> None:
        self.status = status
        self.action = action
        self.detail = detail
        status_txt = getattr(status, "value", status)
        action_txt = getattr(action, "value", action)
        msg = f"Action '{action_txt}' is not allowed in status '{status_txt}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class AlreadyLocked(LifecycleError):
    """Raised when another worker holds the document's lock."""

    def __init__(self, document_id: int, holder_id: int, holder_name: Optional[str] = None) -> None:
        self.document_id = document_id
        self.holder_id = holder_id
        self.holder_name = holder_name
        who = holder_name or f"user {holder_id}"
        super().__init__(f"Document {document_id} is being edited by {who}")


class NotLockHolder(LifecycleError):
    """Raised when the caller does not hold the document's lock."""

    def __init__(self, document_id: int, worker_id: int, holder_id: Optional[int] = None) -> None:
        self.document_id = document_id
        self.worker_id = worker_id
        self.holder_id = holder_id
        if holder_id is None:
            msg = f"Document {document_id} is not locked; user {worker_id} holds no lock"
        else:
            msg = f"User {worker_id} does not hold the lock on document {document_id}"
        super().__init__(msg)


class VersionNotFound(LifecycleError):
    """Raised when no version applies to the document's current status."""

    def __init__(self, document_id: int, status) -> None:
        self.document_id = document_id
        self.status = status
        super().__init__(
            f"No current version for document {document_id} in status "
            f"'{getattr(status, 'value', status)}'"
        )


class DocumentNotFound(LifecycleError):
    """Raised for unknown document ids."""

    def __init__(self, document_id: int) -> None:
        self.document_id = document_id
        super().__init__(f"Document {document_id} does not exist")


class StoreUnavailable(LifecycleError):
    """Raised when a backing store call fails."""


class InvalidContent(LifecycleError, ValueError):
    """Raised for malformed input: negative unit indices, empty memos, duplicate originals."""
