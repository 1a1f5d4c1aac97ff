from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import FrozenSet, Optional

from .ids import DocumentId, UserId


@dataclass(frozen=True, slots=True)
class TranslationLock:
    """
    Exclusive edit right of one worker on one document.

    At most one lock exists per document. 'completed_units' holds the
    paragraph indices the holder marked as done.
    """
    document_id: DocumentId
    holder_id: UserId
    acquired_at: datetime
    completed_units: FrozenSet[int] = field(default_factory=frozenset)

    def age(self, now: datetime) -> timedelta:
        return now - self.acquired_at

    def is_stale(self, now: datetime, threshold: timedelta) -> bool:
        """Advisory only; a stale lock stays valid until reclaimed."""
        return self.age(now) > threshold


@dataclass(frozen=True, slots=True)
class LockStatus:
    """
    Query result for a document's lock; 'locked=False' means unlocked.

    Fields
    ------
    holder_name : str | None
        Display name for "locked by ..." messages.
    is_stale : bool
        Lock older than the staleness threshold at query time.
    """
    document_id: DocumentId
    locked: bool
    holder_id: Optional[UserId] = None
    holder_name: Optional[str] = None
    acquired_at: Optional[datetime] = None
    is_stale: bool = False
    completed_units: FrozenSet[int] = field(default_factory=frozenset)

    def can_edit(self, worker_id: int) -> bool:
        """True if 'worker_id' holds the lock."""
        return self.locked and self.holder_id == worker_id
