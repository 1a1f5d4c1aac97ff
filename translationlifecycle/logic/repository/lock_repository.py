"""
===============================================================================
Lock Repository Protocol – single active lock per document
-------------------------------------------------------------------------------
Design:
    - Keyed by document id; at most one record per document.
    - create_if_absent() is the conditional write that makes acquire atomic.
    - Holder-scoped writes take the holder id so a stale caller cannot touch
      a lock that was reclaimed and re-acquired meanwhile.
===============================================================================
"""
from __future__ import annotations
from typing import Protocol, Optional, List, Iterable

from translationlifecycle.models.translation_lock import TranslationLock


class LockRepository(Protocol):
    """
    Methods
    -------
    get(doc_id) -> Optional[TranslationLock]
    create_if_absent(lock) -> bool
        Insert unless a lock for the document exists; True if inserted.
    delete(doc_id) -> bool
        Remove any lock; True if one existed.
    delete_held_by(doc_id, holder_id) -> bool
        Remove the lock only if 'holder_id' holds it.
    update_completed_units(doc_id, holder_id, units) -> bool
        Replace the completed set only if 'holder_id' holds the lock.
    list_all() -> list[TranslationLock]
    """

    def get(self, doc_id: int) -> Optional[TranslationLock]:
        ...

    def create_if_absent(self, lock: TranslationLock) -> bool:
        ...

    def delete(self, doc_id: int) -> bool:
        ...

    def delete_held_by(self, doc_id: int, holder_id: int) -> bool:
        ...

    def update_completed_units(self, doc_id: int, holder_id: int, units: Iterable[int]) -> bool:
        ...

    def list_all(self) -> List[TranslationLock]:
        ...
