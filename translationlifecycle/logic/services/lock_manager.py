"""
===============================================================================
LockManager – pessimistic, single-holder edit locks with staleness flag
-------------------------------------------------------------------------------
Operations:
    acquire(document_id, worker_id)        idempotent for the current holder
    query(document_id)                     never raises for unlocked documents
    release(document_id, worker_id)        holder only
    reclaim(document_id, admin_id)         unconditional administrative override
    record_progress(document_id, worker_id, unit_index)

Staleness:
    A lock older than the threshold (default 24 h, [Locks] stale_after_hours)
    is reported as stale at query time. Locks never expire on their own;
    an administrator has to reclaim them.

Concurrency:
    Each operation runs in one UnitOfWork transaction; acquire relies on the
    store's conditional insert, so two concurrent acquisitions cannot both
    succeed.
    Success entries are written to the audit log only after the outermost
    transaction commits; rejections are logged at WARNING right away.
===============================================================================
"""
from __future__ import annotations

from datetime import datetime, timedelta
from functools import partial
from typing import Callable, Iterable, List, Optional

from core.config.config_service import config_service
from core.helpers.date_time_helper import utc_now
from core.logging.logic.logger import logger
from translationlifecycle.exceptions.errors import AlreadyLocked, InvalidContent, NotLockHolder
from translationlifecycle.logic.adapters.identity_provider import IdentityProvider, StaticIdentityProvider
from translationlifecycle.logic.repository.lock_repository import LockRepository
from translationlifecycle.logic.repository.unit_of_work import UnitOfWork
from translationlifecycle.models.translation_lock import LockStatus, TranslationLock

FEATURE = "TranslationLifecycle"


def default_stale_threshold() -> timedelta:
    return timedelta(hours=config_service.locks.stale_after_hours)


class LockManager:
    """
    Grants, queries and releases the exclusive edit lock of a document.

    Parameters
    ----------
    locks : LockRepository
        Lock store keyed by document id.
    uow : UnitOfWork
        Transaction boundary shared with the other lifecycle stores.
    identity : IdentityProvider, optional
        Used for holder display names only.
    clock : Callable[[], datetime], optional
        Wall clock returning aware UTC datetimes.
    stale_after : timedelta, optional
        Staleness threshold; defaults to the configured value.
    """

    def __init__(
        self,
        locks: LockRepository,
        uow: UnitOfWork,
        *,
        identity: Optional[IdentityProvider] = None,
        clock: Callable[[], datetime] = utc_now,
        stale_after: Optional[timedelta] = None,
    ) -> None:
        self._locks = locks
        self._uow = uow
        self._identity = identity or StaticIdentityProvider()
        self._clock = clock
        self._stale_after = stale_after if stale_after is not None else default_stale_threshold()

    @property
    def stale_after(self) -> timedelta:
        return self._stale_after

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #
    def acquire(
        self, document_id: int, worker_id: int, *, seed_units: Iterable[int] = ()
    ) -> TranslationLock:
        """
        Grant the lock to 'worker_id' or return the lock it already holds.

        'seed_units' pre-fills the completed set of a newly created lock
        (e.g. from a handover); it is ignored when the lock already exists.

        Raises
        ------
        AlreadyLocked
            Another worker holds the lock.
        """
        with self._uow.transaction():
            existing = self._locks.get(document_id)
            if existing is None:
                lock = TranslationLock(
                    document_id=document_id,
                    holder_id=worker_id,
                    acquired_at=self._clock(),
                    completed_units=_validated(seed_units),
                )
                if self._locks.create_if_absent(lock):
                    self._log_committed("LockAcquired", document_id, worker_id)
                    return lock
                existing = self._locks.get(document_id)
            if existing is not None and existing.holder_id == worker_id:
                return existing
        holder_id = existing.holder_id if existing is not None else -1
        self._reject("LockConflict", document_id, worker_id, f"held by {holder_id}")
        raise AlreadyLocked(document_id, holder_id, self._identity.display_name(holder_id))

    def release(self, document_id: int, worker_id: int) -> None:
        """Destroy the lock held by 'worker_id'."""
        with self._uow.transaction():
            if not self._locks.delete_held_by(document_id, worker_id):
                current = self._locks.get(document_id)
                self._reject("ReleaseDenied", document_id, worker_id)
                raise NotLockHolder(document_id, worker_id, current.holder_id if current else None)
            self._log_committed("LockReleased", document_id, worker_id)

    def reclaim(self, document_id: int, admin_id: int) -> Optional[TranslationLock]:
        """
        Destroy any lock on the document regardless of its holder.

        Returns the removed lock, or None if the document was not locked.
        """
        with self._uow.transaction():
            existing = self._locks.get(document_id)
            if existing is not None:
                self._locks.delete(document_id)
                self._log_committed(
                    "LockReclaimed", document_id, admin_id,
                    f"holder={existing.holder_id} stale={existing.is_stale(self._clock(), self._stale_after)}",
                )
        return existing

    def record_progress(self, document_id: int, worker_id: int, completed_unit_index: int) -> TranslationLock:
        """Add one completed paragraph index to the holder's set."""
        index = _validated_index(completed_unit_index)
        with self._uow.transaction():
            lock = self.require_holder(document_id, worker_id)
            units = lock.completed_units | {index}
            self._locks.update_completed_units(document_id, worker_id, units)
        return TranslationLock(lock.document_id, lock.holder_id, lock.acquired_at, units)

    def set_progress(self, document_id: int, worker_id: int, completed_units: Iterable[int]) -> TranslationLock:
        """Replace the holder's completed set (used when a draft is saved)."""
        units = _validated(completed_units)
        with self._uow.transaction():
            lock = self.require_holder(document_id, worker_id)
            self._locks.update_completed_units(document_id, worker_id, units)
        return TranslationLock(lock.document_id, lock.holder_id, lock.acquired_at, units)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    def require_holder(self, document_id: int, worker_id: int) -> TranslationLock:
        """Return the lock if 'worker_id' holds it, else raise NotLockHolder."""
        lock = self._locks.get(document_id)
        if lock is None or lock.holder_id != worker_id:
            self._reject("NotLockHolder", document_id, worker_id)
            raise NotLockHolder(document_id, worker_id, lock.holder_id if lock else None)
        return lock

    def current(self, document_id: int) -> Optional[TranslationLock]:
        return self._locks.get(document_id)

    def query(self, document_id: int) -> LockStatus:
        """Lock presence, holder, age-based staleness; unlocked is not an error."""
        return self._to_status(document_id, self._locks.get(document_id))

    def list_locks(self) -> List[LockStatus]:
        return [self._to_status(lock.document_id, lock) for lock in self._locks.list_all()]

    def stale_locks(self) -> List[LockStatus]:
        """Locks past the threshold, oldest first, for administrators."""
        return [s for s in self.list_locks() if s.is_stale]

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _to_status(self, document_id: int, lock: Optional[TranslationLock]) -> LockStatus:
        if lock is None:
            return LockStatus(document_id=document_id, locked=False)
        return LockStatus(
            document_id=document_id,
            locked=True,
            holder_id=lock.holder_id,
            holder_name=self._identity.display_name(lock.holder_id),
            acquired_at=lock.acquired_at,
            is_stale=lock.is_stale(self._clock(), self._stale_after),
            completed_units=lock.completed_units,
        )

    def _log_committed(
        self, event: str, document_id: int, user_id: int, message: Optional[str] = None
    ) -> None:
        self._uow.after_commit(partial(
            logger.log, FEATURE, event, user_id=user_id, reference_id=str(document_id), message=message,
        ))

    @staticmethod
    def _reject(event: str, document_id: int, worker_id: int, message: Optional[str] = None) -> None:
        logger.log(FEATURE, event, user_id=worker_id, level="WARNING",
                   reference_id=str(document_id), message=message)


def _validated_index(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidContent(f"Paragraph index must be a non-negative integer, got {value!r}")
    return value


def _validated(units: Iterable[int]) -> frozenset[int]:
    return frozenset(_validated_index(u) for u in units)
