"""
translationlifecycle/tests/test_lock_manager.py

Single-holder locks: idempotent acquire, conflicts, staleness, reclaim and
linearizable acquisition under concurrent requests.
"""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from core.logging.logic.logger import logger
from translationlifecycle.exceptions import AlreadyLocked, InvalidContent, NotLockHolder
from translationlifecycle.factory import build_lifecycle
from translationlifecycle.logic.adapters.identity_provider import StaticIdentityProvider

from .support import ADMIN, ALICE, BOB


def test_acquire_creates_lock(lifecycle, make_document, clock) -> None:
    doc_id = make_document()
    lock = lifecycle.locks.acquire(doc_id, ALICE)
    assert lock.holder_id == ALICE
    assert lock.acquired_at == clock.now
    assert lock.completed_units == frozenset()

    status = lifecycle.locks.query(doc_id)
    assert status.locked and status.holder_id == ALICE
    assert status.holder_name == "Alice"
    assert status.can_edit(ALICE) and not status.can_edit(BOB)


def test_acquire_is_idempotent_for_holder(lifecycle, make_document, clock) -> None:
    doc_id = make_document()
    first = lifecycle.locks.acquire(doc_id, ALICE)
    clock.advance(hours=1)
    again = lifecycle.locks.acquire(doc_id, ALICE)
    assert again == first


def test_conflict_leaves_original_lock_unchanged(lifecycle, make_document) -> None:
    doc_id = make_document()
    lifecycle.locks.acquire(doc_id, ALICE)
    lifecycle.locks.record_progress(doc_id, ALICE, 2)
    before = lifecycle.locks.query(doc_id)

    with pytest.raises(AlreadyLocked) as exc:
        lifecycle.locks.acquire(doc_id, BOB)
    assert exc.value.holder_id == ALICE
    assert "Alice" in str(exc.value)
    assert lifecycle.locks.query(doc_id) == before


def test_conflict_is_logged_as_warning(lifecycle, make_document) -> None:
    doc_id = make_document()
    lifecycle.locks.acquire(doc_id, ALICE)
    before = len(logger.query_logs(event="LockConflict", user_id=BOB, level="WARNING"))
    with pytest.raises(AlreadyLocked):
        lifecycle.locks.acquire(doc_id, BOB)
    assert len(logger.query_logs(event="LockConflict", user_id=BOB, level="WARNING")) == before + 1


def test_query_unlocked_is_not_an_error(lifecycle, make_document) -> None:
    doc_id = make_document()
    status = lifecycle.locks.query(doc_id)
    assert not status.locked
    assert status.holder_id is None and not status.is_stale


def test_stale_after_25_hours_then_reclaim(lifecycle, make_document, clock) -> None:
    doc_id = make_document()
    lifecycle.locks.acquire(doc_id, ALICE)
    clock.advance(hours=25)

    status = lifecycle.locks.query(doc_id)
    assert status.locked and status.is_stale
    assert [s.document_id for s in lifecycle.locks.stale_locks()] == [doc_id]

    removed = lifecycle.locks.reclaim(doc_id, ADMIN)
    assert removed is not None and removed.holder_id == ALICE
    assert not lifecycle.locks.query(doc_id).locked

    assert lifecycle.locks.acquire(doc_id, BOB).holder_id == BOB


def test_staleness_is_strictly_greater_than_threshold(lifecycle, make_document, clock) -> None:
    doc_id = make_document()
    lifecycle.locks.acquire(doc_id, ALICE)
    clock.advance(hours=24)
    assert not lifecycle.locks.query(doc_id).is_stale
    clock.advance(seconds=1)
    assert lifecycle.locks.query(doc_id).is_stale
    # advisory only: still held
    with pytest.raises(AlreadyLocked):
        lifecycle.locks.acquire(doc_id, BOB)


def test_reclaim_without_lock_returns_none(lifecycle, make_document) -> None:
    assert lifecycle.locks.reclaim(make_document(), ADMIN) is None


def test_release_requires_holder(lifecycle, make_document) -> None:
    doc_id = make_document()
    with pytest.raises(NotLockHolder) as exc:
        lifecycle.locks.release(doc_id, ALICE)
    assert exc.value.holder_id is None

    lifecycle.locks.acquire(doc_id, ALICE)
    with pytest.raises(NotLockHolder) as exc:
        lifecycle.locks.release(doc_id, BOB)
    assert exc.value.holder_id == ALICE
    assert lifecycle.locks.query(doc_id).holder_id == ALICE

    lifecycle.locks.release(doc_id, ALICE)
    assert not lifecycle.locks.query(doc_id).locked


def test_record_progress(lifecycle, make_document) -> None:
    doc_id = make_document()
    lifecycle.locks.acquire(doc_id, ALICE)
    lifecycle.locks.record_progress(doc_id, ALICE, 0)
    lock = lifecycle.locks.record_progress(doc_id, ALICE, 3)
    assert lock.completed_units == {0, 3}
    assert lifecycle.locks.query(doc_id).completed_units == {0, 3}

    with pytest.raises(NotLockHolder):
        lifecycle.locks.record_progress(doc_id, BOB, 1)
    with pytest.raises(InvalidContent):
        lifecycle.locks.record_progress(doc_id, ALICE, -1)
    assert lifecycle.locks.query(doc_id).completed_units == {0, 3}


def test_seed_units_only_for_new_lock(lifecycle, make_document) -> None:
    doc_id = make_document()
    lock = lifecycle.locks.acquire(doc_id, ALICE, seed_units=[0, 1, 4])
    assert lock.completed_units == {0, 1, 4}
    again = lifecycle.locks.acquire(doc_id, ALICE, seed_units=[2])
    assert again.completed_units == {0, 1, 4}


def test_custom_stale_threshold(db_path, clock, make_document) -> None:
    doc_id = make_document()
    app = build_lifecycle(db_path, identity=StaticIdentityProvider(), clock=clock,
                          stale_after=timedelta(minutes=30))
    try:
        app.locks.acquire(doc_id, ALICE)
        clock.advance(minutes=31)
        assert app.locks.query(doc_id).is_stale
    finally:
        app.close()


def test_concurrent_acquire_single_connection(lifecycle, make_document) -> None:
    doc_id = make_document()
    workers = list(range(100, 116))
    barrier = threading.Barrier(len(workers))

    def attempt(worker_id: int) -> bool:
        barrier.wait()
        try:
            lifecycle.locks.acquire(doc_id, worker_id)
            return True
        except AlreadyLocked:
            return False

    with ThreadPoolExecutor(max_workers=len(workers)) as pool:
        results = list(pool.map(attempt, workers))

    assert results.count(True) == 1
    winner = workers[results.index(True)]
    assert lifecycle.locks.query(doc_id).holder_id == winner


def test_concurrent_acquire_separate_connections(lifecycle, make_document, db_path, clock) -> None:
    doc_id = make_document()
    apps = [build_lifecycle(db_path, identity=StaticIdentityProvider(), clock=clock) for _ in range(4)]
    workers = list(range(200, 208))
    barrier = threading.Barrier(len(workers))

    def attempt(worker_id: int) -> bool:
        app = apps[worker_id % len(apps)]
        barrier.wait()
        try:
            app.locks.acquire(doc_id, worker_id)
            return True
        except AlreadyLocked:
            return False

    try:
        with ThreadPoolExecutor(max_workers=len(workers)) as pool:
            results = list(pool.map(attempt, workers))
    finally:
        for app in apps:
            app.close()

    assert results.count(True) == 1
    assert lifecycle.locks.query(doc_id).holder_id == workers[results.index(True)]
