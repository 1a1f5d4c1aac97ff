"""
translationlifecycle/tests/test_sqlite_repositories.py

SQLite stores: version numbering, handover history, favorites and driver
error translation.
"""
from __future__ import annotations

import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from core.common.db_interface import SQLiteDatabase
from translationlifecycle.exceptions import StoreUnavailable
from translationlifecycle.logic.repository.sqlite.document_repository_sqlite import DocumentRepositorySQLite
from translationlifecycle.logic.repository.sqlite.favorite_repository_sqlite import FavoriteRepositorySQLite
from translationlifecycle.logic.repository.sqlite.handover_repository_sqlite import HandoverRepositorySQLite
from translationlifecycle.logic.repository.sqlite.lock_repository_sqlite import LockRepositorySQLite
from translationlifecycle.logic.repository.sqlite.version_repository_sqlite import VersionRepositorySQLite
from translationlifecycle.models.document_status import DocumentStatus
from translationlifecycle.models.translation_lock import TranslationLock
from translationlifecycle.models.version_type import VersionType

_T0 = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def db(db_path):
    database = SQLiteDatabase(db_path)
    yield database
    database.close()


@pytest.fixture
def documents(db) -> DocumentRepositorySQLite:
    return DocumentRepositorySQLite(db)


def test_document_create_and_search(documents) -> None:
    a = documents.create("User Guide", 1, category_id=3)
    b = documents.create("Release Notes", 1)
    assert a.status == DocumentStatus.DRAFT
    documents.update_status(b.id, DocumentStatus.PENDING_TRANSLATION)

    assert [d.id for d in documents.search(status=DocumentStatus.PENDING_TRANSLATION)] == [b.id]
    assert [d.id for d in documents.search(category_id=3)] == [a.id]
    assert [d.id for d in documents.search(title="guide")] == [a.id]
    assert documents.get(999) is None


def test_version_numbers_are_sequential(db, documents) -> None:
    versions = VersionRepositorySQLite(db)
    doc = documents.create("Doc", 1)
    numbers = [versions.append(doc.id, VersionType.MANUAL_TRANSLATION, f"c{i}", 1).version_number for i in range(4)]
    assert numbers == [1, 2, 3, 4]
    other = documents.create("Other", 1)
    assert versions.append(other.id, VersionType.ORIGINAL, "x").version_number == 1
    listed = versions.list_by_document(doc.id)
    assert [v.content for v in listed] == ["c0", "c1", "c2", "c3"]
    assert versions.get(listed[0].id) == listed[0]


def test_version_numbers_unique_under_concurrent_appends(db_path, documents) -> None:
    doc = documents.create("Busy", 1)
    repos = [VersionRepositorySQLite(SQLiteDatabase(db_path)) for _ in range(4)]
    barrier = threading.Barrier(8)

    def append_many(n: int) -> list[int]:
        repo = repos[n % len(repos)]
        barrier.wait()
        return [repo.append(doc.id, VersionType.MANUAL_TRANSLATION, f"{n}-{i}").version_number for i in range(10)]

    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            batches = list(pool.map(append_many, range(8)))
    finally:
        for repo in repos:
            repo.close()

    numbers = sorted(n for batch in batches for n in batch)
    assert numbers == list(range(1, 81))
    for batch in batches:
        assert batch == sorted(batch)


def test_lock_conditional_insert(db, documents) -> None:
    locks = LockRepositorySQLite(db)
    doc = documents.create("Doc", 1)
    assert locks.create_if_absent(TranslationLock(doc.id, 1, _T0, frozenset({2, 0})))
    assert not locks.create_if_absent(TranslationLock(doc.id, 2, _T0))
    stored = locks.get(doc.id)
    assert stored.holder_id == 1 and stored.acquired_at == _T0
    assert stored.completed_units == {0, 2}
    assert not locks.update_completed_units(doc.id, 2, [5])
    assert locks.update_completed_units(doc.id, 1, [5])
    assert locks.get(doc.id).completed_units == {5}
    assert not locks.delete_held_by(doc.id, 2)
    assert locks.delete(doc.id)
    assert locks.get(doc.id) is None


def test_handover_history_keeps_only_latest_active(db, documents) -> None:
    handovers = HandoverRepositorySQLite(db)
    doc = documents.create("Doc", 1)
    handovers.add(doc.id, "first", None, [0], 1, _T0)
    second = handovers.add(doc.id, "second", "glossary", [0, 1], 2, _T0 + timedelta(hours=1))

    assert handovers.latest(doc.id) == second
    assert [h.memo for h in handovers.list_active()] == ["second"]
    assert handovers.clear(doc.id, _T0 + timedelta(hours=2)) == 1
    assert handovers.latest(doc.id) is None
    with db.reading() as conn:
        (total,) = conn.execute("SELECT COUNT(*) FROM document_handovers").fetchone()
    assert total == 2


def test_favorites(db, documents) -> None:
    favorites = FavoriteRepositorySQLite(db)
    a = documents.create("A", 1)
    b = documents.create("B", 1)
    assert favorites.add(7, a.id)
    assert not favorites.add(7, a.id)
    favorites.add(7, b.id)
    assert set(favorites.list_document_ids(7)) == {a.id, b.id}
    assert favorites.exists(7, a.id) and not favorites.exists(8, a.id)
    assert favorites.remove(7, a.id)
    assert not favorites.remove(7, a.id)


def test_driver_errors_become_store_unavailable(db, documents) -> None:
    versions = VersionRepositorySQLite(db)
    doc = documents.create("Doc", 1)
    db.executescript("DROP TABLE document_versions")
    with pytest.raises(StoreUnavailable) as exc:
        versions.list_by_document(doc.id)
    assert isinstance(exc.value.__cause__, sqlite3.OperationalError)


def test_foreign_keys_reject_unknown_documents(db, documents) -> None:
    versions = VersionRepositorySQLite(db)
    with pytest.raises(StoreUnavailable):
        versions.append(12345, VersionType.ORIGINAL, "orphan")
