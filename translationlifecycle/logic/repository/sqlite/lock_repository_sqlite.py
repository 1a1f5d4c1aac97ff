"""
===============================================================================
LockRepositorySQLite – one row per locked document
-------------------------------------------------------------------------------
'document_id' is the primary key, so INSERT OR IGNORE is the single
conditional write that decides who wins concurrent acquisitions.
Completed unit indices are stored as a JSON array.
===============================================================================
"""
from __future__ import annotations
from typing import Optional, List, Iterable
import json
import sqlite3

from core.helpers.date_time_helper import parse_utc_iso, to_utc_iso
from .base_sqlite_repo import BaseSQLiteRepo
from translationlifecycle.models.translation_lock import TranslationLock


def _dump_units(units: Iterable[int]) -> str:
    return json.dumps(sorted({int(u) for u in units}))


def _load_units(raw: Optional[str]) -> frozenset[int]:
    if not raw:
        return frozenset()
    return frozenset(int(u) for u in json.loads(raw))


class LockRepositorySQLite(BaseSQLiteRepo):
    SCHEMA = """
        CREATE TABLE IF NOT EXISTS translation_locks (
            document_id INTEGER PRIMARY KEY,
            holder_id INTEGER NOT NULL,
            acquired_at TEXT NOT NULL,
            completed_units TEXT NOT NULL DEFAULT '[]',
            FOREIGN KEY (document_id) REFERENCES documents(id)
        );
    """

    @staticmethod
    def _row_to_model(r: sqlite3.Row) -> TranslationLock:
        return TranslationLock(
            document_id=int(r["document_id"]),
            holder_id=int(r["holder_id"]),
            acquired_at=parse_utc_iso(r["acquired_at"]),
            completed_units=_load_units(r["completed_units"]),
        )

    def get(self, doc_id: int) -> Optional[TranslationLock]:
        with self._read() as conn:
            r = conn.execute("SELECT * FROM translation_locks WHERE document_id = ?", (doc_id,)).fetchone()
        return self._row_to_model(r) if r else None

    def list_all(self) -> List[TranslationLock]:
        with self._read() as conn:
            rows = conn.execute("SELECT * FROM translation_locks ORDER BY acquired_at ASC").fetchall()
        return [self._row_to_model(r) for r in rows]

    def create_if_absent(self, lock: TranslationLock) -> bool:
        with self._tx() as conn:
            cur = conn.execute(
                """
                INSERT OR IGNORE INTO translation_locks (document_id, holder_id, acquired_at, completed_units)
                VALUES (?, ?, ?, ?)
                """,
                (lock.document_id, lock.holder_id, to_utc_iso(lock.acquired_at),
                 _dump_units(lock.completed_units)),
            )
            return cur.rowcount == 1

    def delete(self, doc_id: int) -> bool:
        with self._tx() as conn:
            cur = conn.execute("DELETE FROM translation_locks WHERE document_id = ?", (doc_id,))
            return cur.rowcount == 1

    def delete_held_by(self, doc_id: int, holder_id: int) -> bool:
        with self._tx() as conn:
            cur = conn.execute(
                "DELETE FROM translation_locks WHERE document_id = ? AND holder_id = ?",
                (doc_id, holder_id),
            )
            return cur.rowcount == 1

    def update_completed_units(self, doc_id: int, holder_id: int, units: Iterable[int]) -> bool:
        with self._tx() as conn:
            cur = conn.execute(
                "UPDATE translation_locks SET completed_units = ? WHERE document_id = ? AND holder_id = ?",
                (_dump_units(units), doc_id, holder_id),
            )
            return cur.rowcount == 1
