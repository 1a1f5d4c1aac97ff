"""
===============================================================================
HandoverRepositorySQLite – handover history per document
-------------------------------------------------------------------------------
Rows are never deleted. A handover is active while 'cleared_at' is NULL;
recording a new one clears the previous ones in the same transaction.
===============================================================================
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional, List, Iterable
import json
import sqlite3

from core.helpers.date_time_helper import parse_utc_iso, to_utc_iso
from .base_sqlite_repo import BaseSQLiteRepo
from translationlifecycle.models.handover import Handover


class HandoverRepositorySQLite(BaseSQLiteRepo):
    SCHEMA = """
        CREATE TABLE IF NOT EXISTS document_handovers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            document_id INTEGER NOT NULL,
            memo TEXT NOT NULL,
            terms TEXT,
            completed_units TEXT NOT NULL DEFAULT '[]',
            handed_over_by INTEGER NOT NULL,
            handed_over_at TEXT NOT NULL,
            cleared_at TEXT,
            FOREIGN KEY (document_id) REFERENCES documents(id)
        );
        CREATE INDEX IF NOT EXISTS idx_handovers_document ON document_handovers(document_id);
    """

    @staticmethod
    def _row_to_model(r: sqlite3.Row) -> Handover:
        return Handover(
            id=int(r["id"]),
            document_id=int(r["document_id"]),
            memo=r["memo"],
            terms=r["terms"],
            completed_units=frozenset(int(u) for u in json.loads(r["completed_units"] or "[]")),
            handed_over_by=int(r["handed_over_by"]),
            handed_over_at=parse_utc_iso(r["handed_over_at"]),
        )

    def add(
        self,
        document_id: int,
        memo: str,
        terms: Optional[str],
        completed_units: Iterable[int],
        handed_over_by: int,
        handed_over_at: datetime,
    ) -> Handover:
        stamp = to_utc_iso(handed_over_at)
        with self._tx() as conn:
            conn.execute(
                "UPDATE document_handovers SET cleared_at = ? WHERE document_id = ? AND cleared_at IS NULL",
                (stamp, document_id),
            )
            cur = conn.execute(
                """
                INSERT INTO document_handovers
                    (document_id, memo, terms, completed_units, handed_over_by, handed_over_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (document_id, memo, terms, json.dumps(sorted({int(u) for u in completed_units})),
                 handed_over_by, stamp),
            )
            r = conn.execute("SELECT * FROM document_handovers WHERE id = ?", (cur.lastrowid,)).fetchone()
        return self._row_to_model(r)

    def latest(self, doc_id: int) -> Optional[Handover]:
        with self._read() as conn:
            r = conn.execute(
                """
                SELECT * FROM document_handovers
                 WHERE document_id = ? AND cleared_at IS NULL
                 ORDER BY id DESC LIMIT 1
                """,
                (doc_id,),
            ).fetchone()
        return self._row_to_model(r) if r else None

    def clear(self, doc_id: int, cleared_at: datetime) -> int:
        with self._tx() as conn:
            cur = conn.execute(
                "UPDATE document_handovers SET cleared_at = ? WHERE document_id = ? AND cleared_at IS NULL",
                (to_utc_iso(cleared_at), doc_id),
            )
            return cur.rowcount

    def list_active(self) -> List[Handover]:
        with self._read() as conn:
            rows = conn.execute(
                "SELECT * FROM document_handovers WHERE cleared_at IS NULL ORDER BY handed_over_at DESC, id DESC"
            ).fetchall()
        return [self._row_to_model(r) for r in rows]
