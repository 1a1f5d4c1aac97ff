"""
===============================================================================
ReviewRepositorySQLite – review history per document
-------------------------------------------------------------------------------
The checklist is stored as a JSON object. Reads join document_versions so
each review carries the number of the version it judged.
===============================================================================
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional, List, Mapping
import json
import sqlite3

from core.helpers.date_time_helper import parse_utc_iso, to_utc_iso
from .base_sqlite_repo import BaseSQLiteRepo
from translationlifecycle.models.review import Review
from translationlifecycle.models.review_status import ReviewStatus

_SELECT = """
    SELECT r.*, v.version_number
      FROM document_reviews r
      LEFT JOIN document_versions v ON v.id = r.version_id
"""


class ReviewRepositorySQLite(BaseSQLiteRepo):
    SCHEMA = """
        CREATE TABLE IF NOT EXISTS document_reviews (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            document_id INTEGER NOT NULL,
            version_id INTEGER,
            reviewer_id INTEGER NOT NULL,
            status TEXT NOT NULL,
            comment TEXT,
            checklist TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL,
            reviewed_at TEXT,
            FOREIGN KEY (document_id) REFERENCES documents(id),
            FOREIGN KEY (version_id) REFERENCES document_versions(id)
        );
        CREATE INDEX IF NOT EXISTS idx_reviews_document ON document_reviews(document_id);
    """

    @staticmethod
    def _row_to_model(r: sqlite3.Row) -> Review:
        return Review(
            id=int(r["id"]),
            document_id=int(r["document_id"]),
            version_id=int(r["version_id"]) if r["version_id"] is not None else None,
            reviewer_id=int(r["reviewer_id"]),
            status=ReviewStatus(r["status"]),
            comment=r["comment"],
            checklist={str(k): bool(v) for k, v in json.loads(r["checklist"] or "{}").items()},
            created_at=parse_utc_iso(r["created_at"]),
            reviewed_at=parse_utc_iso(r["reviewed_at"]),
            version_number=r["version_number"],
        )

    def _get(self, conn: sqlite3.Connection, review_id: int) -> Review:
        r = conn.execute(_SELECT + " WHERE r.id = ?", (review_id,)).fetchone()
        return self._row_to_model(r)

    def add(
        self,
        document_id: int,
        version_id: Optional[int],
        reviewer_id: int,
        status: ReviewStatus,
        comment: Optional[str],
        checklist: Mapping[str, bool],
        created_at: datetime,
        reviewed_at: Optional[datetime] = None,
    ) -> Review:
        with self._tx() as conn:
            cur = conn.execute(
                """
                INSERT INTO document_reviews
                    (document_id, version_id, reviewer_id, status, comment, checklist, created_at, reviewed_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (document_id, version_id, reviewer_id, ReviewStatus(status).value, comment,
                 json.dumps(dict(checklist), sort_keys=True), to_utc_iso(created_at),
                 to_utc_iso(reviewed_at) if reviewed_at else None),
            )
            return self._get(conn, int(cur.lastrowid))

    def update(
        self,
        review_id: int,
        status: ReviewStatus,
        comment: Optional[str],
        checklist: Mapping[str, bool],
        reviewed_at: Optional[datetime],
    ) -> Review:
        with self._tx() as conn:
            conn.execute(
                """
                UPDATE document_reviews
                   SET status = ?, comment = ?, checklist = ?, reviewed_at = ?
                 WHERE id = ?
                """,
                (ReviewStatus(status).value, comment, json.dumps(dict(checklist), sort_keys=True),
                 to_utc_iso(reviewed_at) if reviewed_at else None, review_id),
            )
            return self._get(conn, review_id)

    def open_review(self, doc_id: int, reviewer_id: int) -> Optional[Review]:
        with self._read() as conn:
            r = conn.execute(
                _SELECT + " WHERE r.document_id = ? AND r.reviewer_id = ? AND r.status = ?"
                          " ORDER BY r.id DESC LIMIT 1",
                (doc_id, reviewer_id, ReviewStatus.PENDING.value),
            ).fetchone()
        return self._row_to_model(r) if r else None

    def latest(self, doc_id: int) -> Optional[Review]:
        with self._read() as conn:
            r = conn.execute(
                _SELECT + " WHERE r.document_id = ? ORDER BY r.id DESC LIMIT 1", (doc_id,)
            ).fetchone()
        return self._row_to_model(r) if r else None

    def list_by_document(self, doc_id: int) -> List[Review]:
        with self._read() as conn:
            rows = conn.execute(
                _SELECT + " WHERE r.document_id = ? ORDER BY r.id", (doc_id,)
            ).fetchall()
        return [self._row_to_model(r) for r in rows]
