"""
===============================================================================
DocumentRepositorySQLite – SQLite-backed document store
-------------------------------------------------------------------------------
Owns the 'documents' table: identity, title, status, category reference,
current-version pointer and timestamps.
===============================================================================
"""
from __future__ import annotations
from typing import Optional, List
import sqlite3

from core.helpers.date_time_helper import parse_utc_iso, utc_now_iso
from .base_sqlite_repo import BaseSQLiteRepo
from translationlifecycle.models.document import Document
from translationlifecycle.models.document_status import DocumentStatus


class DocumentRepositorySQLite(BaseSQLiteRepo):
    SCHEMA = """
        CREATE TABLE IF NOT EXISTS documents (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            status TEXT NOT NULL,
            category_id INTEGER,
            current_version_id INTEGER,
            created_by INTEGER,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_documents_status ON documents(status);
    """

    # --------------- mapping --------------- #
    @staticmethod
    def _row_to_model(r: sqlite3.Row) -> Document:
        return Document(
            id=int(r["id"]),
            title=r["title"],
            status=DocumentStatus(r["status"]),
            category_id=r["category_id"],
            current_version_id=r["current_version_id"],
            created_by=r["created_by"],
            created_at=parse_utc_iso(r["created_at"]),
            updated_at=parse_utc_iso(r["updated_at"]),
        )

    # --------------- READ --------------- #
    def get(self, doc_id: int) -> Optional[Document]:
        with self._read() as conn:
            r = conn.execute("SELECT * FROM documents WHERE id = ?", (doc_id,)).fetchone()
        return self._row_to_model(r) if r else None

    def search(
        self,
        status: Optional[DocumentStatus] = None,
        category_id: Optional[int] = None,
        title: Optional[str] = None,
    ) -> List[Document]:
        q = "SELECT * FROM documents WHERE 1=1"
        params: list = []
        if status:
            q += " AND status = ?"; params.append(DocumentStatus(status).value)
        if category_id is not None:
            q += " AND category_id = ?"; params.append(category_id)
        if title:
            q += " AND title LIKE ?"; params.append(f"%{title}%")
        q += " ORDER BY updated_at DESC, id DESC"
        with self._read() as conn:
            rows = conn.execute(q, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    # --------------- WRITE --------------- #
    def create(self, title: str, created_by: Optional[int], category_id: Optional[int] = None) -> Document:
        now = utc_now_iso()
        with self._tx() as conn:
            cur = conn.execute(
                """
                INSERT INTO documents (title, status, category_id, current_version_id,
                                       created_by, created_at, updated_at)
                VALUES (?, ?, ?, NULL, ?, ?, ?)
                """,
                (title, DocumentStatus.DRAFT.value, category_id, created_by, now, now),
            )
            doc_id = int(cur.lastrowid)
            r = conn.execute("SELECT * FROM documents WHERE id = ?", (doc_id,)).fetchone()
        return self._row_to_model(r)

    def update_status(self, doc_id: int, status: DocumentStatus) -> None:
        with self._tx() as conn:
            conn.execute(
                "UPDATE documents SET status=?, updated_at=? WHERE id=?",
                (DocumentStatus(status).value, utc_now_iso(), doc_id),
            )

    def set_current_version_pointer(self, doc_id: int, version_id: Optional[int]) -> None:
        with self._tx() as conn:
            conn.execute(
                "UPDATE documents SET current_version_id=?, updated_at=? WHERE id=?",
                (version_id, utc_now_iso(), doc_id),
            )
