"""
===============================================================================
VersionRepositorySQLite – append-only document versions
-------------------------------------------------------------------------------
Version numbers are MAX+1 computed inside an immediate transaction and
guarded by UNIQUE(document_id, version_number); rows are never updated or
deleted, so numbers are never reused.
===============================================================================
"""
from __future__ import annotations
from typing import Optional, List
import sqlite3

from core.helpers.date_time_helper import parse_utc_iso, utc_now_iso
from .base_sqlite_repo import BaseSQLiteRepo
from translationlifecycle.models.document_version import DocumentVersion
from translationlifecycle.models.version_type import VersionType


class VersionRepositorySQLite(BaseSQLiteRepo):
    SCHEMA = """
        CREATE TABLE IF NOT EXISTS document_versions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            document_id INTEGER NOT NULL,
            version_number INTEGER NOT NULL,
            version_type TEXT NOT NULL,
            content TEXT NOT NULL,
            created_by INTEGER,
            created_at TEXT NOT NULL,
            UNIQUE (document_id, version_number),
            FOREIGN KEY (document_id) REFERENCES documents(id)
        );
    """

    @staticmethod
    def _row_to_model(r: sqlite3.Row) -> DocumentVersion:
        return DocumentVersion(
            id=int(r["id"]),
            document_id=int(r["document_id"]),
            version_number=int(r["version_number"]),
            version_type=VersionType(r["version_type"]),
            content=r["content"],
            created_at=parse_utc_iso(r["created_at"]),
            created_by=r["created_by"],
        )

    def list_by_document(self, doc_id: int) -> List[DocumentVersion]:
        with self._read() as conn:
            rows = conn.execute(
                "SELECT * FROM document_versions WHERE document_id = ? ORDER BY version_number ASC",
                (doc_id,),
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get(self, version_id: int) -> Optional[DocumentVersion]:
        with self._read() as conn:
            r = conn.execute("SELECT * FROM document_versions WHERE id = ?", (version_id,)).fetchone()
        return self._row_to_model(r) if r else None

    def append(
        self,
        doc_id: int,
        version_type: VersionType,
        content: str,
        created_by: Optional[int] = None,
    ) -> DocumentVersion:
        with self._tx() as conn:
            (next_number,) = conn.execute(
                "SELECT COALESCE(MAX(version_number), 0) + 1 FROM document_versions WHERE document_id = ?",
                (doc_id,),
            ).fetchone()
            cur = conn.execute(
                """
                INSERT INTO document_versions
                    (document_id, version_number, version_type, content, created_by, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (doc_id, int(next_number), VersionType(version_type).value, content or "",
                 created_by, utc_now_iso()),
            )
            r = conn.execute("SELECT * FROM document_versions WHERE id = ?", (cur.lastrowid,)).fetchone()
        return self._row_to_model(r)
