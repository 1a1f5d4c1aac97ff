"""FavoriteRepositorySQLite – (user, document) bookmark pairs."""
from __future__ import annotations
from typing import List

from core.helpers.date_time_helper import utc_now_iso
from .base_sqlite_repo import BaseSQLiteRepo


class FavoriteRepositorySQLite(BaseSQLiteRepo):
    SCHEMA = """
        CREATE TABLE IF NOT EXISTS document_favorites (
            user_id INTEGER NOT NULL,
            document_id INTEGER NOT NULL,
            created_at TEXT NOT NULL,
            PRIMARY KEY (user_id, document_id),
            FOREIGN KEY (document_id) REFERENCES documents(id)
        );
    """

    def add(self, user_id: int, doc_id: int) -> bool:
        with self._tx() as conn:
            cur = conn.execute(
                "INSERT OR IGNORE INTO document_favorites (user_id, document_id, created_at) VALUES (?, ?, ?)",
                (user_id, doc_id, utc_now_iso()),
            )
            return cur.rowcount == 1

    def remove(self, user_id: int, doc_id: int) -> bool:
        with self._tx() as conn:
            cur = conn.execute(
                "DELETE FROM document_favorites WHERE user_id = ? AND document_id = ?",
                (user_id, doc_id),
            )
            return cur.rowcount == 1

    def exists(self, user_id: int, doc_id: int) -> bool:
        with self._read() as conn:
            r = conn.execute(
                "SELECT 1 FROM document_favorites WHERE user_id = ? AND document_id = ?",
                (user_id, doc_id),
            ).fetchone()
        return r is not None

    def list_document_ids(self, user_id: int) -> List[int]:
        with self._read() as conn:
            rows = conn.execute(
                "SELECT document_id FROM document_favorites WHERE user_id = ? ORDER BY created_at DESC, document_id DESC",
                (user_id,),
            ).fetchall()
        return [int(r[0]) for r in rows]
