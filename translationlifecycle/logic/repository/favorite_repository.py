"""Favorite Repository Protocol – per-user bookmarked documents."""
from __future__ import annotations
from typing import Protocol, List


class FavoriteRepository(Protocol):
    """Keyed lookup user -> document ids; replaces client-side favorite maps."""

    def add(self, user_id: int, doc_id: int) -> bool:
        ...

    def remove(self, user_id: int, doc_id: int) -> bool:
        ...

    def exists(self, user_id: int, doc_id: int) -> bool:
        ...

    def list_document_ids(self, user_id: int) -> List[int]:
        ...
