"""Per-user favorite documents backed by the favorite store."""
from __future__ import annotations

from typing import List

from core.logging.logic.logger import logger
from translationlifecycle.exceptions.errors import DocumentNotFound
from translationlifecycle.logic.repository.document_repository import DocumentRepository
from translationlifecycle.logic.repository.favorite_repository import FavoriteRepository

FEATURE = "TranslationLifecycle"


class FavoriteService:
    def __init__(self, favorites: FavoriteRepository, documents: DocumentRepository) -> None:
        self._favorites = favorites
        self._documents = documents

    def add(self, user_id: int, document_id: int) -> bool:
        """Bookmark a document; False if it already was one."""
        if self._documents.get(document_id) is None:
            raise DocumentNotFound(document_id)
        added = self._favorites.add(user_id, document_id)
        if added:
            logger.log(FEATURE, "FavoriteAdded", user_id=user_id, reference_id=str(document_id))
        return added

    def remove(self, user_id: int, document_id: int) -> bool:
        removed = self._favorites.remove(user_id, document_id)
        if removed:
            logger.log(FEATURE, "FavoriteRemoved", user_id=user_id, reference_id=str(document_id))
        return removed

    def toggle(self, user_id: int, document_id: int) -> bool:
        """Flip the bookmark and return the new state."""
        if self.is_favorite(user_id, document_id):
            self.remove(user_id, document_id)
            return False
        self.add(user_id, document_id)
        return True

    def is_favorite(self, user_id: int, document_id: int) -> bool:
        return self._favorites.exists(user_id, document_id)

    def list_favorite_ids(self, user_id: int) -> List[int]:
        return self._favorites.list_document_ids(user_id)
