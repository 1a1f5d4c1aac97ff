"""
===============================================================================
DocumentCreationService – new documents, original import, AI drafts
-------------------------------------------------------------------------------
Purpose:
    Everything that happens before translation starts:
      - create_document           -> DRAFT record without versions
      - import_original           -> the single ORIGINAL version (DRAFT only)
      - add_ai_draft              -> AI_DRAFT version (DRAFT / PENDING_TRANSLATION)
      - release_for_translation   -> DRAFT -> PENDING_TRANSLATION

Invariant:
    Exactly one ORIGINAL per document, imported before the document leaves
    DRAFT.
===============================================================================
"""
from __future__ import annotations

from typing import Optional

from core.logging.logic.logger import logger
from translationlifecycle.exceptions.errors import DocumentNotFound, InvalidContent, InvalidTransition
from translationlifecycle.logic.policy.lifecycle_policy import LifecyclePolicy
from translationlifecycle.logic.policy.version_resolver import original_version
from translationlifecycle.logic.repository.document_repository import DocumentRepository
from translationlifecycle.logic.repository.unit_of_work import UnitOfWork
from translationlifecycle.logic.repository.version_repository import VersionRepository
from translationlifecycle.logic.services.lifecycle_service import refresh_current_pointer
from translationlifecycle.models.document import Document
from translationlifecycle.models.document_status import DocumentStatus
from translationlifecycle.models.document_version import DocumentVersion
from translationlifecycle.models.lifecycle_action import LifecycleAction
from translationlifecycle.models.version_type import VersionType

FEATURE = "TranslationLifecycle"

_AI_DRAFT_STATUSES = frozenset({DocumentStatus.DRAFT, DocumentStatus.PENDING_TRANSLATION})


class DocumentCreationService:
    def __init__(
        self,
        documents: DocumentRepository,
        versions: VersionRepository,
        uow: UnitOfWork,
        *,
        policy: Optional[LifecyclePolicy] = None,
    ) -> None:
        self._documents = documents
        self._versions = versions
        self._uow = uow
        self._policy = policy or LifecyclePolicy()

    def create_document(self, title: str, created_by: Optional[int], category_id: Optional[int] = None) -> Document:
        """Insert a DRAFT document; raises InvalidContent for a blank title."""
        clean = (title or "").strip()
        if not clean:
            raise InvalidContent("Document title must not be empty")
        doc = self._documents.create(clean, created_by, category_id)
        logger.log(FEATURE, "DocumentCreated", user_id=created_by, reference_id=str(doc.id), message=clean)
        return doc

    def import_original(self, document_id: int, content: str, worker_id: Optional[int] = None) -> DocumentVersion:
        """
        Store the source content as the document's ORIGINAL version.

        Raises
        ------
        InvalidTransition
            If the document already left DRAFT.
        InvalidContent
            If an ORIGINAL already exists or the content is empty.
        """
        _require_text(content, "Original content")
        with self._uow.transaction():
            doc = self._require_document(document_id)
            if doc.status != DocumentStatus.DRAFT:
                raise InvalidTransition(doc.status, "import_original", "originals are imported in DRAFT only")
            if original_version(self._versions.list_by_document(document_id)) is not None:
                raise InvalidContent(f"Document {document_id} already has an ORIGINAL version")
            version = self._versions.append(document_id, VersionType.ORIGINAL, content, worker_id)
            refresh_current_pointer(self._documents, self._versions, document_id, doc.status)
        logger.log(FEATURE, "OriginalImported", user_id=worker_id, reference_id=str(document_id))
        return version

    def add_ai_draft(self, document_id: int, content: str, worker_id: Optional[int] = None) -> DocumentVersion:
        """Append a machine translation before human work starts."""
        _require_text(content, "AI draft content")
        with self._uow.transaction():
            doc = self._require_document(document_id)
            if doc.status not in _AI_DRAFT_STATUSES:
                raise InvalidTransition(doc.status, "add_ai_draft", "translation already started")
            version = self._versions.append(document_id, VersionType.AI_DRAFT, content, worker_id)
            refresh_current_pointer(self._documents, self._versions, document_id, doc.status)
        logger.log(
            FEATURE, "AiDraftAdded", user_id=worker_id, reference_id=str(document_id),
            message=f"version={version.version_number}",
        )
        return version

    def release_for_translation(self, document_id: int, worker_id: Optional[int] = None) -> Document:
        """DRAFT -> PENDING_TRANSLATION; the ORIGINAL must exist."""
        with self._uow.transaction():
            doc = self._require_document(document_id)
            new_status = self._policy.check(LifecycleAction.RELEASE_FOR_TRANSLATION, doc.status)
            if original_version(self._versions.list_by_document(document_id)) is None:
                raise InvalidTransition(
                    doc.status, LifecycleAction.RELEASE_FOR_TRANSLATION, "no ORIGINAL version imported"
                )
            self._documents.update_status(document_id, new_status)
            refresh_current_pointer(self._documents, self._versions, document_id, new_status)
        logger.log(FEATURE, "ReleasedForTranslation", user_id=worker_id, reference_id=str(document_id))
        return self._require_document(document_id)

    def _require_document(self, document_id: int) -> Document:
        doc = self._documents.get(document_id)
        if doc is None:
            raise DocumentNotFound(document_id)
        return doc


def _require_text(content: Optional[str], what: str) -> None:
    if not (content or "").strip():
        raise InvalidContent(f"{what} must not be empty")
