"""
===============================================================================
DocumentService – read-only facade for lists and document details
-------------------------------------------------------------------------------
Purpose:
    Read side of the translation lifecycle.
    - Resolves the current version through the Version Resolver on every call.
    - Joins lock status, handover and favorite flags into DTOs.

Non-Goals:
    - No mutation; writes go through LifecycleCoordinator and
      DocumentCreationService.

Progress:
    Completed units come from the active lock, else from the active handover;
    the total is counted on the ORIGINAL content only.
===============================================================================
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from core.helpers.date_time_helper import to_utc_iso, utc_to_local_str
from translationlifecycle.exceptions.errors import DocumentNotFound
from translationlifecycle.logic.content.paragraph_counter import ParagraphCounter
from translationlifecycle.logic.policy.progress_policy import completed_units_for, progress_for_status
from translationlifecycle.logic.policy.version_resolver import original_version, resolve_current_version
from translationlifecycle.logic.repository.document_repository import DocumentRepository
from translationlifecycle.logic.repository.favorite_repository import FavoriteRepository
from translationlifecycle.logic.repository.version_repository import VersionRepository
from translationlifecycle.logic.services.handover_service import HandoverService
from translationlifecycle.logic.services.lock_manager import LockManager
from translationlifecycle.logic.services.review_service import ReviewService
from translationlifecycle.models.document import Document
from translationlifecycle.models.document_status import DocumentStatus
from translationlifecycle.models.dto.document_details_dto import DocumentDetailsDTO
from translationlifecycle.models.dto.document_overview_dto import DocumentOverviewDTO
from translationlifecycle.models.handover import Handover
from translationlifecycle.models.translation_lock import LockStatus


class DocumentService:
    """
    Parameters
    ----------
    documents, versions, favorites : repositories
    locks : LockManager
        Source of lock status with holder names and staleness.
    handovers : HandoverService
    reviews : ReviewService, optional
        Source of the latest review shown on the details page.
    counter : ParagraphCounter, optional
    """

    def __init__(
        self,
        documents: DocumentRepository,
        versions: VersionRepository,
        favorites: FavoriteRepository,
        locks: LockManager,
        handovers: HandoverService,
        *,
        reviews: Optional[ReviewService] = None,
        counter: Optional[ParagraphCounter] = None,
    ) -> None:
        self._documents = documents
        self._versions = versions
        self._favorites = favorites
        self._locks = locks
        self._handovers = handovers
        self._reviews = reviews
        self._counter = counter or ParagraphCounter()

    # ------------------------------------------------------------------ #
    # Details
    # ------------------------------------------------------------------ #
    def get_details(self, document_id: int, viewer_id: Optional[int] = None) -> DocumentDetailsDTO:
        doc = self._documents.get(document_id)
        if doc is None:
            raise DocumentNotFound(document_id)
        versions = self._versions.list_by_document(document_id)
        lock = self._locks.query(document_id)
        handover = self._handovers.latest(document_id)
        original = original_version(versions)
        total = self._counter.count(original.content) if original else 0
        doc.handover = handover
        return DocumentDetailsDTO(
            document=doc,
            current_version=resolve_current_version(doc.status, versions),
            original_version=original,
            lock=lock,
            handover=handover,
            progress=self._progress(doc, lock, handover, total),
            total_units=total,
            is_favorite=self._is_favorite(viewer_id, document_id),
            review=self._reviews.latest(document_id) if self._reviews else None,
        )

    # ------------------------------------------------------------------ #
    # Lists
    # ------------------------------------------------------------------ #
    def list_documents(
        self,
        status: Optional[DocumentStatus] = None,
        category_id: Optional[int] = None,
        title: Optional[str] = None,
        viewer_id: Optional[int] = None,
    ) -> List[DocumentOverviewDTO]:
        docs = self._documents.search(status=status, category_id=category_id, title=title)
        return self._overviews(docs, viewer_id)

    def working_documents(self, worker_id: int) -> List[DocumentOverviewDTO]:
        """Documents whose lock 'worker_id' currently holds."""
        docs = []
        for status in self._locks.list_locks():
            if status.holder_id != worker_id:
                continue
            doc = self._documents.get(status.document_id)
            if doc is not None:
                docs.append(doc)
        return self._overviews(docs, worker_id)

    def pending_handovers(self, viewer_id: Optional[int] = None) -> List[DocumentOverviewDTO]:
        """Handed-over documents an administrator may convert back to pending."""
        docs = []
        for handover in self._handovers.list_active():
            doc = self._documents.get(handover.document_id)
            if doc is None or doc.status == DocumentStatus.PENDING_TRANSLATION:
                continue
            if self._locks.query(doc.id).locked:
                continue
            docs.append(doc)
        return self._overviews(docs, viewer_id)

    def stale_locks(self) -> List[LockStatus]:
        return self._locks.stale_locks()

    def favorites(self, user_id: int) -> List[DocumentOverviewDTO]:
        docs = [self._documents.get(doc_id) for doc_id in self._favorites.list_document_ids(user_id)]
        return self._overviews([d for d in docs if d is not None], user_id)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _overviews(self, docs: Iterable[Document], viewer_id: Optional[int]) -> List[DocumentOverviewDTO]:
        favorite_ids = set(self._favorites.list_document_ids(viewer_id)) if viewer_id is not None else set()
        totals: Dict[int, int] = {}
        rows: List[DocumentOverviewDTO] = []
        for doc in docs:
            if doc.id not in totals:
                original = original_version(self._versions.list_by_document(doc.id))
                totals[doc.id] = self._counter.count(original.content) if original else 0
            lock = self._locks.query(doc.id)
            handover = self._handovers.latest(doc.id)
            rows.append(
                DocumentOverviewDTO(
                    id=doc.id,
                    title=doc.title,
                    status=doc.status.value,
                    category_id=doc.category_id,
                    progress=self._progress(doc, lock, handover, totals[doc.id]),
                    locked=lock.locked,
                    locked_by=lock.holder_name,
                    lock_is_stale=lock.is_stale,
                    has_handover=handover is not None,
                    is_favorite=doc.id in favorite_ids,
                    updated=utc_to_local_str(to_utc_iso(doc.updated_at)) if doc.updated_at else "",
                )
            )
        return rows

    def _progress(self, doc: Document, lock: LockStatus, handover: Optional[Handover], total: int) -> int:
        units = lock.completed_units if lock.locked else completed_units_for(None, handover)
        return progress_for_status(doc.status, units, total)

    def _is_favorite(self, viewer_id: Optional[int], document_id: int) -> bool:
        return viewer_id is not None and self._favorites.exists(viewer_id, document_id)
