"""
===============================================================================
LifecycleCoordinator – status transitions of translatable documents
-------------------------------------------------------------------------------
Purpose:
    Validate and execute lifecycle actions (start, resume, save, hand over,
    submit, save review, approve, reject, publish, convert-to-pending, lock
    release and reclaim), consulting the LifecyclePolicy and the LockManager.
    Approve and reject store the reviewer's verdict as a Review.

Atomicity:
    Every action runs in one UnitOfWork transaction. Version appends, the
    status change, lock creation/destruction, handover and review writes
    commit together; on any exception nothing is applied.

Current version:
    After each version append or status change the cached pointer on the
    document is re-resolved through the Version Resolver. Reads always
    re-resolve from the version set and never trust the pointer.

Logging:
    One audit entry per executed action (feature "TranslationLifecycle",
    reference_id = document id), written only once the transaction has
    committed. Rejected status preconditions are logged with level WARNING
    before InvalidTransition propagates.
===============================================================================
"""
from __future__ import annotations

from typing import Iterable, List, Mapping, NoReturn, Optional

from core.logging.logic.logger import logger
from translationlifecycle.exceptions.errors import (
    AlreadyLocked,
    DocumentNotFound,
    InvalidTransition,
)
from translationlifecycle.logic.content.paragraph_counter import ParagraphCounter
from translationlifecycle.logic.policy.lifecycle_policy import LifecyclePolicy
from translationlifecycle.logic.policy.progress_policy import completed_units_for, progress_for_status
from translationlifecycle.logic.policy.version_resolver import (
    latest_of_type,
    original_version,
    require_current_version,
    resolve_current_version,
)
from translationlifecycle.logic.repository.document_repository import DocumentRepository
from translationlifecycle.logic.repository.unit_of_work import UnitOfWork
from translationlifecycle.logic.repository.version_repository import VersionRepository
from translationlifecycle.logic.services.handover_service import HandoverService
from translationlifecycle.logic.services.lock_manager import LockManager
from translationlifecycle.logic.services.review_service import ReviewService
from translationlifecycle.models.document import Document
from translationlifecycle.models.document_status import DocumentStatus
from translationlifecycle.models.document_version import DocumentVersion
from translationlifecycle.models.handover import Handover
from translationlifecycle.models.lifecycle_action import LifecycleAction
from translationlifecycle.models.review import Review
from translationlifecycle.models.review_status import ReviewStatus
from translationlifecycle.models.translation_lock import TranslationLock
from translationlifecycle.models.version_type import VersionType

FEATURE = "TranslationLifecycle"


def refresh_current_pointer(
    documents: DocumentRepository,
    versions: VersionRepository,
    document_id: int,
    status: DocumentStatus,
) -> Optional[DocumentVersion]:
    """Re-resolve the current version and store it as the document's pointer."""
    current = resolve_current_version(status, versions.list_by_document(document_id))
    documents.set_current_version_pointer(document_id, current.id if current else None)
    return current


class LifecycleCoordinator:
    """
    Write side of the translation lifecycle.

    Parameters
    ----------
    documents, versions : repositories
        Document and version stores sharing the UnitOfWork's database.
    uow : UnitOfWork
        Transaction boundary.
    locks : LockManager
    handovers : HandoverService
    reviews : ReviewService
    policy : LifecyclePolicy, optional
    counter : ParagraphCounter, optional
        Counts units of the ORIGINAL content for progress.
    """

    def __init__(
        self,
        documents: DocumentRepository,
        versions: VersionRepository,
        uow: UnitOfWork,
        locks: LockManager,
        handovers: HandoverService,
        reviews: ReviewService,
        *,
        policy: Optional[LifecyclePolicy] = None,
        counter: Optional[ParagraphCounter] = None,
    ) -> None:
        self._documents = documents
        self._versions = versions
        self._uow = uow
        self._locks = locks
        self._handovers = handovers
        self._reviews = reviews
        self._policy = policy or LifecyclePolicy()
        self._counter = counter or ParagraphCounter()

    @property
    def policy(self) -> LifecyclePolicy:
        return self._policy

    # ------------------------------------------------------------------ #
    # Translator actions
    # ------------------------------------------------------------------ #
    def start_translation(self, document_id: int, worker_id: int) -> TranslationLock:
        """
        PENDING_TRANSLATION -> IN_TRANSLATION with a lock for 'worker_id'.

        The new lock's completed units are seeded from an active handover.

        Raises
        ------
        InvalidTransition, AlreadyLocked, DocumentNotFound
        """
        with self._uow.transaction():
            doc = self._require_document(document_id)
            new_status = self._check(LifecycleAction.START_TRANSLATION, doc, worker_id)
            lock = self._acquire_seeded(document_id, worker_id)
            self._set_status(doc, new_status)
        logger.log(FEATURE, "TranslationStarted", user_id=worker_id, reference_id=str(document_id))
        return lock

    def resume_translation(self, document_id: int, worker_id: int) -> TranslationLock:
        """Take the free lock of an IN_TRANSLATION document (after hand-over or rejection)."""
        with self._uow.transaction():
            doc = self._require_document(document_id)
            self._check(LifecycleAction.RESUME_TRANSLATION, doc, worker_id)
            lock = self._acquire_seeded(document_id, worker_id)
        logger.log(FEATURE, "TranslationResumed", user_id=worker_id, reference_id=str(document_id))
        return lock

    def save_translation(
        self,
        document_id: int,
        worker_id: int,
        content: str,
        *,
        completed_units: Optional[Iterable[int]] = None,
    ) -> DocumentVersion:
        """
        Append a MANUAL_TRANSLATION draft; the lock is kept.

        'completed_units', when given, replaces the lock's completed set.
        """
        with self._uow.transaction():
            doc = self._require_document(document_id)
            self._check(LifecycleAction.SAVE_TRANSLATION, doc, worker_id)
            self._locks.require_holder(document_id, worker_id)
            version = self._versions.append(document_id, VersionType.MANUAL_TRANSLATION, content, worker_id)
            if completed_units is not None:
                self._locks.set_progress(document_id, worker_id, completed_units)
            refresh_current_pointer(self._documents, self._versions, document_id, doc.status)
        logger.log(
            FEATURE, "TranslationSaved", user_id=worker_id, reference_id=str(document_id),
            message=f"version={version.version_number}",
        )
        return version

    def record_progress(self, document_id: int, worker_id: int, completed_unit_index: int) -> TranslationLock:
        self._require_document(document_id)
        return self._locks.record_progress(document_id, worker_id, completed_unit_index)

    def release_lock(self, document_id: int, worker_id: int) -> None:
        """Give up the lock without a handover; status unchanged."""
        with self._uow.transaction():
            doc = self._require_document(document_id)
            self._check(LifecycleAction.RELEASE_LOCK, doc, worker_id)
            self._locks.release(document_id, worker_id)
        logger.log(FEATURE, "TranslationReleased", user_id=worker_id, reference_id=str(document_id))

    def hand_over(
        self,
        document_id: int,
        worker_id: int,
        memo: str,
        *,
        terms: Optional[str] = None,
        completed_units: Optional[Iterable[int]] = None,
        content: Optional[str] = None,
    ) -> Handover:
        """
        Release unfinished work with context for the next worker.

        'content' is saved as a MANUAL_TRANSLATION before the lock goes away;
        'completed_units' defaults to the lock's current set. Status stays
        IN_TRANSLATION.

        Raises
        ------
        InvalidTransition, NotLockHolder, InvalidContent
        """
        with self._uow.transaction():
            doc = self._require_document(document_id)
            self._check(LifecycleAction.HAND_OVER, doc, worker_id)
            lock = self._locks.require_holder(document_id, worker_id)
            if content is not None:
                self._versions.append(document_id, VersionType.MANUAL_TRANSLATION, content, worker_id)
                refresh_current_pointer(self._documents, self._versions, document_id, doc.status)
            units = lock.completed_units if completed_units is None else completed_units
            handover = self._handovers.record(
                document_id, worker_id, memo, terms=terms, completed_units=units,
            )
            self._locks.release(document_id, worker_id)
        logger.log(
            FEATURE, "TranslationHandedOver", user_id=worker_id, reference_id=str(document_id),
            message=f"handover={handover.id}",
        )
        return handover

    def submit_for_review(
        self, document_id: int, worker_id: int, content: Optional[str] = None
    ) -> DocumentVersion:
        """
        IN_TRANSLATION -> PENDING_REVIEW.

        Appends 'content' as MANUAL_TRANSLATION (or copies the current
        translation forward when omitted), destroys the lock and clears any
        active handover.

        Raises
        ------
        InvalidTransition, NotLockHolder, VersionNotFound
        """
        with self._uow.transaction():
            doc = self._require_document(document_id)
            new_status = self._check(LifecycleAction.SUBMIT_REVIEW, doc, worker_id)
            self._locks.require_holder(document_id, worker_id)
            if content is None:
                content = require_current_version(
                    document_id, doc.status, self._versions.list_by_document(document_id)
                ).content
            version = self._versions.append(document_id, VersionType.MANUAL_TRANSLATION, content, worker_id)
            self._locks.release(document_id, worker_id)
            self._handovers.clear(document_id)
            self._set_status(doc, new_status)
        logger.log(
            FEATURE, "TranslationSubmitted", user_id=worker_id, reference_id=str(document_id),
            message=f"version={version.version_number}",
        )
        return version

    # ------------------------------------------------------------------ #
    # Reviewer / administrator actions
    # ------------------------------------------------------------------ #
    def save_review(
        self,
        document_id: int,
        reviewer_id: int,
        *,
        comment: Optional[str] = None,
        checklist: Optional[Mapping[str, bool]] = None,
    ) -> Review:
        """Keep a PENDING review (comment, checklist) of the version under review."""
        with self._uow.transaction():
            doc = self._require_document(document_id)
            self._check(LifecycleAction.SAVE_REVIEW, doc, reviewer_id)
            reviewed = require_current_version(
                document_id, doc.status, self._versions.list_by_document(document_id)
            )
            return self._reviews.save_draft(
                document_id, reviewer_id, reviewed.id, comment=comment, checklist=checklist,
            )

    def approve(
        self,
        document_id: int,
        reviewer_id: int,
        content: Optional[str] = None,
        *,
        comment: Optional[str] = None,
        checklist: Optional[Mapping[str, bool]] = None,
    ) -> DocumentVersion:
        """
        PENDING_REVIEW -> APPROVED, appending a FINAL version.

        Without 'content' the current (reviewed) version is copied as FINAL.
        An APPROVED review of the reviewed version is stored alongside.
        """
        with self._uow.transaction():
            doc = self._require_document(document_id)
            new_status = self._check(LifecycleAction.APPROVE, doc, reviewer_id)
            reviewed = require_current_version(
                document_id, doc.status, self._versions.list_by_document(document_id)
            )
            version = self._versions.append(
                document_id, VersionType.FINAL, reviewed.content if content is None else content, reviewer_id
            )
            self._reviews.decide(
                document_id, reviewer_id, reviewed.id, ReviewStatus.APPROVED,
                comment=comment, checklist=checklist,
            )
            self._set_status(doc, new_status)
        logger.log(
            FEATURE, "TranslationApproved", user_id=reviewer_id, reference_id=str(document_id),
            message=f"version={version.version_number}",
        )
        return version

    def reject(
        self,
        document_id: int,
        reviewer_id: int,
        reason: Optional[str] = None,
        *,
        checklist: Optional[Mapping[str, bool]] = None,
    ) -> Document:
        """
        PENDING_REVIEW/APPROVED -> IN_TRANSLATION; a translator resumes later.

        'reason' becomes the comment of the REJECTED review.
        """
        with self._uow.transaction():
            doc = self._require_document(document_id)
            new_status = self._check(LifecycleAction.REJECT, doc, reviewer_id)
            reviewed = resolve_current_version(doc.status, self._versions.list_by_document(document_id))
            self._reviews.decide(
                document_id, reviewer_id, reviewed.id if reviewed else None, ReviewStatus.REJECTED,
                comment=reason, checklist=checklist,
            )
            self._set_status(doc, new_status)
        logger.log(
            FEATURE, "TranslationRejected", user_id=reviewer_id, reference_id=str(document_id),
            message=reason,
        )
        return self._require_document(document_id)

    def publish(self, document_id: int, actor_id: int) -> Document:
        with self._uow.transaction():
            doc = self._require_document(document_id)
            new_status = self._check(LifecycleAction.PUBLISH, doc, actor_id)
            self._set_status(doc, new_status)
        logger.log(FEATURE, "DocumentPublished", user_id=actor_id, reference_id=str(document_id))
        return self._require_document(document_id)

    def convert_handover_to_pending(self, document_id: int, admin_id: int) -> Optional[DocumentVersion]:
        """
        Return a handed-over document to PENDING_TRANSLATION.

        The latest MANUAL_TRANSLATION or AI_DRAFT is copied forward as a new
        MANUAL_TRANSLATION so that no work is lost; without either nothing
        is appended. The handover stays queryable.

        Returns
        -------
        DocumentVersion | None
            The copied version, if one was appended.

        Raises
        ------
        InvalidTransition
            Status already PENDING_TRANSLATION, or no handover recorded.
        AlreadyLocked
            The document is still locked.
        """
        action = LifecycleAction.CONVERT_TO_PENDING
        with self._uow.transaction():
            doc = self._require_document(document_id)
            new_status = self._check(action, doc, admin_id)
            if self._handovers.latest(document_id) is None:
                self._reject(doc, action, admin_id, "no handover recorded")
            lock = self._locks.query(document_id)
            if lock.locked:
                logger.log(
                    FEATURE, "LockConflict", user_id=admin_id, level="WARNING",
                    reference_id=str(document_id), message=f"held by {lock.holder_id}",
                )
                raise AlreadyLocked(document_id, lock.holder_id, lock.holder_name)
            source = latest_of_type(
                self._versions.list_by_document(document_id),
                VersionType.MANUAL_TRANSLATION,
                VersionType.AI_DRAFT,
            )
            copied = None
            if source is not None:
                copied = self._versions.append(
                    document_id, VersionType.MANUAL_TRANSLATION, source.content, admin_id
                )
            self._set_status(doc, new_status)
        logger.log(
            FEATURE, "HandoverConverted", user_id=admin_id, reference_id=str(document_id),
            message=f"copied={copied.version_number if copied else None}",
        )
        return copied

    def reclaim_lock(self, document_id: int, admin_id: int) -> TranslationLock:
        """
        Administrative override: destroy the lock whoever holds it.

        Raises
        ------
        InvalidTransition
            If the document is not locked.
        """
        action = LifecycleAction.RECLAIM_LOCK
        with self._uow.transaction():
            doc = self._require_document(document_id)
            self._check(action, doc, admin_id)
            removed = self._locks.reclaim(document_id, admin_id)
            if removed is None:
                self._reject(doc, action, admin_id, "no active lock")
        return removed

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def get_document(self, document_id: int) -> Document:
        return self._require_document(document_id)

    def versions(self, document_id: int) -> List[DocumentVersion]:
        self._require_document(document_id)
        return self._versions.list_by_document(document_id)

    def current_version(self, document_id: int) -> DocumentVersion:
        """
        Resolve the current version from the full version set.

        Raises
        ------
        VersionNotFound
            If nothing applies to the document's status.
        """
        doc = self._require_document(document_id)
        return require_current_version(document_id, doc.status, self._versions.list_by_document(document_id))

    def reviews(self, document_id: int) -> List[Review]:
        """All reviews of the document, oldest first."""
        self._require_document(document_id)
        return self._reviews.list_for_document(document_id)

    def allowed_actions(self, document_id: int) -> List[LifecycleAction]:
        return self._policy.allowed_actions(self._require_document(document_id).status)

    def total_units(self, document_id: int) -> int:
        """Paragraph count of the ORIGINAL content (0 without one)."""
        self._require_document(document_id)
        original = original_version(self._versions.list_by_document(document_id))
        return self._counter.count(original.content) if original else 0

    def progress(self, document_id: int) -> int:
        doc = self._require_document(document_id)
        units = completed_units_for(self._locks.current(document_id), self._handovers.latest(document_id))
        return progress_for_status(doc.status, units, self.total_units(document_id))

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _require_document(self, document_id: int) -> Document:
        doc = self._documents.get(document_id)
        if doc is None:
            raise DocumentNotFound(document_id)
        return doc

    def _check(self, action: LifecycleAction, doc: Document, actor_id: int) -> DocumentStatus:
        try:
            return self._policy.check(action, doc.status)
        except InvalidTransition:
            logger.log(
                FEATURE, "TransitionRejected", user_id=actor_id, level="WARNING",
                reference_id=str(doc.id), message=f"{action.value} in {doc.status.value}",
            )
            raise

    def _reject(self, doc: Document, action: LifecycleAction, actor_id: int, detail: str) -> NoReturn:
        logger.log(
            FEATURE, "TransitionRejected", user_id=actor_id, level="WARNING",
            reference_id=str(doc.id), message=f"{action.value}: {detail}",
        )
        raise InvalidTransition(doc.status, action, detail)

    def _acquire_seeded(self, document_id: int, worker_id: int) -> TranslationLock:
        handover = self._handovers.latest(document_id)
        seed = handover.completed_units if handover else ()
        return self._locks.acquire(document_id, worker_id, seed_units=seed)

    def _set_status(self, doc: Document, status: DocumentStatus) -> None:
        if status != doc.status:
            self._documents.update_status(doc.id, status)
        refresh_current_pointer(self._documents, self._versions, doc.id, status)
