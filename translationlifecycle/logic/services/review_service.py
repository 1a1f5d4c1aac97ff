"""
===============================================================================
ReviewService – reviewer comments, checklists and verdicts
-------------------------------------------------------------------------------
Purpose:
    Keep one review record per reviewer decision. A reviewer may save a
    PENDING review (comment and checklist in progress) before deciding; the
    decision turns it into APPROVED or REJECTED.

Integration:
    - LifecycleCoordinator writes reviews inside the approve/reject
      transaction, so a verdict exists only if the status change committed.
    - DocumentService shows the latest review on the details page.
===============================================================================
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from functools import partial
from typing import Callable, Dict, List, Mapping, Optional

from core.helpers.date_time_helper import utc_now
from core.logging.logic.logger import logger
from translationlifecycle.exceptions.errors import InvalidContent
from translationlifecycle.logic.adapters.identity_provider import IdentityProvider, StaticIdentityProvider
from translationlifecycle.logic.repository.review_repository import ReviewRepository
from translationlifecycle.logic.repository.unit_of_work import UnitOfWork
from translationlifecycle.models.review import Review
from translationlifecycle.models.review_status import ReviewStatus

FEATURE = "TranslationLifecycle"


class ReviewService:
    """
    Parameters
    ----------
    reviews : ReviewRepository
    uow : UnitOfWork
    identity : IdentityProvider, optional
        Fills 'reviewer_name' on returned records.
    clock : Callable[[], datetime], optional
    """

    def __init__(
        self,
        reviews: ReviewRepository,
        uow: UnitOfWork,
        *,
        identity: Optional[IdentityProvider] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._reviews = reviews
        self._uow = uow
        self._identity = identity or StaticIdentityProvider()
        self._clock = clock

    def save_draft(
        self,
        document_id: int,
        reviewer_id: int,
        version_id: Optional[int],
        *,
        comment: Optional[str] = None,
        checklist: Optional[Mapping[str, bool]] = None,
    ) -> Review:
        """Create or update the reviewer's PENDING review of the document."""
        with self._uow.transaction():
            existing = self._reviews.open_review(document_id, reviewer_id)
            if existing is None:
                review = self._reviews.add(
                    document_id=document_id,
                    version_id=version_id,
                    reviewer_id=reviewer_id,
                    status=ReviewStatus.PENDING,
                    comment=_clean(comment),
                    checklist=_checklist(checklist),
                    created_at=self._clock(),
                )
            else:
                review = self._reviews.update(
                    existing.id,
                    ReviewStatus.PENDING,
                    _clean(comment) if comment is not None else existing.comment,
                    {**existing.checklist, **_checklist(checklist)},
                    None,
                )
            self._uow.after_commit(partial(
                logger.log, FEATURE, "ReviewSaved", user_id=reviewer_id, reference_id=str(document_id),
            ))
        return self._named(review)

    def decide(
        self,
        document_id: int,
        reviewer_id: int,
        version_id: Optional[int],
        status: ReviewStatus,
        *,
        comment: Optional[str] = None,
        checklist: Optional[Mapping[str, bool]] = None,
    ) -> Review:
        """
        Record an APPROVED or REJECTED verdict.

        A PENDING review of the same reviewer is completed; its comment is
        kept unless a new one is given and its checklist is merged.
        """
        status = ReviewStatus(status)
        if status == ReviewStatus.PENDING:
            raise InvalidContent("A review decision must be APPROVED or REJECTED")
        now = self._clock()
        with self._uow.transaction():
            existing = self._reviews.open_review(document_id, reviewer_id)
            if existing is None:
                review = self._reviews.add(
                    document_id=document_id,
                    version_id=version_id,
                    reviewer_id=reviewer_id,
                    status=status,
                    comment=_clean(comment),
                    checklist=_checklist(checklist),
                    created_at=now,
                    reviewed_at=now,
                )
            else:
                review = self._reviews.update(
                    existing.id,
                    status,
                    _clean(comment) if comment is not None else existing.comment,
                    {**existing.checklist, **_checklist(checklist)},
                    now,
                )
        return self._named(review)

    def latest(self, document_id: int) -> Optional[Review]:
        review = self._reviews.latest(document_id)
        return self._named(review) if review else None

    def list_for_document(self, document_id: int) -> List[Review]:
        return [self._named(r) for r in self._reviews.list_by_document(document_id)]

    def _named(self, review: Review) -> Review:
        return replace(review, reviewer_name=self._identity.display_name(review.reviewer_id))


def _clean(comment: Optional[str]) -> Optional[str]:
    return (comment or "").strip() or None


def _checklist(items: Optional[Mapping[str, bool]]) -> Dict[str, bool]:
    return {str(k): bool(v) for k, v in (items or {}).items()}
