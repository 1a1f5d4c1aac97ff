"""
===============================================================================
Review Repository Protocol – reviewer verdicts per document version
-------------------------------------------------------------------------------
Design:
    - One row per review; a reviewer has at most one PENDING review per
      document, which the decision turns into APPROVED or REJECTED.
    - Decided reviews are history and are never modified again.
===============================================================================
"""
from __future__ import annotations
from datetime import datetime
from typing import Protocol, Optional, List, Mapping

from translationlifecycle.models.review import Review
from translationlifecycle.models.review_status import ReviewStatus


class ReviewRepository(Protocol):
    """
    Methods
    -------
    add(document_id, version_id, reviewer_id, status, comment, checklist, created_at, reviewed_at) -> Review
    update(review_id, status, comment, checklist, reviewed_at) -> Review
    open_review(doc_id, reviewer_id) -> Optional[Review]
        The reviewer's PENDING review of the document, if any.
    latest(doc_id) -> Optional[Review]
        Newest review of the document, whatever its status.
    list_by_document(doc_id) -> list[Review]
        Oldest first.
    """

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
        ...

    def update(
        self,
        review_id: int,
        status: ReviewStatus,
        comment: Optional[str],
        checklist: Mapping[str, bool],
        reviewed_at: Optional[datetime],
    ) -> Review:
        ...

    def open_review(self, doc_id: int, reviewer_id: int) -> Optional[Review]:
        ...

    def latest(self, doc_id: int) -> Optional[Review]:
        ...

    def list_by_document(self, doc_id: int) -> List[Review]:
        ...
