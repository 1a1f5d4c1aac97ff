from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from .ids import DocumentId, ReviewId, UserId, VersionId
from .review_status import ReviewStatus


@dataclass(frozen=True, slots=True)
class Review:
    """
    A reviewer's verdict on one version of a document.

    PENDING while the reviewer is still working on it; APPROVED or REJECTED
    once the decision was taken ('reviewed_at' set).
    """
    id: ReviewId
    document_id: DocumentId
    version_id: Optional[VersionId]
    reviewer_id: UserId
    status: ReviewStatus
    created_at: datetime
    comment: Optional[str] = None
    checklist: Dict[str, bool] = field(default_factory=dict)
    reviewed_at: Optional[datetime] = None
    version_number: Optional[int] = None
    reviewer_name: Optional[str] = None

    @property
    def is_decided(self) -> bool:
        return self.status != ReviewStatus.PENDING
