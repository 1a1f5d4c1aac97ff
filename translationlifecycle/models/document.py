from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .ids import DocumentId, UserId, VersionId, CategoryId
from .document_status import DocumentStatus
from .handover import Handover


@dataclass(slots=True)
class Document:
    """
    Aggregate root for a translatable document.

    Notes:
    - 'status'              lifecycle status; mutated only by the coordinator
    - 'current_version_id'  cached pointer to the resolved version; a hint,
                            re-resolve from the version set before trusting it
    - 'handover'            latest active handover, filled by the read side
    """

    id: DocumentId
    title: str
    status: DocumentStatus
    category_id: Optional[CategoryId] = None
    current_version_id: Optional[VersionId] = None
    created_by: Optional[UserId] = None
    handover: Optional[Handover] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Convenience flags ------------------------------------------------------
    def is_translatable(self) -> bool:
        """True while a worker may hold the edit lock."""
        return self.status in {
            DocumentStatus.PENDING_TRANSLATION,
            DocumentStatus.IN_TRANSLATION,
        }

    def is_completed(self) -> bool:
        return self.status in {DocumentStatus.APPROVED, DocumentStatus.PUBLISHED}
