from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from translationlifecycle.models.document import Document
from translationlifecycle.models.document_version import DocumentVersion
from translationlifecycle.models.handover import Handover
from translationlifecycle.models.review import Review
from translationlifecycle.models.translation_lock import LockStatus


@dataclass(slots=True)
class DocumentDetailsDTO:
    """Everything a detail or work page needs for one document."""
    document: Document
    current_version: Optional[DocumentVersion]
    original_version: Optional[DocumentVersion]
    lock: LockStatus
    handover: Optional[Handover]
    progress: int
    total_units: int
    is_favorite: bool
    review: Optional[Review] = None
