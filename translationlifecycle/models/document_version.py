from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .ids import VersionId, DocumentId, UserId
from .version_type import VersionType


@dataclass(frozen=True, slots=True)
class DocumentVersion:
    """
    Immutable content snapshot of a document.

    'version_number' is unique per document, strictly increasing and never
    reused. Corrections are new versions with higher numbers.
    """
    id: VersionId
    document_id: DocumentId
    version_number: int
    version_type: VersionType
    content: str
    created_at: datetime
    created_by: Optional[UserId] = None

    @property
    def is_final(self) -> bool:
        return self.version_type == VersionType.FINAL
