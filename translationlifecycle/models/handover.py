from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from .ids import DocumentId, UserId, HandoverId


@dataclass(frozen=True, slots=True)
class Handover:
    """
    Context left by a worker who released unfinished work.

    Attached to the document, not to a version; survives lock destruction.
    """
    id: HandoverId
    document_id: DocumentId
    memo: str
    handed_over_by: UserId
    handed_over_at: datetime
    terms: Optional[str] = None
    completed_units: FrozenSet[int] = field(default_factory=frozenset)
    handed_over_by_name: Optional[str] = None
