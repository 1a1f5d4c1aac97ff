"""
===============================================================================
Handover Repository Protocol – context left for the next worker
-------------------------------------------------------------------------------
Design:
    - Handovers are kept as history; the newest uncleared one is "active".
    - Clearing marks rows, it never deletes them.
===============================================================================
"""
from __future__ import annotations
from datetime import datetime
from typing import Protocol, Optional, List, Iterable

from translationlifecycle.models.handover import Handover


class HandoverRepository(Protocol):
    """
    Methods
    -------
    add(document_id, memo, terms, completed_units, handed_over_by, handed_over_at) -> Handover
        Record a handover; supersedes earlier ones for the document.
    latest(doc_id) -> Optional[Handover]
        The active handover, if any.
    clear(doc_id, cleared_at) -> int
        Deactivate all handovers of the document; returns rows touched.
    list_active() -> list[Handover]
        Active handovers of all documents, newest first.
    """

    def add(
        self,
        document_id: int,
        memo: str,
        terms: Optional[str],
        completed_units: Iterable[int],
        handed_over_by: int,
        handed_over_at: datetime,
    ) -> Handover:
        ...

    def latest(self, doc_id: int) -> Optional[Handover]:
        ...

    def clear(self, doc_id: int, cleared_at: datetime) -> int:
        ...

    def list_active(self) -> List[Handover]:
        ...
