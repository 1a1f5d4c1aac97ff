"""
===============================================================================
HandoverService – context left for the next translator
-------------------------------------------------------------------------------
Purpose:
    Record and expose handovers. A handover never changes the document
    status; the coordinator decides when one is recorded or cleared.

Integration:
    - Used by LifecycleCoordinator (hand over, submit, seeding new locks).
    - Used by DocumentService for "pending handovers" lists.
===============================================================================
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from functools import partial
from typing import Callable, Iterable, List, Optional

from core.helpers.date_time_helper import utc_now
from core.logging.logic.logger import logger
from translationlifecycle.exceptions.errors import InvalidContent
from translationlifecycle.logic.adapters.identity_provider import IdentityProvider, StaticIdentityProvider
from translationlifecycle.logic.repository.handover_repository import HandoverRepository
from translationlifecycle.logic.repository.unit_of_work import UnitOfWork
from translationlifecycle.models.handover import Handover

FEATURE = "TranslationLifecycle"


class HandoverService:
    """
    Parameters
    ----------
    handovers : HandoverRepository
    uow : UnitOfWork
        Audit entries are deferred until its outermost transaction commits.
    identity : IdentityProvider, optional
        Fills 'handed_over_by_name' on returned records.
    clock : Callable[[], datetime], optional
    """

    def __init__(
        self,
        handovers: HandoverRepository,
        uow: UnitOfWork,
        *,
        identity: Optional[IdentityProvider] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._handovers = handovers
        self._uow = uow
        self._identity = identity or StaticIdentityProvider()
        self._clock = clock

    def record(
        self,
        document_id: int,
        worker_id: int,
        memo: str,
        *,
        terms: Optional[str] = None,
        completed_units: Iterable[int] = (),
    ) -> Handover:
        """
        Store a new handover; earlier active ones for the document are superseded.

        Raises
        ------
        InvalidContent
            If the memo is empty or a unit index is negative.
        """
        text = (memo or "").strip()
        if not text:
            raise InvalidContent("Handover memo must not be empty")
        units = frozenset(completed_units)
        if any(isinstance(u, bool) or not isinstance(u, int) or u < 0 for u in units):
            raise InvalidContent(f"Paragraph indices must be non-negative integers: {sorted(units, key=str)}")
        terms_text = (terms or "").strip() or None
        handover = self._handovers.add(
            document_id=document_id,
            memo=text,
            terms=terms_text,
            completed_units=units,
            handed_over_by=worker_id,
            handed_over_at=self._clock(),
        )
        self._uow.after_commit(partial(
            logger.log, FEATURE, "HandoverRecorded", user_id=worker_id, reference_id=str(document_id),
            message=f"units={len(units)}",
        ))
        return self._named(handover)

    def latest(self, document_id: int) -> Optional[Handover]:
        """The active handover with the author's display name, or None."""
        handover = self._handovers.latest(document_id)
        return self._named(handover) if handover else None

    def clear(self, document_id: int) -> int:
        cleared = self._handovers.clear(document_id, self._clock())
        if cleared:
            self._uow.after_commit(partial(logger.log, FEATURE, "HandoverCleared", reference_id=str(document_id)))
        return cleared

    def list_active(self) -> List[Handover]:
        return [self._named(h) for h in self._handovers.list_active()]

    def _named(self, handover: Handover) -> Handover:
        return replace(handover, handed_over_by_name=self._identity.display_name(handover.handed_over_by))
