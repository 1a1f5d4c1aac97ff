"""Translation progress from completed paragraph indices (no IO)."""
from __future__ import annotations

from typing import Collection, FrozenSet, Optional

from translationlifecycle.models.document_status import DocumentStatus
from translationlifecycle.models.handover import Handover
from translationlifecycle.models.translation_lock import TranslationLock

_COMPLETE_STATUSES = frozenset({DocumentStatus.APPROVED, DocumentStatus.PUBLISHED})


def compute_progress(completed_units: Collection[int], total_units: int) -> int:
    """
    round(100 * |completed| / total), clamped to [0, 100].

    'total_units' of zero (or less) yields 0 instead of a division error.
    Rounds halves up so 12.5 % reports 13 like the web client does.
    """
    if total_units <= 0:
        return 0
    done = len(set(completed_units))
    value = int(100 * done / total_units + 0.5)
    return max(0, min(100, value))


def progress_for_status(
    status: DocumentStatus, completed_units: Collection[int], total_units: int
) -> int:
    """APPROVED/PUBLISHED always report 100; otherwise unit-based."""
    if DocumentStatus(status) in _COMPLETE_STATUSES:
        return 100
    return compute_progress(completed_units, total_units)


def completed_units_for(
    lock: Optional[TranslationLock], handover: Optional[Handover]
) -> FrozenSet[int]:
    """The active lock's set wins; otherwise the handover's; otherwise empty."""
    if lock is not None:
        return lock.completed_units
    if handover is not None:
        return handover.completed_units
    return frozenset()
