"""Progress percentage from completed paragraph indices."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from translationlifecycle.logic.policy.progress_policy import (
    completed_units_for,
    compute_progress,
    progress_for_status,
)
from translationlifecycle.models.document_status import DocumentStatus
from translationlifecycle.models.handover import Handover
from translationlifecycle.models.translation_lock import TranslationLock

_TS = datetime(2026, 10, 19, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "completed, total, expected",
    [
        (set(), 0, 0),
        ({0, 1}, 0, 0),
        (set(), 10, 0),
        ({0, 1, 4}, 10, 30),
        ({0}, 3, 33),
        ({0, 1}, 3, 67),
        ({0}, 8, 13),
        ({0, 1, 2}, 3, 100),
        ({0, 1, 2, 3, 4}, 3, 100),
    ],
)
def test_compute_progress(completed, total, expected) -> None:
    assert compute_progress(completed, total) == expected


def test_progress_always_within_bounds() -> None:
    for total in range(0, 12):
        for done in range(0, 15):
            assert 0 <= compute_progress(range(done), total) <= 100


def test_completed_statuses_report_100() -> None:
    assert progress_for_status(DocumentStatus.APPROVED, set(), 0) == 100
    assert progress_for_status(DocumentStatus.PUBLISHED, {0}, 50) == 100
    assert progress_for_status(DocumentStatus.IN_TRANSLATION, {0}, 4) == 25


def test_lock_units_win_over_handover() -> None:
    lock = TranslationLock(document_id=1, holder_id=2, acquired_at=_TS, completed_units=frozenset({5}))
    handover = Handover(
        id=1, document_id=1, memo="m", handed_over_by=1, handed_over_at=_TS,
        completed_units=frozenset({0, 1}),
    )
    assert completed_units_for(lock, handover) == {5}
    assert completed_units_for(None, handover) == {0, 1}
    assert completed_units_for(None, None) == frozenset()
