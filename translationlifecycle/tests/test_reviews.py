"""
translationlifecycle/tests/test_reviews.py

Review records written by approve / reject and shown on the details page.
"""
from __future__ import annotations

import sqlite3

import pytest

from translationlifecycle.exceptions import InvalidContent, InvalidTransition, StoreUnavailable
from translationlifecycle.logic.repository.sqlite.document_repository_sqlite import DocumentRepositorySQLite
from translationlifecycle.models.document_status import DocumentStatus as S
from translationlifecycle.models.review_status import ReviewStatus as R

from .support import ADMIN, ALICE, BOB


@pytest.fixture
def submitted(lifecycle, make_document) -> int:
    """A document in PENDING_REVIEW with MANUAL_TRANSLATION#3."""
    doc_id = make_document()
    lifecycle.coordinator.start_translation(doc_id, ALICE)
    lifecycle.coordinator.submit_for_review(doc_id, ALICE, "<p>human</p>")
    return doc_id


def test_approve_records_review_of_reviewed_version(lifecycle, submitted) -> None:
    co = lifecycle.coordinator
    final = co.approve(submitted, ADMIN, comment=" reads well ", checklist={"terms": True})

    [review] = co.reviews(submitted)
    assert review.status == R.APPROVED
    assert review.reviewer_id == ADMIN
    assert review.reviewer_name == "Admin"
    assert review.version_number == 3
    assert final.version_number == 4
    assert review.comment == "reads well"
    assert review.checklist == {"terms": True}
    assert review.reviewed_at is not None
    assert review.is_decided


def test_reject_records_reason_as_comment(lifecycle, submitted) -> None:
    co = lifecycle.coordinator
    co.reject(submitted, BOB, "terminology", checklist={"terms": False})

    review = lifecycle.reviews.latest(submitted)
    assert review.status == R.REJECTED
    assert review.comment == "terminology"
    assert review.checklist == {"terms": False}
    assert review.version_number == 3
    assert co.get_document(submitted).status == S.IN_TRANSLATION


def test_pending_review_is_completed_by_the_decision(lifecycle, submitted, clock) -> None:
    co = lifecycle.coordinator
    draft = co.save_review(submitted, ADMIN, comment="check intro", checklist={"terms": True})
    assert draft.status == R.PENDING
    assert draft.reviewed_at is None
    assert not draft.is_decided

    clock.advance(minutes=5)
    co.save_review(submitted, ADMIN, checklist={"style": False})
    co.approve(submitted, ADMIN, checklist={"style": True})

    [review] = co.reviews(submitted)
    assert review.id == draft.id
    assert review.status == R.APPROVED
    assert review.comment == "check intro"
    assert review.checklist == {"terms": True, "style": True}
    assert review.reviewed_at == clock.now


def test_reviews_are_history(lifecycle, submitted) -> None:
    co = lifecycle.coordinator
    co.reject(submitted, ADMIN, "first pass")
    co.resume_translation(submitted, ALICE)
    co.submit_for_review(submitted, ALICE, "<p>second</p>")
    co.approve(submitted, ADMIN)

    reviews = co.reviews(submitted)
    assert [(r.status, r.version_number) for r in reviews] == [(R.REJECTED, 3), (R.APPROVED, 4)]
    assert lifecycle.reviews.latest(submitted).status == R.APPROVED


def test_save_review_outside_review_is_rejected(lifecycle, make_document) -> None:
    doc_id = make_document()
    with pytest.raises(InvalidTransition):
        lifecycle.coordinator.save_review(doc_id, ADMIN, comment="too early")
    assert lifecycle.coordinator.reviews(doc_id) == []


def test_decision_cannot_be_pending(lifecycle, submitted) -> None:
    with pytest.raises(InvalidContent):
        lifecycle.reviews.decide(submitted, ADMIN, None, R.PENDING)


def test_failed_approve_stores_no_review(lifecycle, submitted, monkeypatch) -> None:
    def broken_update_status(self, doc_id, status):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(DocumentRepositorySQLite, "update_status", broken_update_status)
    with pytest.raises(StoreUnavailable):
        lifecycle.coordinator.approve(submitted, ADMIN, comment="ok")

    monkeypatch.undo()
    assert lifecycle.coordinator.reviews(submitted) == []
    assert lifecycle.coordinator.get_document(submitted).status == S.PENDING_REVIEW


def test_details_show_latest_review(lifecycle, submitted) -> None:
    assert lifecycle.documents.get_details(submitted).review is None
    lifecycle.coordinator.reject(submitted, ADMIN, "glossary")
    details = lifecycle.documents.get_details(submitted)
    assert details.review.status == R.REJECTED
    assert details.review.comment == "glossary"
