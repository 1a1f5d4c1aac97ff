"""
translationlifecycle/tests/test_document_service.py

Read side (details, lists, admin views) and favorites.
"""
from __future__ import annotations

import re

import pytest

from translationlifecycle.exceptions import DocumentNotFound, InvalidContent, InvalidTransition
from translationlifecycle.models.document_status import DocumentStatus as S
from translationlifecycle.models.version_type import VersionType as T

from .support import ADMIN, ALICE, BOB


def test_details_of_document_in_translation(lifecycle, make_document) -> None:
    doc_id = make_document("Guide")
    lifecycle.coordinator.start_translation(doc_id, ALICE)
    lifecycle.coordinator.record_progress(doc_id, ALICE, 0)
    lifecycle.favorites.add(BOB, doc_id)

    details = lifecycle.documents.get_details(doc_id, viewer_id=BOB)
    assert details.document.title == "Guide"
    assert details.current_version.version_type == T.AI_DRAFT
    assert details.original_version.version_number == 1
    assert details.lock.locked and details.lock.holder_name == "Alice"
    assert details.handover is None
    assert details.total_units == 5
    assert details.progress == 20
    assert details.is_favorite
    assert not lifecycle.documents.get_details(doc_id, viewer_id=ALICE).is_favorite


def test_details_show_handover(lifecycle, make_document) -> None:
    doc_id = make_document()
    lifecycle.coordinator.start_translation(doc_id, ALICE)
    lifecycle.coordinator.hand_over(doc_id, ALICE, "rewrite intro", completed_units=[0, 1, 4])

    details = lifecycle.documents.get_details(doc_id)
    assert not details.lock.locked
    assert details.handover.memo == "rewrite intro"
    assert details.document.handover == details.handover
    assert details.progress == 60


def test_details_unknown_document(lifecycle) -> None:
    with pytest.raises(DocumentNotFound):
        lifecycle.documents.get_details(1234)


def test_list_documents_filters_and_formats(lifecycle, make_document) -> None:
    a = make_document("Alpha guide", category_id=1)
    b = make_document("Beta notes", category_id=2)
    c = make_document("Gamma", release=False)
    lifecycle.coordinator.start_translation(b, BOB)

    pending = lifecycle.documents.list_documents(status=S.PENDING_TRANSLATION)
    assert [row.id for row in pending] == [a]
    assert [row.id for row in lifecycle.documents.list_documents(category_id=2)] == [b]
    assert [row.id for row in lifecycle.documents.list_documents(title="gamma")] == [c]

    row = lifecycle.documents.list_documents(status=S.IN_TRANSLATION)[0]
    assert row.locked and row.locked_by == "Bob" and not row.lock_is_stale
    assert row.status == "IN_TRANSLATION"
    assert re.fullmatch(r"\d{4}\.\d{2}\.\d{2} \d{2}:\d{2}:\d{2}", row.updated)


def test_working_documents(lifecycle, make_document) -> None:
    a = make_document("A")
    b = make_document("B")
    make_document("C")
    lifecycle.coordinator.start_translation(a, ALICE)
    lifecycle.coordinator.start_translation(b, BOB)
    assert [row.id for row in lifecycle.documents.working_documents(ALICE)] == [a]


def test_pending_handovers(lifecycle, make_document) -> None:
    open_doc = make_document("open")
    taken = make_document("taken")
    converted = make_document("converted")
    co = lifecycle.coordinator
    for doc_id in (open_doc, taken, converted):
        co.start_translation(doc_id, ALICE)
        co.hand_over(doc_id, ALICE, "see notes")
    co.resume_translation(taken, BOB)
    co.convert_handover_to_pending(converted, ADMIN)

    rows = lifecycle.documents.pending_handovers()
    assert [row.id for row in rows] == [open_doc]
    assert rows[0].has_handover


def test_stale_locks(lifecycle, make_document, clock) -> None:
    old = make_document("old")
    lifecycle.coordinator.start_translation(old, ALICE)
    clock.advance(hours=26)
    fresh = make_document("fresh")
    lifecycle.coordinator.start_translation(fresh, BOB)
    stale = lifecycle.documents.stale_locks()
    assert [s.document_id for s in stale] == [old]
    assert stale[0].holder_name == "Alice"


def test_completed_documents_report_full_progress(lifecycle, make_document) -> None:
    doc_id = make_document()
    co = lifecycle.coordinator
    co.start_translation(doc_id, ALICE)
    co.submit_for_review(doc_id, ALICE, "<p>t</p>")
    co.approve(doc_id, ADMIN)
    row = lifecycle.documents.list_documents(status=S.APPROVED)[0]
    assert row.progress == 100


class TestFavorites:
    def test_add_remove_toggle(self, lifecycle, make_document) -> None:
        a = make_document("A")
        b = make_document("B")
        fav = lifecycle.favorites
        assert fav.add(ALICE, a)
        assert not fav.add(ALICE, a)
        assert fav.toggle(ALICE, b) is True
        assert set(fav.list_favorite_ids(ALICE)) == {a, b}
        assert fav.toggle(ALICE, b) is False
        assert fav.remove(ALICE, a)
        assert fav.list_favorite_ids(ALICE) == []

    def test_favorites_view(self, lifecycle, make_document) -> None:
        a = make_document("A")
        make_document("B")
        lifecycle.favorites.add(BOB, a)
        rows = lifecycle.documents.favorites(BOB)
        assert [r.id for r in rows] == [a]
        assert rows[0].is_favorite

    def test_unknown_document(self, lifecycle) -> None:
        with pytest.raises(DocumentNotFound):
            lifecycle.favorites.add(ALICE, 999)


class TestDocumentCreation:
    def test_original_only_once_and_in_draft(self, lifecycle) -> None:
        creation = lifecycle.creation
        doc = creation.create_document("  Spec  ", ADMIN)
        assert doc.title == "Spec" and doc.status == S.DRAFT
        creation.import_original(doc.id, "<p>a</p>", ADMIN)
        with pytest.raises(InvalidContent):
            creation.import_original(doc.id, "<p>b</p>", ADMIN)
        creation.release_for_translation(doc.id, ADMIN)
        with pytest.raises(InvalidTransition):
            creation.import_original(doc.id, "<p>c</p>", ADMIN)

    def test_release_requires_original(self, lifecycle) -> None:
        doc = lifecycle.creation.create_document("Empty", ADMIN)
        with pytest.raises(InvalidTransition):
            lifecycle.creation.release_for_translation(doc.id, ADMIN)
        assert lifecycle.coordinator.get_document(doc.id).status == S.DRAFT

    def test_release_only_from_draft(self, lifecycle, make_document) -> None:
        doc_id = make_document()
        with pytest.raises(InvalidTransition):
            lifecycle.creation.release_for_translation(doc_id, ADMIN)

    def test_ai_draft_not_after_translation_started(self, lifecycle, make_document) -> None:
        doc_id = make_document()
        lifecycle.coordinator.start_translation(doc_id, ALICE)
        with pytest.raises(InvalidTransition):
            lifecycle.creation.add_ai_draft(doc_id, "<p>late</p>", ADMIN)

    def test_blank_input_rejected(self, lifecycle) -> None:
        with pytest.raises(InvalidContent):
            lifecycle.creation.create_document("   ", ADMIN)
        doc = lifecycle.creation.create_document("Doc", ADMIN)
        with pytest.raises(InvalidContent):
            lifecycle.creation.import_original(doc.id, "  ", ADMIN)
        with pytest.raises(DocumentNotFound):
            lifecycle.creation.add_ai_draft(777, "<p>x</p>", ADMIN)

    def test_pointer_follows_versions(self, lifecycle) -> None:
        creation = lifecycle.creation
        doc = creation.create_document("Doc", ADMIN)
        creation.import_original(doc.id, "<p>a</p>", ADMIN)
        assert lifecycle.coordinator.get_document(doc.id).current_version_id is None
        draft = creation.add_ai_draft(doc.id, "<p>ai</p>", ADMIN)
        assert lifecycle.coordinator.get_document(doc.id).current_version_id == draft.id

