"""Fixtures shared by the lifecycle tests (see root conftest for 'lifecycle')."""
from __future__ import annotations

from typing import Callable, Optional

import pytest

from .support import ADMIN, ORIGINAL_HTML


@pytest.fixture
def make_document(lifecycle) -> Callable[..., int]:
    """Create a document; by default with ORIGINAL#1 + AI_DRAFT#2, released for translation."""

    def _make(
        title: str = "Manual",
        *,
        original: Optional[str] = ORIGINAL_HTML,
        ai_draft: Optional[str] = "<p>machine</p>",
        release: bool = True,
        category_id: Optional[int] = None,
    ) -> int:
        doc = lifecycle.creation.create_document(title, ADMIN, category_id)
        if original is not None:
            lifecycle.creation.import_original(doc.id, original, ADMIN)
        if ai_draft is not None:
            lifecycle.creation.add_ai_draft(doc.id, ai_draft, ADMIN)
        if release:
            lifecycle.creation.release_for_translation(doc.id, ADMIN)
        return doc.id

    return _make
