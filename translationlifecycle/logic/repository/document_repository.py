"""
===============================================================================
Document Repository Protocol – document records and status field
-------------------------------------------------------------------------------
Purpose:
    Contract for the document store consumed by the lifecycle coordinator.
    The coordinator mutates only 'status' and the current-version pointer.
===============================================================================
"""
from __future__ import annotations
from typing import Protocol, Optional, List

from translationlifecycle.models.document import Document
from translationlifecycle.models.document_status import DocumentStatus


class DocumentRepository(Protocol):
    """
    Read/write contract for lifecycle documents.

    Methods
    -------
    create(title, created_by, category_id) -> Document
        Insert a new document in DRAFT.
    get(doc_id) -> Optional[Document]
        Return a single document or None.
    update_status(doc_id, status) -> None
    set_current_version_pointer(doc_id, version_id) -> None
        Store the cached pointer; callers treat it as a hint.
    search(status, category_id, title) -> list[Document]
        Apply optional filters, newest activity first.
    """

    def create(self, title: str, created_by: Optional[int], category_id: Optional[int] = None) -> Document:
        ...

    def get(self, doc_id: int) -> Optional[Document]:
        ...

    def update_status(self, doc_id: int, status: DocumentStatus) -> None:
        ...

    def set_current_version_pointer(self, doc_id: int, version_id: Optional[int]) -> None:
        ...

    def search(
        self,
        status: Optional[DocumentStatus] = None,
        category_id: Optional[int] = None,
        title: Optional[str] = None,
    ) -> List[Document]:
        ...
