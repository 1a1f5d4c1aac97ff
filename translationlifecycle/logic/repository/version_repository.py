"""
===============================================================================
Version Repository Protocol – append-only versioned content
-------------------------------------------------------------------------------
Design:
    - Versions are never updated or deleted.
    - append() assigns the next version number for the document atomically.
===============================================================================
"""
from __future__ import annotations
from typing import Protocol, Optional, List

from translationlifecycle.models.document_version import DocumentVersion
from translationlifecycle.models.version_type import VersionType


class VersionRepository(Protocol):
    """
    Methods
    -------
    list_by_document(doc_id) -> list[DocumentVersion]
        All versions of a document ordered by version number ascending.
    append(doc_id, version_type, content, created_by) -> DocumentVersion
        Persist a new version with the next sequential number.
    get(version_id) -> Optional[DocumentVersion]
    """

    def list_by_document(self, doc_id: int) -> List[DocumentVersion]:
        ...

    def append(
        self,
        doc_id: int,
        version_type: VersionType,
        content: str,
        created_by: Optional[int] = None,
    ) -> DocumentVersion:
        ...

    def get(self, version_id: int) -> Optional[DocumentVersion]:
        ...
