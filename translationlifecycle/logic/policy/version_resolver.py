"""
===============================================================================
Version Resolver – which version is "current" for a document status
-------------------------------------------------------------------------------
Purpose:
    Single place that selects the version representing a document's content
    for display/editing. Every read path calls this instead of filtering
    versions on its own.

Rules (latest = highest version_number within the filtered subset):
    APPROVED, PUBLISHED           -> latest FINAL, else none
    PENDING_REVIEW                -> latest FINAL, else latest MANUAL_TRANSLATION
    IN_TRANSLATION                -> latest MANUAL_TRANSLATION, else latest AI_DRAFT
    DRAFT, PENDING_TRANSLATION    -> latest MANUAL_TRANSLATION, else latest AI_DRAFT

Design:
    - Pure functions of (status, versions); no storage access, no caching.
    - Input order does not matter; version numbers are the only tie-break.
===============================================================================
"""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from translationlifecycle.exceptions.errors import VersionNotFound
from translationlifecycle.models.document_status import DocumentStatus
from translationlifecycle.models.document_version import DocumentVersion
from translationlifecycle.models.version_type import VersionType

# ordered preference per status; first type with any version wins
RESOLUTION_ORDER: Dict[DocumentStatus, Tuple[VersionType, ...]] = {
    DocumentStatus.APPROVED: (VersionType.FINAL,),
    DocumentStatus.PUBLISHED: (VersionType.FINAL,),
    DocumentStatus.PENDING_REVIEW: (VersionType.FINAL, VersionType.MANUAL_TRANSLATION),
    DocumentStatus.IN_TRANSLATION: (VersionType.MANUAL_TRANSLATION, VersionType.AI_DRAFT),
    DocumentStatus.DRAFT: (VersionType.MANUAL_TRANSLATION, VersionType.AI_DRAFT),
    DocumentStatus.PENDING_TRANSLATION: (VersionType.MANUAL_TRANSLATION, VersionType.AI_DRAFT),
}


def latest_of_type(
    versions: Iterable[DocumentVersion], *types: VersionType
) -> Optional[DocumentVersion]:
    """Return the highest-numbered version whose type is one of 'types'."""
    wanted = set(types)
    best: Optional[DocumentVersion] = None
    for v in versions:
        if v.version_type in wanted and (best is None or v.version_number > best.version_number):
            best = v
    return best


def resolve_current_version(
    status: DocumentStatus, versions: Iterable[DocumentVersion]
) -> Optional[DocumentVersion]:
    """Return the current version for 'status', or None if nothing applies."""
    pool = tuple(versions)
    for version_type in RESOLUTION_ORDER[DocumentStatus(status)]:
        found = latest_of_type(pool, version_type)
        if found is not None:
            return found
    return None


def require_current_version(
    document_id: int, status: DocumentStatus, versions: Iterable[DocumentVersion]
) -> DocumentVersion:
    """Like resolve_current_version() but raises VersionNotFound instead of None."""
    found = resolve_current_version(status, versions)
    if found is None:
        raise VersionNotFound(document_id, status)
    return found


def original_version(versions: Iterable[DocumentVersion]) -> Optional[DocumentVersion]:
    """The ORIGINAL version; there is at most one per document."""
    return latest_of_type(versions, VersionType.ORIGINAL)
