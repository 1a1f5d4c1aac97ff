from __future__ import annotations
from enum import Enum


class DocumentStatus(str, Enum):
    """Lifecycle status of a translatable document."""
    DRAFT = "DRAFT"
    PENDING_TRANSLATION = "PENDING_TRANSLATION"
    IN_TRANSLATION = "IN_TRANSLATION"
    PENDING_REVIEW = "PENDING_REVIEW"
    APPROVED = "APPROVED"
    PUBLISHED = "PUBLISHED"
