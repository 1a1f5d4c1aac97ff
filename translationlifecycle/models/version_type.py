from __future__ import annotations
from enum import Enum


class VersionType(str, Enum):
    """Kind of content stored in a document version."""
    ORIGINAL = "ORIGINAL"
    AI_DRAFT = "AI_DRAFT"
    MANUAL_TRANSLATION = "MANUAL_TRANSLATION"
    FINAL = "FINAL"
