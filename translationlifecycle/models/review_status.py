from __future__ import annotations
from enum import Enum


class ReviewStatus(str, Enum):
    """State of one reviewer's review of a submitted version."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
