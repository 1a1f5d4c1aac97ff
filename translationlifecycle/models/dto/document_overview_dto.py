from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class DocumentOverviewDTO:
    """
    Lightweight row for document lists (pending, working, favorites).
    Keep values preformatted for the caller.
    """
    id: int
    title: str
    status: str
    category_id: Optional[int]
    progress: int                  # 0..100
    locked: bool
    locked_by: Optional[str]       # display name of the lock holder
    lock_is_stale: bool
    has_handover: bool
    is_favorite: bool
    updated: str                   # e.g., "2026.10.19 14:03:11"
