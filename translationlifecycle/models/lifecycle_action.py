"""translationlifecycle/models/lifecycle_action.py
================================================

Canonical action identifiers for lifecycle transitions.

Services and policies use these ids instead of hardcoding strings.
"""
from __future__ import annotations

from enum import Enum


class LifecycleAction(str, Enum):
    """Supported lifecycle actions."""

    RELEASE_FOR_TRANSLATION = "release_for_translation"

    START_TRANSLATION = "start_translation"
    RESUME_TRANSLATION = "resume_translation"
    SAVE_TRANSLATION = "save_translation"
    RELEASE_LOCK = "release_lock"
    HAND_OVER = "hand_over"
    SUBMIT_REVIEW = "submit_review"

    SAVE_REVIEW = "save_review"
    APPROVE = "approve"
    REJECT = "reject"
    PUBLISH = "publish"

    CONVERT_TO_PENDING = "convert_to_pending"
    RECLAIM_LOCK = "reclaim_lock"
