"""
===============================================================================
Identity Provider Protocols & Adapters
-------------------------------------------------------------------------------
Purpose:
    Resolve worker ids to display names for "locked by X" and "handed over
    by X". Authorization never depends on this beyond identity equality.

Files:
    - IdentityProvider (Protocol)
    - UserRepositoryIdentityProvider (production, backed by usermanagement)
    - StaticIdentityProvider (dict-backed, for tools and tests)
===============================================================================
"""
from __future__ import annotations
from typing import Mapping, Optional, Protocol

from usermanagement.logic.user_repository import UserRepository


def fallback_name(worker_id: Optional[int]) -> str:
    return f"User {worker_id}" if worker_id is not None else "-"


class IdentityProvider(Protocol):
    """Protocol for providers that turn a worker id into a display name."""
    def display_name(self, worker_id: int) -> str: ...


class UserRepositoryIdentityProvider:
    """
    Adapter reading users from the host's UserRepository.

    Behavior:
        full name -> username -> "User <id>" for unknown ids.
    """

    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def display_name(self, worker_id: int) -> str:
        user = self._users.get_user_by_id(worker_id)
        if user is None:
            return fallback_name(worker_id)
        return user.display_name


class StaticIdentityProvider:
    """Fixed id -> name mapping."""

    def __init__(self, names: Optional[Mapping[int, str]] = None) -> None:
        self._names = dict(names or {})

    def display_name(self, worker_id: int) -> str:
        return self._names.get(worker_id) or fallback_name(worker_id)
