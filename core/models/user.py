"""
user.py

Defines the central User model and user roles.
All features should use this model for users and user-specific data;
the lifecycle coordinator only needs the id and a display name.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class UserRole(Enum):
    """
    Defines all available user roles within the system.
    """
    TRANSLATOR = "Translator"
    REVIEWER = "Reviewer"
    ADMIN = "Admin"


class User:
    """
    Represents a user of the translation workspace.
    """

    def __init__(
        self,
        id: int,
        username: str,
        password_hash: bytes,
        email: str,
        role: UserRole = UserRole.TRANSLATOR,
        full_name: Optional[str] = None,
        is_active: bool = True,
    ):
        """
        :param id: Unique integer ID (primary key from database)
        :param username: Unique login name
        :param password_hash: bcrypt hash of the password
        :param email: User's email address
        :param role: Assigned user role (enum)
        :param full_name: Name shown as "locked by ..." or "handed over by ..."
        :param is_active: Account activation status (logical delete)
        """
        self.id = id
        self.username = username
        self.password_hash = password_hash
        self.email = email
        self.role = role
        self.full_name = full_name
        self.is_active = is_active

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id and self.username == other.username

    def __hash__(self) -> int:
        return hash((self.id, self.username))

    def __str__(self):
        return (
            f"User({self.id}): {self.username} "
            f"[{self.full_name or 'n/a'}], "
            f"Role: {self.role.value}, "
            f"Email: {self.email}, "
            f"Active: {self.is_active}"
        )
