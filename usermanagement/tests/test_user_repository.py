"""
usermanagement/tests/test_user_repository.py

User CRUD with bcrypt hashes and the identity provider built on top.
"""
from __future__ import annotations

import sqlite3
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from core.models.user import UserRole
from translationlifecycle.logic.adapters.identity_provider import (
    StaticIdentityProvider,
    UserRepositoryIdentityProvider,
)
from usermanagement.logic.user_repository import UserRepository


class TestUserRepository(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "users.db"
        self.repo = UserRepository(self.db_path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_create_and_verify_login(self) -> None:
        user = self.repo.create_user("Alice", "s3cret", "alice@example.com", full_name="Alice Kim")
        self.assertIsNotNone(user)
        self.assertEqual(user.username, "alice")
        self.assertEqual(user.role, UserRole.TRANSLATOR)
        self.assertNotEqual(user.password_hash, b"s3cret")
        self.assertEqual(self.repo.verify_login("ALICE", "s3cret"), user)
        self.assertIsNone(self.repo.verify_login("alice", "wrong"))

    def test_duplicate_username_returns_none(self) -> None:
        self.repo.create_user("bob", "pw", "bob@example.com")
        self.assertIsNone(self.repo.create_user("Bob", "pw2", "bob2@example.com"))

    def test_inactive_user_cannot_login(self) -> None:
        user = self.repo.create_user("carol", "pw", "carol@example.com", role=UserRole.REVIEWER)
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("UPDATE users SET is_active = 0 WHERE id = ?", (user.id,))
            conn.commit()
        finally:
            conn.close()
        self.assertIsNone(self.repo.verify_login("carol", "pw"))
        self.assertFalse(self.repo.get_user("carol").is_active)

    def test_unknown_role_falls_back_to_translator(self) -> None:
        user = self.repo.create_user("dave", "pw", "dave@example.com", role=UserRole.ADMIN)
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("UPDATE users SET role = 'GHOST' WHERE id = ?", (user.id,))
            conn.commit()
        finally:
            conn.close()
        self.assertEqual(self.repo.get_user_by_id(user.id).role, UserRole.TRANSLATOR)

    def test_get_all_users_sorted(self) -> None:
        self.repo.create_user("zoe", "pw", "z@example.com")
        self.repo.create_user("adam", "pw", "a@example.com")
        self.assertEqual([u.username for u in self.repo.get_all_users()], ["adam", "zoe"])


class TestIdentityProviders(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = TemporaryDirectory()
        self.repo = UserRepository(Path(self._tmp.name) / "users.db")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_full_name_then_username_then_fallback(self) -> None:
        named = self.repo.create_user("alice", "pw", "a@example.com", full_name="Alice Kim")
        plain = self.repo.create_user("bob", "pw", "b@example.com")
        provider = UserRepositoryIdentityProvider(self.repo)
        self.assertEqual(provider.display_name(named.id), "Alice Kim")
        self.assertEqual(provider.display_name(plain.id), "bob")
        self.assertEqual(provider.display_name(999), "User 999")

    def test_static_provider(self) -> None:
        provider = StaticIdentityProvider({1: "Alice"})
        self.assertEqual(provider.display_name(1), "Alice")
        self.assertEqual(provider.display_name(2), "User 2")


if __name__ == "__main__":
    unittest.main()
