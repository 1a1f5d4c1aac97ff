"""
user_repository.py

Low-level SQLite access for user data. Backs the identity provider that
turns worker ids into display names ("locked by ...").

Database path comes from the configuration → section [Database] key "main".
"""
from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import List, Optional

import bcrypt

from core.models.user import User, UserRole
from core.config.config_service import config_service
from core.logging.logic.logger import logger
from core.common.db_interface import DatabaseAccess, create_sqlite_connection


class UserRepository(DatabaseAccess):
    """CRUD layer for `User` entities."""

    # ------------------------------------------------------------------ #
    # Construction                                                       #
    # ------------------------------------------------------------------ #
    def __init__(self, db_path: Optional[Path] = None) -> None:
        self._db_path = Path(db_path) if db_path else config_service.database.main
        self._ensure_table()

    # ------------------------------------------------------------------ #
    # Query helpers                                                      #
    # ------------------------------------------------------------------ #
    def get_user(self, username: str) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE username = ?", (username.lower(),)
            ).fetchone()
            return self._row_to_user(row)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return self._row_to_user(row)

    def get_all_users(self) -> List[User]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM users ORDER BY LOWER(username)"
            ).fetchall()
            return [self._row_to_user(r) for r in rows]

    # ------------------------------------------------------------------ #
    # Authentication / Password                                          #
    # ------------------------------------------------------------------ #
    def verify_login(self, username: str, password: str) -> Optional[User]:
        user = self.get_user(username)
        if user and user.is_active and bcrypt.checkpw(password.encode(), user.password_hash):
            return user
        return None

    # ------------------------------------------------------------------ #
    # Create                                                             #
    # ------------------------------------------------------------------ #
    def create_user(
        self,
        username: str,
        password: str,
        email: str,
        *,
        role: UserRole = UserRole.TRANSLATOR,
        full_name: str = "",
    ) -> Optional[User]:
        """Insert a user; returns None if the username is taken."""
        pw_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt())
        try:
            with self._connect() as conn:
                cur = conn.execute(
                    """
                    INSERT INTO users (username, password_hash, email, role, full_name, is_active)
                    VALUES (?, ?, ?, ?, ?, 1)
                    """,
                    (username.lower(), pw_hash, email, role.name, full_name),
                )
                user_id = int(cur.lastrowid)
        except sqlite3.IntegrityError:
            return None
        logger.log("User", "UserCreated", user_id=user_id, username=username.lower())
        return self.get_user_by_id(user_id)

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #
    def _connect(self) -> sqlite3.Connection:
        return self.connect()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> sqlite3.Connection:
        return create_sqlite_connection(self._db_path)

    def _ensure_table(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT UNIQUE NOT NULL,
                    password_hash BLOB NOT NULL,
                    email TEXT NOT NULL,
                    role TEXT NOT NULL,
                    full_name TEXT,
                    is_active INTEGER NOT NULL DEFAULT 1
                )
                """
            )

    # ------------------------------------------------------------------ #
    # Row-mapper                                                         #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _row_to_user(row: sqlite3.Row | None) -> Optional[User]:
        if row is None:
            return None

        # unknown roles fall back to TRANSLATOR
        try:
            role_enum = UserRole[row["role"]]
        except KeyError:
            role_enum = UserRole.TRANSLATOR
            logger.log(
                "User",
                "UnknownRole",
                level="WARNING",
                message=f"Unknown role '{row['role']}' mapped to TRANSLATOR (username='{row['username']}')",
            )

        return User(
            id=int(row["id"]),
            username=row["username"],
            password_hash=row["password_hash"],
            email=row["email"],
            role=role_enum,
            full_name=row["full_name"] or "",
            is_active=bool(row["is_active"]),
        )
