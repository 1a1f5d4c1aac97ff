"""
core/common/db_interface.py
===========================

Shared interface + helpers for SQLite-backed modules.

SQLiteDatabase owns one connection in autocommit mode and hands out
explicit transactions. Repositories that share an instance take part in
the same transaction, so multi-table changes commit or roll back together.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Callable, Iterator, List, Optional
import sqlite3

MEMORY_DB = ":memory:"


def create_sqlite_connection(
    db_path: Path | str,
    *,
    check_same_thread: bool = False,
    foreign_keys: bool = False,
    autocommit: bool = False,
    timeout: float = 5.0,
) -> sqlite3.Connection:
    """Create a sqlite3 connection with common defaults."""
    if str(db_path) != MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=check_same_thread, timeout=timeout)
    if autocommit:
        conn.isolation_level = None
    conn.row_factory = sqlite3.Row
    if foreign_keys:
        conn.execute("PRAGMA foreign_keys = ON")
    return conn


class DatabaseAccess(ABC):
    """Interface for modules that depend on a database."""

    @property
    @abstractmethod
    def db_path(self) -> Path:
        raise NotImplementedError

    @abstractmethod
    def connect(self) -> sqlite3.Connection:
        raise NotImplementedError


class SQLiteDatabase(DatabaseAccess):
    """
    Shared connection with nestable, thread-safe transactions.

    Methods
    -------
    transaction() -> ContextManager[sqlite3.Connection]
        Outermost call issues BEGIN IMMEDIATE and COMMIT/ROLLBACK; nested
        calls join the running transaction.
    after_commit(callback) -> None
        Defer 'callback' until the outermost transaction commits.
    reading() -> ContextManager[sqlite3.Connection]
        Serialized access for read-only statements.
    close() -> None
        Close the connection (idempotent).
    """

    def __init__(self, db_path: Path | str, *, timeout: float = 5.0) -> None:
        self._db_path = Path(db_path) if str(db_path) != MEMORY_DB else Path(MEMORY_DB)
        self._timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = RLock()
        self._depth = 0
        self._after_commit: List[Callable[[], None]] = []

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is None:
                self._conn = create_sqlite_connection(
                    self._db_path,
                    check_same_thread=False,
                    foreign_keys=True,
                    autocommit=True,
                    timeout=self._timeout,
                )
            return self._conn

    @property
    def conn(self) -> sqlite3.Connection:
        return self.connect()

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        committed: List[Callable[[], None]] = []
        with self._lock:
            conn = self.connect()
            if self._depth == 0:
                conn.execute("BEGIN IMMEDIATE")
            self._depth += 1
            try:
                yield conn
            except BaseException:
                self._depth -= 1
                if self._depth == 0:
                    self._after_commit.clear()
                    if conn.in_transaction:
                        conn.execute("ROLLBACK")
                raise
            self._depth -= 1
            if self._depth == 0:
                try:
                    conn.execute("COMMIT")
                except sqlite3.Error:
                    self._after_commit.clear()
                    if conn.in_transaction:
                        conn.execute("ROLLBACK")
                    raise
                committed, self._after_commit = self._after_commit, []
        for callback in committed:
            callback()

    def after_commit(self, callback: Callable[[], None]) -> None:
        """
        Run 'callback' once the running transaction commits.

        Outside a transaction it runs immediately; on rollback it is dropped.
        """
        with self._lock:
            if self._depth > 0:
                self._after_commit.append(callback)
                return
        callback()

    @contextmanager
    def reading(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            yield self.connect()

    def executescript(self, script: str) -> None:
        """Run DDL outside of any transaction."""
        with self._lock:
            self.connect().executescript(script)

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                try:
                    self._conn.close()
                finally:
                    self._conn = None
