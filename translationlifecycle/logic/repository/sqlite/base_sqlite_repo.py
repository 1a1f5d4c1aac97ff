"""
===============================================================================
Base SQLite Repository – shared database handle and error translation
-------------------------------------------------------------------------------
Purpose:
    - Give every lifecycle repository the same SQLiteDatabase so that one
      transaction can span documents, versions, locks and handovers.
    - Translate driver errors into StoreUnavailable.

Integration:
    - DB path is read from the host config ([Database] main) unless a path
      or an existing SQLiteDatabase is passed in.
    - Child repositories create their tables via 'SCHEMA' on construction.
===============================================================================
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from core.common.db_interface import SQLiteDatabase
from core.config.config_service import config_service
from translationlifecycle.exceptions.errors import StoreUnavailable

DatabaseLike = Union[SQLiteDatabase, Path, str, None]


def open_database(db: DatabaseLike = None) -> SQLiteDatabase:
    """Return 'db' if it already is a SQLiteDatabase, else open one."""
    if isinstance(db, SQLiteDatabase):
        return db
    return SQLiteDatabase(db if db is not None else config_service.database.main)


@contextmanager
def store_guard() -> Iterator[None]:
    """Re-raise sqlite3 errors as StoreUnavailable."""
    try:
        yield
    except sqlite3.Error as ex:
        raise StoreUnavailable(f"{type(ex).__name__}: {ex}") from ex


class SQLiteUnitOfWork:
    """
    Transaction boundary for lifecycle operations.

    Everything executed inside 'transaction()' on the same SQLiteDatabase
    commits together or not at all.
    """

    def __init__(self, db: DatabaseLike = None) -> None:
        self._db = open_database(db)

    @property
    def db(self) -> SQLiteDatabase:
        return self._db

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        with store_guard():
            with self._db.transaction() as conn:
                yield conn

    def after_commit(self, callback: Callable[[], None]) -> None:
        self._db.after_commit(callback)


class BaseSQLiteRepo:
    """
    Thin base to share connection handling across SQLite repositories.

    Properties
    ----------
    db : SQLiteDatabase
        Shared database handle.
    """

    SCHEMA: str = ""

    def __init__(self, db: DatabaseLike = None) -> None:
        self._db = open_database(db)
        if self.SCHEMA:
            with store_guard():
                self._db.executescript(self.SCHEMA)

    @property
    def db(self) -> SQLiteDatabase:
        return self._db

    @contextmanager
    def _tx(self) -> Iterator[sqlite3.Connection]:
        with store_guard():
            with self._db.transaction() as conn:
                yield conn

    @contextmanager
    def _read(self) -> Iterator[sqlite3.Connection]:
        with store_guard():
            with self._db.reading() as conn:
                yield conn

    def close(self) -> None:
        self._db.close()
