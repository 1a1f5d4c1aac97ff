"""
===============================================================================
Factory – wiring of the translation lifecycle services
-------------------------------------------------------------------------------
build_lifecycle() opens ONE SQLiteDatabase and hands it to every repository,
so a single UnitOfWork transaction spans documents, versions, locks,
handovers, reviews and favorites.

Without arguments the database path comes from [Database] main and display
names are resolved through usermanagement's UserRepository on the same file.
===============================================================================
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional, Union

from core.common.db_interface import SQLiteDatabase
from core.helpers.date_time_helper import utc_now
from translationlifecycle.logic.adapters.identity_provider import (
    IdentityProvider,
    UserRepositoryIdentityProvider,
)
from translationlifecycle.logic.content.paragraph_counter import ParagraphCounter
from translationlifecycle.logic.policy.lifecycle_policy import LifecyclePolicy
from translationlifecycle.logic.repository.sqlite.base_sqlite_repo import SQLiteUnitOfWork, open_database
from translationlifecycle.logic.repository.sqlite.document_repository_sqlite import DocumentRepositorySQLite
from translationlifecycle.logic.repository.sqlite.favorite_repository_sqlite import FavoriteRepositorySQLite
from translationlifecycle.logic.repository.sqlite.handover_repository_sqlite import HandoverRepositorySQLite
from translationlifecycle.logic.repository.sqlite.lock_repository_sqlite import LockRepositorySQLite
from translationlifecycle.logic.repository.sqlite.review_repository_sqlite import ReviewRepositorySQLite
from translationlifecycle.logic.repository.sqlite.version_repository_sqlite import VersionRepositorySQLite
from translationlifecycle.logic.services.document_creation_service import DocumentCreationService
from translationlifecycle.logic.services.document_service import DocumentService
from translationlifecycle.logic.services.favorite_service import FavoriteService
from translationlifecycle.logic.services.handover_service import HandoverService
from translationlifecycle.logic.services.lifecycle_service import LifecycleCoordinator
from translationlifecycle.logic.services.lock_manager import LockManager
from translationlifecycle.logic.services.review_service import ReviewService
from usermanagement.logic.user_repository import UserRepository


@dataclass
class TranslationLifecycle:
    """Bundle of wired services sharing one database."""
    db: SQLiteDatabase
    uow: SQLiteUnitOfWork
    locks: LockManager
    handovers: HandoverService
    reviews: ReviewService
    coordinator: LifecycleCoordinator
    creation: DocumentCreationService
    documents: DocumentService
    favorites: FavoriteService

    def close(self) -> None:
        self.db.close()


def build_lifecycle(
    db: Union[SQLiteDatabase, Path, str, None] = None,
    *,
    identity: Optional[IdentityProvider] = None,
    clock: Callable[[], datetime] = utc_now,
    stale_after: Optional[timedelta] = None,
) -> TranslationLifecycle:
    database = open_database(db)
    uow = SQLiteUnitOfWork(database)
    if identity is None:
        identity = UserRepositoryIdentityProvider(UserRepository(database.db_path))

    document_repo = DocumentRepositorySQLite(database)
    version_repo = VersionRepositorySQLite(database)
    lock_repo = LockRepositorySQLite(database)
    handover_repo = HandoverRepositorySQLite(database)
    favorite_repo = FavoriteRepositorySQLite(database)
    review_repo = ReviewRepositorySQLite(database)

    policy = LifecyclePolicy()
    counter = ParagraphCounter()
    locks = LockManager(lock_repo, uow, identity=identity, clock=clock, stale_after=stale_after)
    handovers = HandoverService(handover_repo, uow, identity=identity, clock=clock)
    reviews = ReviewService(review_repo, uow, identity=identity, clock=clock)

    return TranslationLifecycle(
        db=database,
        uow=uow,
        locks=locks,
        handovers=handovers,
        reviews=reviews,
        coordinator=LifecycleCoordinator(
            document_repo, version_repo, uow, locks, handovers, reviews, policy=policy, counter=counter,
        ),
        creation=DocumentCreationService(document_repo, version_repo, uow, policy=policy),
        documents=DocumentService(
            document_repo, version_repo, favorite_repo, locks, handovers, reviews=reviews, counter=counter,
        ),
        favorites=FavoriteService(favorite_repo, document_repo),
    )
