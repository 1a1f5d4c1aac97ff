"""Unit of Work Protocol – transaction boundary shared by all lifecycle stores."""
from __future__ import annotations
from typing import Callable, ContextManager, Protocol, Any


class UnitOfWork(Protocol):
    """
    transaction() opens a scope in which every store write commits together
    or not at all. Scopes nest; only the outermost one commits.

    after_commit() defers side effects (audit entries) until that commit;
    they are discarded when the scope rolls back.
    """

    def transaction(self) -> ContextManager[Any]:
        ...

    def after_commit(self, callback: Callable[[], None]) -> None:
        ...
