from __future__ import annotations

from contextlib import contextmanager
from typing import ContextManager, Iterator, Optional, Protocol

from pymongo.client_session import ClientSession

from .connection import DatabaseConnection
from .mongo_base import transaction


class UnitOfWork(Protocol):
    """Transaction boundary used by services for multi-step mutations.

    Repository methods accept the yielded session so that every write in the
    block commits or rolls back together.
    """

    def transaction(self) -> ContextManager[Optional[ClientSession]]:
        raise NotImplementedError


class MongoUnitOfWork(UnitOfWork):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[ClientSession]:
        with transaction(self._conn_factory) as (_, session):
            yield session
