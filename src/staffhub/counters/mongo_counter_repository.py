from __future__ import annotations

from typing import Any, Optional

from pymongo import ReturnDocument

from ..core.constants import COUNTERS
from ..database.connection import DatabaseConnection
from .repository import CounterRepository


class MongoCounterRepository(CounterRepository):
    """Sequence numbers stored as ``{_id: name, seq: n}`` documents.

    ``$inc`` on a single document is atomic, so concurrent callers never
    receive the same value even outside a transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def next_value(self, name: str, *, session: Optional[Any] = None) -> int:
        doc = self._conn_factory.db[COUNTERS].find_one_and_update(
            {"_id": name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
            session=session,
        )
        return int(doc["seq"])
