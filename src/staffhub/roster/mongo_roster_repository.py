from __future__ import annotations

from datetime import datetime

from ..core.constants import STAFFS
from ..database.connection import DatabaseConnection
from .filters import RosterFilters
from .model import RosterResult
from .repository import RosterRepository
from .stages import build_pipeline


class MongoRosterRepository(RosterRepository):
    """Single read-only aggregation over ``staffs``; no session, no lock."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch_page(self, filters: RosterFilters, *, now: datetime) -> RosterResult:
        pipeline = build_pipeline(filters, now)
        docs = list(self._conn_factory.db[STAFFS].aggregate(pipeline))

        # $facet always yields exactly one document; $count yields nothing on zero matches.
        facet = docs[0] if docs else {}
        counted = facet.get("total") or []
        total = int(counted[0]["total"]) if counted else 0
        return RosterResult(rows=list(facet.get("staffs") or []), total=total)
