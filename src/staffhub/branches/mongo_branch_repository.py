from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId

from ..core.constants import BRANCHES
from ..database.connection import DatabaseConnection
from .model import Branch
from .repository import BranchRepository


def _to_branch(doc: dict) -> Branch:
    return Branch(
        branch_id=doc["_id"],
        name=doc.get("name") or "",
        code=doc.get("code") or "",
        address=doc.get("address"),
        is_active=bool(doc.get("isActive", True)),
    )


class MongoBranchRepository(BranchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, branch_id: ObjectId, *, session: Optional[Any] = None) -> Optional[Branch]:
        doc = self._conn_factory.db[BRANCHES].find_one({"_id": branch_id}, session=session)
        return _to_branch(doc) if doc else None
