from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId

from ..core.constants import USERS
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from .model import User
from .repository import UserRepository


class MongoUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def _users(self):
        return self._conn_factory.db[USERS]

    def get_by_id(self, user_id: ObjectId, *, session: Optional[Any] = None) -> Optional[User]:
        doc = self._users.find_one(
            {"_id": user_id},
            {"name": 1, "email": 1, "image": 1, "role": 1},
            session=session,
        )
        if not doc:
            return None
        return User(
            user_id=doc["_id"],
            name=doc.get("name") or "",
            email=doc.get("email") or "",
            role=Role(doc.get("role") or Role.STAFF.value),
            image=doc.get("image"),
        )

    def set_role(self, user_id: ObjectId, role: Role, *, session: Optional[Any] = None) -> bool:
        res = self._users.update_one(
            {"_id": user_id},
            {"$set": {"role": role.value, "updatedAt": datetime.now()}},
            session=session,
        )
        return res.matched_count > 0
