from __future__ import annotations

from typing import Any, Optional, Protocol

from bson import ObjectId

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: ObjectId, *, session: Optional[Any] = None) -> Optional[User]:
        raise NotImplementedError

    def set_role(self, user_id: ObjectId, role: Role, *, session: Optional[Any] = None) -> bool:
        raise NotImplementedError
