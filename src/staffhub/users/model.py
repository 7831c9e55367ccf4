from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bson import ObjectId

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Identity record owned by the auth provider; staff link to it by ``userId``."""

    user_id: ObjectId
    name: str
    email: str
    role: Role
    image: Optional[str] = None
