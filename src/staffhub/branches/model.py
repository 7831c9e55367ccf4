from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bson import ObjectId


@dataclass(frozen=True)
class Branch:
    branch_id: ObjectId
    name: str
    code: str
    address: Optional[str] = None
    is_active: bool = True
