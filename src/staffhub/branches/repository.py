from __future__ import annotations

from typing import Any, Optional, Protocol

from bson import ObjectId

from .model import Branch


class BranchRepository(Protocol):
    def get_by_id(self, branch_id: ObjectId, *, session: Optional[Any] = None) -> Optional[Branch]:
        raise NotImplementedError
