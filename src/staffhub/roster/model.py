from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class RosterResult:
    """Raw output of the aggregation: one page of documents plus the match count."""

    rows: List[Dict[str, Any]]
    total: int


@dataclass(frozen=True)
class RosterMeta:
    total: int
    page: int
    limit: int

    @property
    def total_page(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, "page": self.page, "limit": self.limit, "totalPage": self.total_page}


@dataclass(frozen=True)
class RosterPage:
    meta: RosterMeta
    staffs: List[Dict[str, Any]] = field(default_factory=list)
