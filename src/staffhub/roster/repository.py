from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .filters import RosterFilters
from .model import RosterResult


class RosterRepository(Protocol):
    def fetch_page(self, filters: RosterFilters, *, now: datetime) -> RosterResult:
        """Run the roster query as of ``now`` and return one page plus total."""

        raise NotImplementedError
