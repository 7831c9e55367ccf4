from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from ..common.datetime_utils import now_local
from ..database.mongo_base import to_jsonable
from .filters import RosterFilters
from .model import RosterMeta, RosterPage
from .repository import RosterRepository

logger = logging.getLogger(__name__)


class RosterService:
    """Use case: list staff with user, branch, today's attendance and current shift."""

    def __init__(self, roster: RosterRepository, *, clock: Callable[[], datetime] = now_local):
        self._roster = roster
        self._clock = clock

    def list_staffs(self, filters: RosterFilters) -> RosterPage:
        result = self._roster.fetch_page(filters, now=self._clock())
        logger.debug("roster query %s -> %d/%d", filters.cache_key(), len(result.rows), result.total)

        return RosterPage(
            meta=RosterMeta(total=result.total, page=filters.page, limit=filters.limit),
            staffs=[to_jsonable(row) for row in result.rows],
        )
