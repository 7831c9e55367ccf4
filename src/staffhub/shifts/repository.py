from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from bson import ObjectId

from .model import Shift, ShiftAssignment


class ShiftRepository(Protocol):
    def get_by_id(self, shift_id: ObjectId, *, session: Optional[Any] = None) -> Optional[Shift]:
        raise NotImplementedError


class ShiftAssignmentRepository(Protocol):
    def get_active_for_staff(self, staff_pk: ObjectId, *, session: Optional[Any] = None) -> Optional[ShiftAssignment]:
        raise NotImplementedError

    def close(self, assignment_id: ObjectId, *, end_date: datetime, session: Optional[Any] = None) -> bool:
        """Deactivate an assignment and stamp its end date."""

        raise NotImplementedError

    def create(
        self,
        *,
        staff_pk: ObjectId,
        shift_id: ObjectId,
        start_date: datetime,
        assigned_by: ObjectId,
        session: Optional[Any] = None,
    ) -> ObjectId:
        raise NotImplementedError
