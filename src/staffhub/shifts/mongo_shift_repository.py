from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId

from ..core.constants import SHIFT_ASSIGNMENTS, SHIFTS
from ..database.connection import DatabaseConnection
from ..database.mongo_base import stamp_new
from .model import Shift, ShiftAssignment
from .repository import ShiftAssignmentRepository, ShiftRepository


class MongoShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: ObjectId, *, session: Optional[Any] = None) -> Optional[Shift]:
        r = self._conn_factory.db[SHIFTS].find_one({"_id": shift_id}, session=session)
        if not r:
            return None
        return Shift(
            shift_id=r["_id"],
            name=r.get("name") or "",
            code=r.get("code") or "",
            start_time=r.get("startTime") or "",
            end_time=r.get("endTime") or "",
            branch_id=r.get("branchId"),
            grace_period_minutes=int(r.get("gracePeriodMinutes") or 0),
            is_active=bool(r.get("isActive", True)),
        )


class MongoShiftAssignmentRepository(ShiftAssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def _assignments(self):
        return self._conn_factory.db[SHIFT_ASSIGNMENTS]

    def get_active_for_staff(self, staff_pk: ObjectId, *, session: Optional[Any] = None) -> Optional[ShiftAssignment]:
        r = self._assignments.find_one(
            {"staffId": staff_pk, "isActive": True},
            sort=[("startDate", -1), ("createdAt", -1), ("_id", -1)],
            session=session,
        )
        if not r:
            return None
        return ShiftAssignment(
            assignment_id=r["_id"],
            staff_pk=r["staffId"],
            shift_id=r["shiftId"],
            start_date=r["startDate"],
            end_date=r.get("endDate"),
            is_active=bool(r.get("isActive", False)),
            assigned_by=r.get("assignedBy"),
            created_at=r.get("createdAt"),
        )

    def close(self, assignment_id: ObjectId, *, end_date: datetime, session: Optional[Any] = None) -> bool:
        # updateOne rather than a full replace: legacy rows may miss assignedBy
        res = self._assignments.update_one(
            {"_id": assignment_id},
            {"$set": {"endDate": end_date, "isActive": False, "updatedAt": datetime.now()}},
            session=session,
        )
        return res.matched_count > 0

    def create(
        self,
        *,
        staff_pk: ObjectId,
        shift_id: ObjectId,
        start_date: datetime,
        assigned_by: ObjectId,
        session: Optional[Any] = None,
    ) -> ObjectId:
        doc = stamp_new(
            {
                "staffId": staff_pk,
                "shiftId": shift_id,
                "startDate": start_date,
                "endDate": None,
                "assignedBy": assigned_by,
                "isActive": True,
            },
            datetime.now(),
        )
        res = self._assignments.insert_one(doc, session=session)
        return res.inserted_id
