from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Sequence

from bson import ObjectId

from ..common.datetime_utils import previous_day
from ..core.enums import STAFF_MANAGER_ROLES, Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError
from ..database.unit_of_work import UnitOfWork
from ..staff.repository import StaffRepository
from .repository import ShiftAssignmentRepository, ShiftRepository

logger = logging.getLogger(__name__)


class ShiftAssignmentService:
    """Use case: move a group of staff onto a shift from a start date."""

    def __init__(
        self,
        shifts: ShiftRepository,
        assignments: ShiftAssignmentRepository,
        staffs: StaffRepository,
        uow: UnitOfWork,
    ):
        self._shifts = shifts
        self._assignments = assignments
        self._staffs = staffs
        self._uow = uow

    def assign_shift(
        self,
        *,
        current_role: Role,
        staff_pks: Sequence[ObjectId],
        shift_id: ObjectId,
        start_date: datetime,
        assigned_by: ObjectId,
    ) -> Dict[str, Any]:
        """All or nothing: any failure aborts the whole batch.

        The previously active assignment of each staff is closed the day before
        ``start_date`` so at most one assignment stays active per staff.
        """

        if current_role not in STAFF_MANAGER_ROLES:
            raise AuthorizationError("Forbidden: You do not have permission")
        if not staff_pks:
            raise ValidationError("At least one staff is required")

        unique_pks = list(dict.fromkeys(staff_pks))
        results: List[Dict[str, Any]] = []

        try:
            with self._uow.transaction() as session:
                for pk in unique_pks:
                    if not self._staffs.get_by_pk(pk, session=session):
                        raise NotFoundError("One or more staff IDs are invalid")

                shift = self._shifts.get_by_id(shift_id, session=session)
                if not shift or not shift.is_active:
                    raise ValidationError("Invalid or inactive Shift")

                for pk in unique_pks:
                    existing = self._assignments.get_active_for_staff(pk, session=session)
                    if existing:
                        self._assignments.close(
                            existing.assignment_id, end_date=previous_day(start_date), session=session
                        )

                    assignment_id = self._assignments.create(
                        staff_pk=pk,
                        shift_id=shift_id,
                        start_date=start_date,
                        assigned_by=assigned_by,
                        session=session,
                    )
                    results.append({"staffId": str(pk), "assignmentId": str(assignment_id), "success": True})
        except DomainError as e:
            logger.warning("shift assignment aborted shift=%s: %s", shift_id, e)
            return {
                "successCount": 0,
                "failureCount": len(unique_pks),
                "results": [],
                "errors": [{"staffId": str(pk), "error": str(e), "success": False} for pk in unique_pks],
            }

        logger.info("shift %s assigned to %d staff by %s", shift_id, len(results), assigned_by)
        return {
            "successCount": len(results),
            "failureCount": 0,
            "results": results,
            "errors": [],
        }
