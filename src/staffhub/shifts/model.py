from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from bson import ObjectId


@dataclass(frozen=True)
class Shift:
    """Named work shift; times are local "HH:MM" strings as stored."""

    shift_id: ObjectId
    name: str
    code: str
    start_time: str
    end_time: str
    branch_id: Optional[ObjectId] = None
    grace_period_minutes: int = 10
    is_active: bool = True


@dataclass(frozen=True)
class ShiftAssignment:
    """Binding of one staff member to a shift for [start_date, end_date]."""

    assignment_id: ObjectId
    staff_pk: ObjectId
    shift_id: ObjectId
    start_date: datetime
    end_date: Optional[datetime]
    is_active: bool
    assigned_by: Optional[ObjectId] = None
    created_at: Optional[datetime] = None
