from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from bson import ObjectId

from ..core.enums import StaffStatus


@dataclass(frozen=True)
class EmergencyContact:
    name: Optional[str] = None
    relation: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class Staff:
    """Domain entity: employee record, optionally linked to a User.

    ``pk`` is the document ``_id``; ``staff_id`` is the human-readable business
    identifier (e.g. ``STF-0001``). The salary PIN and reset token are stored
    only as hashes.
    """

    pk: ObjectId
    staff_id: str
    phone: Optional[str]
    designation: Optional[str]
    join_date: Optional[datetime]
    status: StaffStatus = StaffStatus.ACTIVE
    user_id: Optional[ObjectId] = None
    branch_id: Optional[ObjectId] = None
    department: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    national_id: Optional[str] = None
    blood_group: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[EmergencyContact] = None
    fathers_name: Optional[str] = None
    mothers_name: Optional[str] = None
    spouse_name: Optional[str] = None
    bank_account_no: Optional[str] = None
    bank_account_name: Optional[str] = None
    bank_name: Optional[str] = None
    exit_date: Optional[datetime] = None
    salary: Union[int, float] = 0
    salary_visible_to_employee: bool = True
    profile_completed: bool = False
    salary_pin_hash: Optional[str] = None
    salary_pin_reset_token_hash: Optional[str] = None
    salary_pin_reset_expires: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_salary_pin_set(self) -> bool:
        return bool(self.salary_pin_hash)


@dataclass(frozen=True)
class SalaryHistoryEntry:
    """Append-only audit row written alongside every salary change."""

    entry_id: ObjectId
    staff_pk: ObjectId
    previous_salary: Union[int, float]
    new_salary: Union[int, float]
    changed_by: ObjectId
    effective_date: datetime
    reason: Optional[str] = None
    created_at: Optional[datetime] = None
