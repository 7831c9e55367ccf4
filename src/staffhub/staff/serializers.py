from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from ..database.mongo_base import to_jsonable
from .model import SalaryHistoryEntry, Staff


def staff_to_dict(staff: Staff) -> Dict[str, Any]:
    """Public view of a staff record: no salary, no PIN material."""

    return to_jsonable(
        {
            "_id": staff.pk,
            "staffId": staff.staff_id,
            "userId": staff.user_id,
            "phone": staff.phone,
            "branchId": staff.branch_id,
            "department": staff.department,
            "designation": staff.designation,
            "joinDate": staff.join_date,
            "status": staff.status.value,
            "dateOfBirth": staff.date_of_birth,
            "nationalId": staff.national_id,
            "bloodGroup": staff.blood_group,
            "address": staff.address,
            "emergencyContact": asdict(staff.emergency_contact) if staff.emergency_contact else None,
            "fathersName": staff.fathers_name,
            "mothersName": staff.mothers_name,
            "spouseName": staff.spouse_name,
            "bankAccountNo": staff.bank_account_no,
            "bankAccountName": staff.bank_account_name,
            "bankName": staff.bank_name,
            "exitDate": staff.exit_date,
            "profileCompleted": staff.profile_completed,
            "salaryVisibleToEmployee": staff.salary_visible_to_employee,
            "isSalaryPinSet": staff.is_salary_pin_set,
            "createdAt": staff.created_at,
            "updatedAt": staff.updated_at,
        }
    )


def salary_entry_to_dict(entry: SalaryHistoryEntry) -> Dict[str, Any]:
    return to_jsonable(
        {
            "_id": entry.entry_id,
            "staffId": entry.staff_pk,
            "previousSalary": entry.previous_salary,
            "newSalary": entry.new_salary,
            "changedBy": entry.changed_by,
            "reason": entry.reason,
            "effectiveDate": entry.effective_date,
            "createdAt": entry.created_at,
        }
    )
