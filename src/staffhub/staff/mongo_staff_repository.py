from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Union

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..core.constants import SALARY_HISTORIES, STAFFS
from ..core.enums import StaffStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mongo_base import stamp_new
from .model import EmergencyContact, SalaryHistoryEntry, Staff
from .repository import SalaryHistoryRepository, StaffRepository


def _duplicate_field(err: DuplicateKeyError) -> str:
    key_value = (err.details or {}).get("keyValue") or {}
    return next(iter(key_value), "value")


def staff_from_document(r: dict) -> Staff:
    ec = r.get("emergencyContact")
    return Staff(
        pk=r["_id"],
        staff_id=r.get("staffId") or "",
        phone=r.get("phone"),
        designation=r.get("designation"),
        join_date=r.get("joinDate"),
        status=StaffStatus(r.get("status") or StaffStatus.ACTIVE.value),
        user_id=r.get("userId"),
        branch_id=r.get("branchId"),
        department=r.get("department"),
        date_of_birth=r.get("dateOfBirth"),
        national_id=r.get("nationalId"),
        blood_group=r.get("bloodGroup"),
        address=r.get("address"),
        emergency_contact=EmergencyContact(**ec) if ec else None,
        fathers_name=r.get("fathersName"),
        mothers_name=r.get("mothersName"),
        spouse_name=r.get("spouseName"),
        bank_account_no=r.get("bankAccountNo"),
        bank_account_name=r.get("bankAccountName"),
        bank_name=r.get("bankName"),
        exit_date=r.get("exitDate"),
        salary=r.get("salary") or 0,
        salary_visible_to_employee=bool(r.get("salaryVisibleToEmployee", True)),
        profile_completed=bool(r.get("profileCompleted", False)),
        salary_pin_hash=r.get("salaryPin"),
        salary_pin_reset_token_hash=r.get("salaryPinResetToken"),
        salary_pin_reset_expires=r.get("salaryPinResetExpires"),
        created_at=r.get("createdAt"),
        updated_at=r.get("updatedAt"),
    )


class MongoStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def _staffs(self):
        return self._conn_factory.db[STAFFS]

    def _find_one(self, query: dict, session: Optional[Any]) -> Optional[Staff]:
        r = self._staffs.find_one(query, session=session)
        return staff_from_document(r) if r else None

    def get_by_pk(self, pk: ObjectId, *, session: Optional[Any] = None) -> Optional[Staff]:
        return self._find_one({"_id": pk}, session)

    def get_by_user_id(self, user_id: ObjectId, *, session: Optional[Any] = None) -> Optional[Staff]:
        return self._find_one({"userId": user_id}, session)

    def get_by_staff_id(self, staff_id: str, *, session: Optional[Any] = None) -> Optional[Staff]:
        return self._find_one({"staffId": staff_id}, session)

    def get_by_reset_token_hash(self, token_hash: str, *, session: Optional[Any] = None) -> Optional[Staff]:
        return self._find_one({"salaryPinResetToken": token_hash}, session)

    def insert(self, fields: Dict[str, Any], *, session: Optional[Any] = None) -> ObjectId:
        doc = {
            "status": StaffStatus.ACTIVE.value,
            "salary": 0,
            "salaryVisibleToEmployee": True,
            "profileCompleted": False,
        }
        doc.update({k: v for k, v in fields.items() if v is not None})
        stamp_new(doc, datetime.now())
        try:
            return self._staffs.insert_one(doc, session=session).inserted_id
        except DuplicateKeyError as e:
            raise ConflictError(f"Staff with this {_duplicate_field(e)} already exists.")

    def update_fields(self, pk: ObjectId, fields: Dict[str, Any], *, session: Optional[Any] = None) -> bool:
        try:
            res = self._staffs.update_one(
                {"_id": pk},
                {"$set": {**fields, "updatedAt": datetime.now()}},
                session=session,
            )
        except DuplicateKeyError as e:
            raise ConflictError(f"Staff with this {_duplicate_field(e)} already exists.")
        return res.matched_count > 0

    def mark_profile_completed(self, pk: ObjectId, fields: Dict[str, Any], *, session: Optional[Any] = None) -> bool:
        try:
            res = self._staffs.update_one(
                {"_id": pk, "profileCompleted": {"$ne": True}},
                {"$set": {**fields, "profileCompleted": True, "updatedAt": datetime.now()}},
                session=session,
            )
        except DuplicateKeyError as e:
            raise ConflictError(f"Staff with this {_duplicate_field(e)} already exists.")
        return res.matched_count > 0

    def update_completed_profile(self, user_id: ObjectId, fields: Dict[str, Any]) -> Optional[Staff]:
        try:
            r = self._staffs.find_one_and_update(
                {"userId": user_id, "profileCompleted": True},
                {"$set": {**fields, "updatedAt": datetime.now()}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise ConflictError(f"Staff with this {_duplicate_field(e)} already exists.")
        return staff_from_document(r) if r else None


class MongoSalaryHistoryRepository(SalaryHistoryRepository):
    """Insert-only: entries are never updated or deleted."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(
        self,
        *,
        staff_pk: ObjectId,
        previous_salary: Union[int, float],
        new_salary: Union[int, float],
        changed_by: ObjectId,
        reason: Optional[str],
        effective_date: datetime,
        session: Optional[Any] = None,
    ) -> ObjectId:
        doc = stamp_new(
            {
                "staffId": staff_pk,
                "previousSalary": previous_salary,
                "newSalary": new_salary,
                "changedBy": changed_by,
                "reason": reason,
                "effectiveDate": effective_date,
            },
            datetime.now(),
        )
        return self._conn_factory.db[SALARY_HISTORIES].insert_one(doc, session=session).inserted_id

    def list_for_staff(self, staff_pk: ObjectId) -> Sequence[SalaryHistoryEntry]:
        cursor = self._conn_factory.db[SALARY_HISTORIES].find({"staffId": staff_pk}).sort(
            [("createdAt", -1), ("_id", -1)]
        )
        return [
            SalaryHistoryEntry(
                entry_id=r["_id"],
                staff_pk=r["staffId"],
                previous_salary=r.get("previousSalary") or 0,
                new_salary=r.get("newSalary") or 0,
                changed_by=r.get("changedBy"),
                effective_date=r.get("effectiveDate") or r.get("createdAt"),
                reason=r.get("reason"),
                created_at=r.get("createdAt"),
            )
            for r in cursor
        ]
