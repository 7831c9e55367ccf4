"""In-memory repositories shared by the service and API tests.

They mirror the Mongo repositories closely enough for business-rule tests:
documents are stored as camelCase dicts, unique keys are enforced, and
``FakeUnitOfWork`` restores every registered store when a transaction block
raises.
"""

from __future__ import annotations

import copy
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId

from staffhub.branches.model import Branch
from staffhub.core.enums import Role
from staffhub.core.exceptions import ConflictError
from staffhub.roster.model import RosterResult
from staffhub.shifts.model import Shift, ShiftAssignment
from staffhub.staff.model import SalaryHistoryEntry
from staffhub.staff.mongo_staff_repository import staff_from_document
from staffhub.users.model import User


class _Store:
    def __init__(self):
        self.docs: Dict[ObjectId, dict] = {}

    def snapshot(self):
        return copy.deepcopy(self.docs)

    def restore(self, snap) -> None:
        self.docs = snap


class InMemoryStaffs(_Store):
    UNIQUE = ("staffId", "phone", "userId")

    def _check_unique(self, doc: dict, exclude: Optional[ObjectId] = None) -> None:
        for key in self.UNIQUE:
            value = doc.get(key)
            if value is None:
                continue
            for pk, other in self.docs.items():
                if pk != exclude and other.get(key) == value:
                    raise ConflictError(f"Staff with this {key} already exists.")

    def _find(self, **match):
        for doc in self.docs.values():
            if all(doc.get(k) == v for k, v in match.items()):
                return staff_from_document(doc)
        return None

    def get_by_pk(self, pk, *, session=None):
        doc = self.docs.get(pk)
        return staff_from_document(doc) if doc else None

    def get_by_user_id(self, user_id, *, session=None):
        return self._find(userId=user_id)

    def get_by_staff_id(self, staff_id, *, session=None):
        return self._find(staffId=staff_id)

    def get_by_reset_token_hash(self, token_hash, *, session=None):
        return self._find(salaryPinResetToken=token_hash)

    def insert(self, fields, *, session=None):
        doc = {
            "status": "active",
            "salary": 0,
            "salaryVisibleToEmployee": True,
            "profileCompleted": False,
        }
        doc.update({k: v for k, v in fields.items() if v is not None})
        self._check_unique(doc)
        pk = ObjectId()
        doc["_id"] = pk
        doc["createdAt"] = doc["updatedAt"] = datetime(2026, 3, 1, 9, 0, 0)
        self.docs[pk] = doc
        return pk

    def update_fields(self, pk, fields, *, session=None):
        if pk not in self.docs:
            return False
        merged = {**self.docs[pk], **fields}
        self._check_unique(merged, exclude=pk)
        self.docs[pk] = merged
        return True

    def mark_profile_completed(self, pk, fields, *, session=None):
        doc = self.docs.get(pk)
        if not doc or doc.get("profileCompleted"):
            return False
        return self.update_fields(pk, {**fields, "profileCompleted": True})

    def update_completed_profile(self, user_id, fields):
        for pk, doc in self.docs.items():
            if doc.get("userId") == user_id and doc.get("profileCompleted"):
                self.update_fields(pk, fields)
                return staff_from_document(self.docs[pk])
        return None


class InMemorySalaryHistory(_Store):
    def __init__(self, *, fail_on_append: bool = False):
        super().__init__()
        self.fail_on_append = fail_on_append

    def append(self, *, staff_pk, previous_salary, new_salary, changed_by, reason, effective_date, session=None):
        if self.fail_on_append:
            raise RuntimeError("simulated write failure")
        entry_id = ObjectId()
        self.docs[entry_id] = {
            "_id": entry_id,
            "staffId": staff_pk,
            "previousSalary": previous_salary,
            "newSalary": new_salary,
            "changedBy": changed_by,
            "reason": reason,
            "effectiveDate": effective_date,
            "createdAt": effective_date,
        }
        return entry_id

    def list_for_staff(self, staff_pk):
        rows = [d for d in self.docs.values() if d["staffId"] == staff_pk]
        rows.sort(key=lambda d: (d["createdAt"], d["_id"]), reverse=True)
        return [
            SalaryHistoryEntry(
                entry_id=d["_id"],
                staff_pk=d["staffId"],
                previous_salary=d["previousSalary"],
                new_salary=d["newSalary"],
                changed_by=d["changedBy"],
                effective_date=d["effectiveDate"],
                reason=d["reason"],
                created_at=d["createdAt"],
            )
            for d in rows
        ]


class InMemoryUsers(_Store):
    def add(self, *, name: str, email: str, role: Role) -> ObjectId:
        user_id = ObjectId()
        self.docs[user_id] = {"_id": user_id, "name": name, "email": email, "role": role.value}
        return user_id

    def get_by_id(self, user_id, *, session=None):
        d = self.docs.get(user_id)
        if not d:
            return None
        return User(user_id=d["_id"], name=d["name"], email=d["email"], role=Role(d["role"]))

    def set_role(self, user_id, role, *, session=None):
        if user_id not in self.docs:
            return False
        self.docs[user_id] = {**self.docs[user_id], "role": role.value}
        return True


class InMemoryBranches(_Store):
    def add(self, name: str = "Head Office", code: str = "HQ") -> ObjectId:
        branch_id = ObjectId()
        self.docs[branch_id] = {"_id": branch_id, "name": name, "code": code}
        return branch_id

    def get_by_id(self, branch_id, *, session=None):
        d = self.docs.get(branch_id)
        return Branch(branch_id=d["_id"], name=d["name"], code=d["code"]) if d else None


class InMemoryCounters(_Store):
    def next_value(self, name, *, session=None):
        doc = self.docs.setdefault(name, {"_id": name, "seq": 0})
        doc["seq"] += 1
        return doc["seq"]


class InMemoryShifts(_Store):
    def add(self, *, name: str = "Day", is_active: bool = True) -> ObjectId:
        shift_id = ObjectId()
        self.docs[shift_id] = Shift(
            shift_id=shift_id, name=name, code=name.upper(), start_time="09:00", end_time="18:00", is_active=is_active
        )
        return shift_id

    def get_by_id(self, shift_id, *, session=None):
        return self.docs.get(shift_id)


class InMemoryAssignments(_Store):
    def get_active_for_staff(self, staff_pk, *, session=None):
        active = [a for a in self.docs.values() if a.staff_pk == staff_pk and a.is_active]
        return active[-1] if active else None

    def close(self, assignment_id, *, end_date, session=None):
        a = self.docs.get(assignment_id)
        if not a:
            return False
        self.docs[assignment_id] = ShiftAssignment(
            assignment_id=a.assignment_id,
            staff_pk=a.staff_pk,
            shift_id=a.shift_id,
            start_date=a.start_date,
            end_date=end_date,
            is_active=False,
            assigned_by=a.assigned_by,
        )
        return True

    def create(self, *, staff_pk, shift_id, start_date, assigned_by, session=None):
        assignment_id = ObjectId()
        self.docs[assignment_id] = ShiftAssignment(
            assignment_id=assignment_id,
            staff_pk=staff_pk,
            shift_id=shift_id,
            start_date=start_date,
            end_date=None,
            is_active=True,
            assigned_by=assigned_by,
        )
        return assignment_id


class FakeUnitOfWork:
    """Snapshot every store on entry; restore all of them if the block raises."""

    def __init__(self, *stores: _Store):
        self._stores = stores
        self.committed = 0
        self.aborted = 0

    @contextmanager
    def transaction(self):
        snaps = [s.snapshot() for s in self._stores]
        try:
            yield None
        except Exception:
            for store, snap in zip(self._stores, snaps):
                store.restore(snap)
            self.aborted += 1
            raise
        self.committed += 1


class FakeRosterRepo:
    def __init__(self, rows: List[dict], total: Optional[int] = None):
        self._rows = rows
        self._total = len(rows) if total is None else total
        self.calls: List[Dict[str, Any]] = []

    def fetch_page(self, filters, *, now):
        self.calls.append({"filters": filters, "now": now})
        page = self._rows[filters.skip : filters.skip + filters.limit]
        return RosterResult(rows=page, total=self._total)
