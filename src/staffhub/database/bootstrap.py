from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from pymongo import ASCENDING, DESCENDING, IndexModel, ReturnDocument
from pymongo.database import Database

from ..core import constants as c
from ..core.enums import Role, StaffStatus

logger = logging.getLogger(__name__)


INDEXES = {
    c.STAFFS: [
        IndexModel([("staffId", ASCENDING)], unique=True),
        IndexModel([("phone", ASCENDING)], unique=True),
        IndexModel([("userId", ASCENDING)], unique=True, sparse=True),
        IndexModel([("nationalId", ASCENDING)], unique=True, sparse=True),
        IndexModel([("branchId", ASCENDING)]),
        IndexModel([("department", ASCENDING)]),
        IndexModel([("status", ASCENDING)]),
        IndexModel([("createdAt", DESCENDING)]),
    ],
    c.SHIFT_ASSIGNMENTS: [
        IndexModel(
            [("staffId", ASCENDING), ("isActive", ASCENDING)],
            unique=True,
            partialFilterExpression={"isActive": True},
        ),
        IndexModel([("staffId", ASCENDING), ("startDate", ASCENDING), ("endDate", ASCENDING)]),
    ],
    c.ATTENDANCE_DAYS: [
        IndexModel([("staffId", ASCENDING), ("date", ASCENDING)], unique=True),
    ],
    c.SALARY_HISTORIES: [
        IndexModel([("staffId", ASCENDING), ("createdAt", DESCENDING)]),
    ],
    c.USERS: [
        IndexModel([("email", ASCENDING)], unique=True),
    ],
}


def ensure_indexes(db: Database) -> List[str]:
    """Create collection indexes (idempotent). Returns created index names."""

    created: List[str] = []
    for collection, models in INDEXES.items():
        names = db[collection].create_indexes(models)
        created.extend(f"{collection}.{n}" for n in names)
    logger.info("indexes ready (%d)", len(created))
    return created


def ensure_demo_data(db: Database) -> None:
    """Upsert a small demo dataset: one branch, one shift, three users/staff.

    Idempotent: documents are matched on their natural keys.
    """

    now = datetime.now()

    branch = db[c.BRANCHES].find_one_and_update(
        {"code": "HQ"},
        {"$setOnInsert": {"name": "Head Office", "code": "HQ", "isActive": True, "createdAt": now}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    shift = db[c.SHIFTS].find_one_and_update(
        {"code": "DAY"},
        {
            "$setOnInsert": {
                "name": "Day",
                "code": "DAY",
                "branchId": branch["_id"],
                "startTime": "09:00",
                "endTime": "18:00",
                "gracePeriodMinutes": 10,
                "isActive": True,
                "createdAt": now,
            }
        },
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )

    demo = [
        ("Demo Super Admin", "superadmin@example.com", Role.SUPER_ADMIN, "Director"),
        ("Demo Admin", "admin@example.com", Role.ADMIN, "Manager"),
        ("Demo Staff", "staff@example.com", Role.STAFF, "Engineer"),
    ]
    for i, (name, email, role, designation) in enumerate(demo, start=1):
        user = db[c.USERS].find_one_and_update(
            {"email": email},
            {"$setOnInsert": {"name": name, "email": email, "role": role.value, "createdAt": now}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        staff = db[c.STAFFS].find_one_and_update(
            {"userId": user["_id"]},
            {
                "$setOnInsert": {
                    "userId": user["_id"],
                    "staffId": f"DEMO-{i:04d}",
                    "phone": f"+10000000{i:02d}",
                    "branchId": branch["_id"],
                    "department": "Operations",
                    "designation": designation,
                    "joinDate": now,
                    "status": StaffStatus.ACTIVE.value,
                    "salary": 0,
                    "salaryVisibleToEmployee": True,
                    "profileCompleted": True,
                    "createdAt": now,
                    "updatedAt": now,
                }
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        db[c.SHIFT_ASSIGNMENTS].update_one(
            {"staffId": staff["_id"], "isActive": True},
            {
                "$setOnInsert": {
                    "staffId": staff["_id"],
                    "shiftId": shift["_id"],
                    "startDate": now,
                    "endDate": None,
                    "assignedBy": user["_id"],
                    "isActive": True,
                    "createdAt": now,
                }
            },
            upsert=True,
        )

    logger.info("demo data ready")
